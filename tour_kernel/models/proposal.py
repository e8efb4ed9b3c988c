"""
Module: tour_kernel.models.proposal
Responsibility: ORM persistence for proposals.  Basic info and pricing
    parameters are columns; the five line-item collections are JSON lists
    of line dicts (see domain/line_items.line_to_dict).
Architecture position: Kernel > Models.  Imports db/base.py and the domain
    value objects it converts to and from.

Invariants enforced:
    - reference is unique (uq_proposal_reference).
    - Line totals and nights are recomputed when rows are loaded; the stored
      values are informational only.

Failure modes:
    - IntegrityError on a duplicate reference.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tour_kernel.db.base import Base
from tour_kernel.domain.lifecycles import ProposalStatus
from tour_kernel.domain.line_items import line_from_dict, line_to_dict
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on read; stored timestamps are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class ProposalModel(Base):
    """
    A persisted proposal.

    Contract:
        to_dto()/from_dto() convert losslessly to the frozen Proposal.

    Non-goals:
        - Does NOT enforce the proposal workflow; services do.
    """

    __tablename__ = "proposals"

    __table_args__ = (
        UniqueConstraint("reference", name="uq_proposal_reference"),
        Index("idx_proposal_status", "status"),
        Index("idx_proposal_source", "source"),
        Index("idx_proposal_created_at", "created_at"),
    )

    reference: Mapped[str] = mapped_column(String(50), nullable=False)
    source: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    sales_person_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    agency_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    destination_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    estimated_nights: Mapped[Any] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ProposalStatus.NEW.value,
    )
    created_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Pricing parameters are kept as typed text; parsing is lenient.
    overall_margin: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    commission: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    pdf_language: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    display_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="")
    proposal_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="")
    proposal_start_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    proposal_end_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    hotels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    transportation: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    flights: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rent_a_car: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    additional_services: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Proposal {self.reference} status={self.status}>"

    def to_dto(self) -> Proposal:
        """Convert ORM model to the frozen domain Proposal."""
        collections = {
            kind.collection_attr: tuple(
                line_from_dict(kind, data)
                for data in getattr(self, kind.collection_attr) or []
            )
            for kind in ServiceKind
        }
        return Proposal(
            id=self.id,
            reference=self.reference,
            source=self.source,
            sales_person_id=self.sales_person_id,
            destination_ids=tuple(self.destination_ids or ()),
            agency_id=self.agency_id,
            estimated_nights=self.estimated_nights if self.estimated_nights is not None else "",
            status=ProposalStatus(self.status),
            created_at=as_utc(self.created_at),
            overall_margin=self.overall_margin,
            commission=self.commission,
            pdf_language=self.pdf_language,
            display_currency=self.display_currency,
            proposal_currency=self.proposal_currency,
            proposal_start_date=self.proposal_start_date,
            proposal_end_date=self.proposal_end_date,
            **collections,
        )

    @classmethod
    def from_dto(cls, dto: Proposal) -> ProposalModel:
        """Create ORM model from the domain Proposal."""
        model = cls(id=dto.id)
        model.apply_dto(dto)
        return model

    def apply_dto(self, dto: Proposal) -> None:
        """Overwrite every column with the values of ``dto``."""
        self.reference = dto.reference
        self.source = dto.source
        self.sales_person_id = dto.sales_person_id
        self.agency_id = dto.agency_id
        self.destination_ids = list(dto.destination_ids)
        self.estimated_nights = dto.estimated_nights
        self.status = dto.status.value
        self.created_at = dto.created_at
        self.overall_margin = dto.overall_margin
        self.commission = dto.commission
        self.pdf_language = dto.pdf_language
        self.display_currency = dto.display_currency
        self.proposal_currency = dto.proposal_currency
        self.proposal_start_date = dto.proposal_start_date
        self.proposal_end_date = dto.proposal_end_date
        for kind in ServiceKind:
            setattr(
                self,
                kind.collection_attr,
                [line_to_dict(line) for line in dto.lines(kind)],
            )
