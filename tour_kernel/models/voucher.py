"""
Module: tour_kernel.models.voucher
Responsibility: ORM persistence for vouchers.  The line snapshot and the
    guest list are JSON columns.
Architecture position: Kernel > Models.  Imports db/base.py and the domain
    value objects it converts to and from.

Invariants enforced:
    SINGLE_CONFIRMATION -- uq_voucher_service: a proposal line yields at
    most one voucher, even if two confirmations race past the status check.

Failure modes:
    - IntegrityError on a second voucher for the same
      (proposal_id, service_type, service_id).
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tour_kernel.db.base import Base, UUIDString
from tour_kernel.domain.lifecycles import VoucherStatus
from tour_kernel.domain.line_items import line_from_dict, line_to_dict
from tour_kernel.domain.service_kinds import ServiceType
from tour_kernel.domain.voucher import Guest, Voucher
from tour_kernel.models.proposal import as_utc


class VoucherModel(Base):
    """
    A persisted voucher.

    Guarantees:
        - service_data round-trips to the same frozen line value.

    Non-goals:
        - Does NOT enforce the voucher workflow; VoucherService does.
    """

    __tablename__ = "vouchers"

    __table_args__ = (
        UniqueConstraint(
            "proposal_id", "service_type", "service_id", name="uq_voucher_service"
        ),
        Index("idx_voucher_proposal", "proposal_id"),
        Index("idx_voucher_status", "status"),
    )

    proposal_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("proposals.id"),
        nullable=False,
    )
    # Snapshot; the voucher keeps its reference even if the proposal is copied.
    proposal_reference: Mapped[str] = mapped_column(String(50), nullable=False)
    service_type: Mapped[str] = mapped_column(String(20), nullable=False)
    service_id: Mapped[int] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VoucherStatus.PENDING_PAYMENT.value,
    )

    source: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    agency_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    sales_person_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    guests: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    adults: Mapped[int] = mapped_column(nullable=False, default=0)
    children: Mapped[int] = mapped_column(nullable=False, default=0)
    total_pax: Mapped[int] = mapped_column(nullable=False, default=0)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    service_data: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Voucher {self.id} {self.proposal_reference} "
            f"{self.service_type}#{self.service_id} status={self.status}>"
        )

    def to_dto(self) -> Voucher:
        service_type = ServiceType(self.service_type)
        return Voucher(
            id=self.id,
            proposal_id=self.proposal_id,
            proposal_reference=self.proposal_reference,
            service_type=service_type,
            service_id=self.service_id,
            service_data=line_from_dict(service_type.kind, self.service_data),
            status=VoucherStatus(self.status),
            source=self.source,
            agency_id=self.agency_id,
            sales_person_id=self.sales_person_id,
            guests=tuple(Guest(**g) for g in self.guests or []),
            adults=self.adults,
            children=self.children,
            total_pax=self.total_pax,
            notes=self.notes,
            created_at=as_utc(self.created_at),
        )

    @classmethod
    def from_dto(cls, dto: Voucher) -> VoucherModel:
        model = cls(
            id=dto.id,
            proposal_id=dto.proposal_id,
            proposal_reference=dto.proposal_reference,
            service_type=dto.service_type.value,
            service_id=dto.service_id,
            service_data=line_to_dict(dto.service_data),
            created_at=dto.created_at,
        )
        model.apply_dto(dto)
        return model

    def apply_dto(self, dto: Voucher) -> None:
        """Copy the editable voucher fields. The snapshot is never rewritten."""
        self.status = dto.status.value
        self.source = dto.source
        self.agency_id = dto.agency_id
        self.sales_person_id = dto.sales_person_id
        self.guests = [asdict(g) for g in dto.guests]
        self.adults = dto.adults
        self.children = dto.children
        self.total_pax = dto.total_pax
        self.notes = dto.notes
