"""
Proposal -- the quote aggregate.

Responsibility
--------------
A frozen snapshot of one travel quote: basic info (source, sales person,
destinations, agency, dates), pricing parameters (margin, commission,
currency) and the five line-item collections.  Every edit produces a new
Proposal; services persist the result through the repository.

Architecture position
---------------------
**Kernel domain layer** -- pure value object.  ZERO I/O.

Invariants enforced
-------------------
* Collections are tuples; line ids are unique within a collection.
* ``status`` moves only along PROPOSAL_WORKFLOW (enforced by services).
* A blank line currency means "the proposal currency".
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterator
from uuid import UUID

from tour_kernel.domain.lifecycles import ProposalStatus
from tour_kernel.domain.line_items import (
    AdditionalServiceLine,
    FlightLine,
    HotelLine,
    LineItem,
    RentACarLine,
    TransportationLine,
)
from tour_kernel.domain.service_kinds import ServiceKind

DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class Proposal:
    """
    Contract:
        Immutable; ``with_*`` helpers return modified copies.

    Guarantees:
        ``lines(kind)`` works for every ServiceKind, in insertion order.

    Non-goals:
        Does NOT validate itself -- see domain/validation.py.
        Does NOT price itself -- see domain/pricing.py.
    """

    id: UUID
    reference: str
    source: str = ""
    sales_person_id: str = ""
    destination_ids: tuple[str, ...] = ()
    agency_id: str = ""
    estimated_nights: int | str = ""
    status: ProposalStatus = ProposalStatus.NEW
    created_at: datetime | None = None
    overall_margin: str = "15"
    commission: str = "5"
    pdf_language: str = "en"
    display_currency: str = "usd"
    proposal_currency: str = DEFAULT_CURRENCY
    proposal_start_date: str = ""
    proposal_end_date: str = ""
    hotels: tuple[HotelLine, ...] = ()
    transportation: tuple[TransportationLine, ...] = ()
    flights: tuple[FlightLine, ...] = ()
    rent_a_car: tuple[RentACarLine, ...] = ()
    additional_services: tuple[AdditionalServiceLine, ...] = ()

    @property
    def is_editable(self) -> bool:
        return self.status == ProposalStatus.NEW

    @property
    def is_confirmed(self) -> bool:
        return self.status == ProposalStatus.CONFIRMED

    def lines(self, kind: ServiceKind | str) -> tuple[LineItem, ...]:
        return getattr(self, ServiceKind.parse(kind).collection_attr)

    def all_lines(self) -> Iterator[tuple[ServiceKind, LineItem]]:
        """Every line with its kind, collection by collection."""
        for kind in ServiceKind:
            for line in self.lines(kind):
                yield kind, line

    def find_line(self, kind: ServiceKind | str, line_id: int) -> LineItem | None:
        for line in self.lines(kind):
            if line.id == line_id:
                return line
        return None

    def with_lines(self, kind: ServiceKind | str, lines: tuple[LineItem, ...]) -> Proposal:
        return replace(self, **{ServiceKind.parse(kind).collection_attr: tuple(lines)})

    def with_status(self, status: ProposalStatus) -> Proposal:
        return replace(self, status=status)

    def line_currency(self, line: LineItem) -> str:
        """The currency a line is priced in; blank inherits the proposal's."""
        tag = (line.currency or "").strip().upper()
        return tag or (self.proposal_currency or "").strip().upper()
