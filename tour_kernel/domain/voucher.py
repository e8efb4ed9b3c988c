"""
Voucher -- one confirmed service sent to a supplier.

Responsibility
--------------
Frozen voucher and guest value objects plus the pure edit functions used
by VoucherService: pax counts, the guest list and notes.  Status moves go
through VOUCHER_WORKFLOW in the service layer.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* SNAPSHOT_ON_CONFIRM -- ``service_data`` is the frozen line value taken at
  confirmation time.  No edit function touches it.
* ``total_pax == adults + children``; counts are never negative.
* Guest ids are unique within a voucher.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from uuid import UUID

from tour_kernel.domain.lifecycles import VoucherStatus
from tour_kernel.domain.line_items import LineItem
from tour_kernel.domain.service_kinds import ServiceType
from tour_kernel.exceptions import GuestNotFoundError, UnknownLineFieldError, ValidationFailure


@dataclass(frozen=True)
class Guest:
    """A traveller on a voucher. All fields are free text from the booking form."""

    id: int
    first_name: str = ""
    last_name: str = ""
    passport_number: str = ""
    nationality: str = ""
    birth_date: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


_GUEST_FIELDS = frozenset(f.name for f in fields(Guest)) - {"id"}


@dataclass(frozen=True)
class Voucher:
    """
    Contract:
        Immutable; edit functions in this module return modified copies.

    Guarantees:
        service_type/service_id address the originating line within its
        proposal; service_data is that line as it was at confirmation.
    """

    id: UUID
    proposal_id: UUID
    proposal_reference: str
    service_type: ServiceType
    service_id: int
    service_data: LineItem
    status: VoucherStatus = VoucherStatus.PENDING_PAYMENT
    source: str = ""
    agency_id: str = ""
    sales_person_id: str = ""
    guests: tuple[Guest, ...] = ()
    adults: int = 0
    children: int = 0
    total_pax: int = 0
    notes: str = ""
    created_at: datetime | None = None

    def find_guest(self, guest_id: int) -> Guest | None:
        for guest in self.guests:
            if guest.id == guest_id:
                return guest
        return None


def with_status(voucher: Voucher, status: VoucherStatus) -> Voucher:
    """Status only; VoucherService checks the move against VOUCHER_WORKFLOW."""
    return replace(voucher, status=status)


def with_pax(voucher: Voucher, adults: int, children: int) -> Voucher:
    """Set adult/child counts; total_pax follows."""
    errors = []
    if adults < 0:
        errors.append("Adults cannot be negative")
    if children < 0:
        errors.append("Children cannot be negative")
    if errors:
        raise ValidationFailure(errors)
    return replace(voucher, adults=adults, children=children, total_pax=adults + children)


def with_notes(voucher: Voucher, notes: str) -> Voucher:
    return replace(voucher, notes=notes or "")


def _next_guest_id(voucher: Voucher) -> int:
    return max((g.id for g in voucher.guests), default=0) + 1


def add_guest(voucher: Voucher, **details: str) -> Voucher:
    """Append a guest (blank unless details are given) with the next free id."""
    _check_guest_fields(details)
    guest = Guest(id=_next_guest_id(voucher), **details)
    return replace(voucher, guests=voucher.guests + (guest,))


def update_guest(voucher: Voucher, guest_id: int, **changes: str) -> Voucher:
    _check_guest_fields(changes)
    _require_guest(voucher, guest_id)
    guests = tuple(
        replace(g, **changes) if g.id == guest_id else g for g in voucher.guests
    )
    return replace(voucher, guests=guests)


def remove_guest(voucher: Voucher, guest_id: int) -> Voucher:
    _require_guest(voucher, guest_id)
    return replace(voucher, guests=tuple(g for g in voucher.guests if g.id != guest_id))


def duplicate_guest(voucher: Voucher, guest_id: int) -> Voucher:
    """Append a copy of a guest under a new id."""
    original = _require_guest(voucher, guest_id)
    copy = replace(original, id=_next_guest_id(voucher))
    return replace(voucher, guests=voucher.guests + (copy,))


def _require_guest(voucher: Voucher, guest_id: int) -> Guest:
    guest = voucher.find_guest(guest_id)
    if guest is None:
        raise GuestNotFoundError(str(voucher.id), guest_id)
    return guest


def _check_guest_fields(changes: dict[str, str]) -> None:
    for name in changes:
        if name not in _GUEST_FIELDS:
            raise UnknownLineFieldError("guest", name)
