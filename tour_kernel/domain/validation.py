"""
Validation -- line-item validators and the two proposal gates.

Responsibility:
    Decides whether a proposal may move forward in the sales flow:

    * ``validate_line``       -- one line in isolation (empty-slot rule and
                                 the kind's required fields)
    * ``validate_basic_info`` -- gate 1: who is selling, to whom, where
    * ``validate_itinerary``  -- gate 2: every line valid, at least one
                                 complete entry, dates inside the proposal
                                 range, no foreign line currency

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.  Master-data lookups (hotel
    option checks) live in the service layer.

Invariants enforced:
    Gates never mutate and never short-circuit: every violation is
    collected so the user sees the complete list at once.

Failure modes:
    ``validate_*`` never raise.  ``ensure_*`` raise ValidationFailure with
    all messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet

from tour_kernel.domain.amounts import parse_date_or_none
from tour_kernel.domain.currency import CurrencyRegistry
from tour_kernel.domain.line_items import LineItem
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.exceptions import ValidationFailure

REQUIRED_FIELD = "REQUIRED_FIELD"
NO_COMPLETE_ENTRY = "NO_COMPLETE_ENTRY"
OUT_OF_RANGE = "DATE_OUT_OF_RANGE"
FOREIGN_CURRENCY = "FOREIGN_CURRENCY"


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation problem.

    Contract:
        Machine-readable code, human-readable message and the offending
        field name when there is one.
    """

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of validating one line.

    Guarantees:
        - errors is always a tuple (never None)
        - bool(result) == result.is_valid
    """

    is_valid: bool
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(is_valid=True, errors=())

    @classmethod
    def failure(cls, *errors: ValidationError) -> ValidationResult:
        return cls(is_valid=False, errors=tuple(errors))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def __bool__(self) -> bool:
        return self.is_valid


def _is_set(value: object) -> bool:
    if value is None:
        return False
    return bool(str(value).strip())


def _prefix(line: LineItem, position: int) -> str:
    return f"{line.kind.label} {position}"


def validate_line(line: LineItem, position: int) -> ValidationResult:
    """
    Validate one line.  ``position`` is its 1-based place in the collection
    and only appears in messages ("Hotel 2: room type is required").

    A row with no user-entered field is an empty slot and is valid.
    """
    if line.is_blank:
        return ValidationResult.success()
    errors = [
        ValidationError(
            code=REQUIRED_FIELD,
            message=f"{_prefix(line, position)}: {label} is required",
            field=name,
        )
        for name, label in line.REQUIRED_FIELDS
        if not _is_set(getattr(line, name))
    ]
    if errors:
        return ValidationResult.failure(*errors)
    return ValidationResult.success()


def is_complete_entry(line: LineItem) -> bool:
    """A non-empty line that passes its validator."""
    return not line.is_blank and validate_line(line, 1).is_valid


# ---------------------------------------------------------------------------
# Gate 1: basic info
# ---------------------------------------------------------------------------


def validate_basic_info(
    proposal: Proposal,
    agency_source_ids: AbstractSet[str] = frozenset(),
) -> list[str]:
    """
    Sales person, source, at least one destination and a proposal currency
    are required.  Sources listed in ``agency_source_ids`` also require an
    agency.
    """
    errors: list[str] = []
    if not _is_set(proposal.sales_person_id):
        errors.append("Sales person is required")
    if not _is_set(proposal.source):
        errors.append("Source is required")
    elif proposal.source in agency_source_ids and not _is_set(proposal.agency_id):
        errors.append("Agency is required for agency bookings")
    if not any(_is_set(d) for d in proposal.destination_ids):
        errors.append("At least one destination is required")

    currency = (proposal.proposal_currency or "").strip()
    if not currency:
        errors.append("Proposal currency is required")
    elif not CurrencyRegistry.is_valid(currency):
        errors.append(f"Proposal currency {currency} is not a valid currency code")

    start = parse_date_or_none(proposal.proposal_start_date)
    end = parse_date_or_none(proposal.proposal_end_date)
    if start is not None and end is not None and end < start:
        errors.append("Proposal end date must not be before the start date")
    return errors


# ---------------------------------------------------------------------------
# Gate 2: itinerary
# ---------------------------------------------------------------------------


def _field_label(line: LineItem, name: str) -> str:
    return dict(line.REQUIRED_FIELDS).get(name, name.replace("_", " "))


def _date_range_errors(proposal: Proposal, line: LineItem, position: int) -> list[str]:
    start = parse_date_or_none(proposal.proposal_start_date)
    end = parse_date_or_none(proposal.proposal_end_date)
    if start is None or end is None:
        return []
    errors = []
    for name in line.DATE_FIELDS:
        value = parse_date_or_none(getattr(line, name))
        if value is not None and not (start <= value <= end):
            errors.append(
                f"{_prefix(line, position)}: {_field_label(line, name)} "
                f"{value.isoformat()} is outside the proposal dates "
                f"({start.isoformat()} to {end.isoformat()})"
            )
    return errors


def validate_itinerary(proposal: Proposal, enforce_date_range: bool = True) -> list[str]:
    """
    Every line passes its validator and at least one collection holds a
    complete entry.  Line dates must fall inside the proposal date range
    when both ends are set, and a non-blank line currency must equal the
    proposal currency.
    """
    errors: list[str] = []
    has_complete_entry = False
    proposal_currency = (proposal.proposal_currency or "").strip().upper()

    for kind in ServiceKind:
        for position, line in enumerate(proposal.lines(kind), start=1):
            result = validate_line(line, position)
            errors.extend(result.messages)
            if line.is_blank:
                continue
            if result.is_valid:
                has_complete_entry = True
            if enforce_date_range:
                errors.extend(_date_range_errors(proposal, line, position))
            tag = (line.currency or "").strip().upper()
            if tag and proposal_currency and tag != proposal_currency:
                errors.append(
                    f"{_prefix(line, position)}: currency {tag} differs from "
                    f"the proposal currency {proposal_currency}"
                )

    if not has_complete_entry:
        errors.append("Add at least one service to the itinerary")
    return errors


def ensure_basic_info(
    proposal: Proposal,
    agency_source_ids: AbstractSet[str] = frozenset(),
) -> None:
    """Raises ValidationFailure with every basic-info message."""
    errors = validate_basic_info(proposal, agency_source_ids)
    if errors:
        raise ValidationFailure(errors)


def ensure_itinerary(proposal: Proposal, enforce_date_range: bool = True) -> None:
    """Raises ValidationFailure with every itinerary message."""
    errors = validate_itinerary(proposal, enforce_date_range)
    if errors:
        raise ValidationFailure(errors)
