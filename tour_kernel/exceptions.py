"""
Typed Exception Hierarchy for the Tour Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the presentation layer, import scripts, API handlers) must react to
errors by category, not by parsing messages:

  - a ValidationFailure is shown to the user as a list of messages
  - a StateConflict is a hard rejection ("this proposal is already confirmed")
  - a CurrencyError means the proposal mixes currencies and cannot be summed

Every exception:
  1. Is a TYPED class (catch by type, not message)
  2. Has a class-level CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        confirmation_service.confirm_proposal(proposal_id, selection)
    except EmptySelectionError as e:
        show_errors(e.errors)
    except ProposalAlreadyConfirmedError as e:
        api_response(code=e.code, proposal_id=e.proposal_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    TourKernelError (base)
    |
    +-- ValidationFailure
    |   +-- EmptySelectionError      (also a StateConflictError)
    |   +-- UnknownProposalFieldError
    |
    +-- StateConflictError
    |   +-- ProposalNotFoundError
    |   +-- ProposalAlreadyConfirmedError
    |   +-- ProposalNotEditableError
    |   +-- InvalidTransitionError
    |   +-- VoucherNotFoundError
    |   +-- DuplicateVoucherError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- LineItemError
        +-- LineItemNotFoundError
        +-- UnknownServiceKindError
        +-- UnknownLineFieldError
        +-- GuestNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | VALIDATION_FAILED           | Required fields missing, gates failed
                | EMPTY_SELECTION             | Confirm called with nothing selected
                | UNKNOWN_PROPOSAL_FIELD      | Basic info names an unknown field
----------------|-----------------------------|-----------------------------------------
State           | PROPOSAL_NOT_FOUND          | Proposal id does not resolve
                | PROPOSAL_ALREADY_CONFIRMED  | Second confirm on the same proposal
                | PROPOSAL_NOT_EDITABLE       | Editing a CONFIRMED/CANCELLED proposal
                | INVALID_TRANSITION          | Workflow does not allow from -> to
                | VOUCHER_NOT_FOUND           | Voucher id does not resolve
                | DUPLICATE_VOUCHER           | Second voucher for one proposal line
----------------|-----------------------------|-----------------------------------------
Currency        | INVALID_CURRENCY            | Not a known ISO 4217 code
                | CURRENCY_MISMATCH           | Line currency differs from proposal
----------------|-----------------------------|-----------------------------------------
Line item       | LINE_ITEM_NOT_FOUND         | Line id not in its collection
                | UNKNOWN_SERVICE_KIND        | Selection/collection key not a kind
                | UNKNOWN_LINE_FIELD          | Update names a field the kind lacks
                | GUEST_NOT_FOUND             | Guest id not on the voucher

===============================================================================
WHAT IS NOT AN ERROR
===============================================================================

1. Dangling master-data references (destination, hotel, agency, user,
   source) degrade to "Unknown X" labels. Nothing is raised.

2. Unparsable numeric text (prices, percentages, quantities) is zero.
   Lenient parsing is a compatibility policy, see domain/amounts.py.

===============================================================================
"""

from __future__ import annotations


class TourKernelError(Exception):
    """
    Base exception for all tour kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TOUR_KERNEL_ERROR"


# Validation exceptions


class ValidationFailure(TourKernelError):
    """
    One or more human-readable validation messages.

    Always carries the full list; validators never short-circuit on the
    first problem.
    """

    code: str = "VALIDATION_FAILED"

    def __init__(self, errors: list[str] | tuple[str, ...]):
        self.errors = tuple(errors)
        summary = "; ".join(self.errors) if self.errors else "validation failed"
        super().__init__(f"Validation failed: {summary}")


class UnknownProposalFieldError(ValidationFailure):
    """Basic-info create or update names a field a proposal does not have."""

    code: str = "UNKNOWN_PROPOSAL_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__([f"Proposals have no editable field {field_name!r}"])


# State conflict exceptions


class StateConflictError(TourKernelError):
    """Base exception for lifecycle conflicts. Raised with no side effects."""

    code: str = "STATE_CONFLICT"


class EmptySelectionError(ValidationFailure, StateConflictError):
    """Confirmation requested with no resolvable line items selected."""

    code: str = "EMPTY_SELECTION"

    def __init__(self, proposal_id: str):
        self.proposal_id = proposal_id
        super().__init__(["Select at least one service to confirm"])


class ProposalNotFoundError(StateConflictError):
    """Proposal with given ID was not found."""

    code: str = "PROPOSAL_NOT_FOUND"

    def __init__(self, proposal_id: str):
        self.proposal_id = proposal_id
        super().__init__(f"Proposal not found: {proposal_id}")


class ProposalAlreadyConfirmedError(StateConflictError):
    """Proposal is already CONFIRMED; confirming again would duplicate vouchers."""

    code: str = "PROPOSAL_ALREADY_CONFIRMED"

    def __init__(self, proposal_id: str, reference: str):
        self.proposal_id = proposal_id
        self.reference = reference
        super().__init__(f"Proposal {reference} ({proposal_id}) is already confirmed")


class ProposalNotEditableError(StateConflictError):
    """Line items and basic info are frozen once a proposal leaves NEW."""

    code: str = "PROPOSAL_NOT_EDITABLE"

    def __init__(self, proposal_id: str, status: str):
        self.proposal_id = proposal_id
        self.status = status
        super().__init__(
            f"Proposal {proposal_id} is {status} and can no longer be edited; "
            f"copy it into a new proposal instead"
        )


class InvalidTransitionError(StateConflictError):
    """The workflow has no transition between the two states."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, workflow: str, from_state: str, to_state: str):
        self.workflow = workflow
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid {workflow} transition: {from_state} -> {to_state}"
        )


class VoucherNotFoundError(StateConflictError):
    """Voucher with given ID was not found."""

    code: str = "VOUCHER_NOT_FOUND"

    def __init__(self, voucher_id: str):
        self.voucher_id = voucher_id
        super().__init__(f"Voucher not found: {voucher_id}")


class DuplicateVoucherError(StateConflictError):
    """A voucher already exists for this proposal line."""

    code: str = "DUPLICATE_VOUCHER"

    def __init__(self, proposal_id: str, service_type: str, service_id: int):
        self.proposal_id = proposal_id
        self.service_type = service_type
        self.service_id = service_id
        super().__init__(
            f"Proposal {proposal_id} already has a {service_type} voucher "
            f"for service {service_id}"
        )


# Currency exceptions


class CurrencyError(TourKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency code is not a known ISO 4217 code."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid currency code: {currency!r}")


class CurrencyMismatchError(CurrencyError):
    """A priced line item is tagged with a currency other than the proposal's."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, proposal_currency: str, line_currency: str, kind: str, line_id: int):
        self.proposal_currency = proposal_currency
        self.line_currency = line_currency
        self.kind = kind
        self.line_id = line_id
        super().__init__(
            f"{kind} line {line_id} is priced in {line_currency} but the "
            f"proposal currency is {proposal_currency}"
        )


# Line item exceptions


class LineItemError(TourKernelError):
    """Base exception for line-item errors."""

    code: str = "LINE_ITEM_ERROR"


class LineItemNotFoundError(LineItemError):
    """Line id does not exist in the given collection."""

    code: str = "LINE_ITEM_NOT_FOUND"

    def __init__(self, kind: str, line_id: int):
        self.kind = kind
        self.line_id = line_id
        super().__init__(f"No {kind} line with id {line_id}")


class UnknownServiceKindError(LineItemError):
    """Key is not one of the five service kinds."""

    code: str = "UNKNOWN_SERVICE_KIND"

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown service kind: {kind!r}")


class UnknownLineFieldError(LineItemError):
    """Update names a field that the line variant does not have or allow."""

    code: str = "UNKNOWN_LINE_FIELD"

    def __init__(self, kind: str, field_name: str):
        self.kind = kind
        self.field_name = field_name
        super().__init__(f"{kind} lines have no editable field {field_name!r}")


class GuestNotFoundError(LineItemError):
    """Guest id is not on the voucher."""

    code: str = "GUEST_NOT_FOUND"

    def __init__(self, voucher_id: str, guest_id: int):
        self.voucher_id = voucher_id
        self.guest_id = guest_id
        super().__init__(f"Voucher {voucher_id} has no guest {guest_id}")
