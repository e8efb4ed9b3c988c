"""
Kernel Invariants Contract.

These invariants are structural law for quoting and confirmation. No
QuotingPolicy setting may override them.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across the line-item update functions, the
pricing aggregator, the proposal/voucher workflows and ConfirmationService.
"""

from enum import Enum, unique


@unique
class KernelInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that the kernel provides
    unconditionally. Policy may influence defaults, but never *whether*
    these rules apply.
    """

    CONFIRMED_PROPOSAL_FROZEN = "confirmed_proposal_frozen"
    """Line items and basic info of a non-NEW proposal cannot change.
    Enforced by ProposalService before any mutation."""

    SINGLE_CONFIRMATION = "single_confirmation"
    """A proposal is confirmed at most once, so vouchers are never
    duplicated. Enforced by ConfirmationService and the vouchers unique
    constraint."""

    SNAPSHOT_ON_CONFIRM = "snapshot_on_confirm"
    """Voucher service data is a frozen value copy of the line item at
    confirmation time."""

    CASCADING_CLEAR = "cascading_clear"
    """Changing a hotel line's destination or hotel clears the selections
    that only make sense for the previous hotel. Enforced by update_line."""

    ADDITIVE_PRICING = "additive_pricing"
    """Margin and commission are computed independently against the same
    subtotal and added. Enforced by compute_proposal_totals."""

    LENIENT_PARSING = "lenient_parsing"
    """Unparsable numeric text is zero, never an error. Enforced by the
    parse_*_or_zero helpers."""


# All invariants as a frozenset for programmatic checks.
ALL_KERNEL_INVARIANTS: frozenset[KernelInvariant] = frozenset(KernelInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "tour_config",
)
