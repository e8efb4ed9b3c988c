"""
Pure domain layer.

This package contains the value objects and rules of quoting with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Configuration files

All domain objects are immutable.  Time enters only through Clock.
"""

from tour_kernel.domain.amounts import (
    apply_percent,
    nights_between,
    parse_amount_or_zero,
    parse_percent_or_zero,
    parse_quantity_or_zero,
)
from tour_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from tour_kernel.domain.confirmation import ConfirmationResult, UnresolvedSelection
from tour_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from tour_kernel.domain.lifecycles import (
    PROPOSAL_WORKFLOW,
    VOUCHER_WORKFLOW,
    ProposalStatus,
    VoucherStatus,
)
from tour_kernel.domain.line_items import (
    AdditionalServiceLine,
    FlightLine,
    HotelLine,
    LineItem,
    RentACarLine,
    TransportationLine,
    new_line,
    update_line,
)
from tour_kernel.domain.master_data import (
    Agency,
    Destination,
    Hotel,
    InMemoryMasterData,
    MasterDataProvider,
    ReferenceResolver,
    Source,
    User,
)
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.pricing import (
    ProposalTotals,
    compute_kind_subtotal,
    compute_line_total,
    compute_proposal_totals,
)
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind, ServiceType
from tour_kernel.domain.validation import (
    ValidationResult,
    validate_basic_info,
    validate_itinerary,
    validate_line,
)
from tour_kernel.domain.values import Currency, Money
from tour_kernel.domain.voucher import Guest, Voucher

__all__ = [
    "AdditionalServiceLine",
    "Agency",
    "Clock",
    "ConfirmationResult",
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "Destination",
    "DeterministicClock",
    "FlightLine",
    "Guest",
    "Hotel",
    "HotelLine",
    "InMemoryMasterData",
    "LineItem",
    "MasterDataProvider",
    "Money",
    "PROPOSAL_WORKFLOW",
    "Proposal",
    "ProposalStatus",
    "ProposalTotals",
    "QuotingPolicy",
    "ReferenceResolver",
    "RentACarLine",
    "ServiceKind",
    "ServiceType",
    "Source",
    "SystemClock",
    "TransportationLine",
    "UnresolvedSelection",
    "User",
    "VOUCHER_WORKFLOW",
    "ValidationResult",
    "Voucher",
    "VoucherStatus",
    "apply_percent",
    "compute_kind_subtotal",
    "compute_line_total",
    "compute_proposal_totals",
    "new_line",
    "nights_between",
    "parse_amount_or_zero",
    "parse_percent_or_zero",
    "parse_quantity_or_zero",
    "update_line",
    "validate_basic_info",
    "validate_itinerary",
    "validate_line",
]
