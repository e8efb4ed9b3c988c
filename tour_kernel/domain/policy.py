"""
QuotingPolicy -- the configurable defaults of the quoting kernel.

Responsibility:
    Holds every value a deployment may tune: defaults for new proposals,
    the reference prefix, which sources are agency channels, and the
    date-range and dashboard settings.  Built by ``tour_config`` from YAML
    or constructed directly in tests.

Architecture position:
    Kernel > Domain -- pure value object.  The kernel receives a policy; it
    never reads configuration files itself.

Invariants enforced:
    Nothing in this object can switch off a KernelInvariant.  A policy only
    supplies defaults and feeds the basic-info gate.

Failure modes:
    ValueError from ``__post_init__`` for an unknown currency, a
    non-numeric margin/commission default, a malformed reference prefix or
    a non-positive recent-proposal limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from tour_kernel.domain.currency import CurrencyRegistry

DEFAULT_SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "TRY")


@dataclass(frozen=True)
class QuotingPolicy:
    """
    Contract:
        Immutable; all currency codes normalized to upper case.

    Guarantees:
        - default_currency is a member of supported_currencies
        - default_margin and default_commission parse as finite decimals
    """

    name: str = "default"
    default_currency: str = "USD"
    default_margin: str = "15"
    default_commission: str = "5"
    default_pdf_language: str = "en"
    reference_prefix: str = "TOMS"
    agency_source_ids: frozenset[str] = frozenset()
    supported_currencies: tuple[str, ...] = DEFAULT_SUPPORTED_CURRENCIES
    enforce_date_range: bool = True
    recent_proposal_limit: int = 5

    def __post_init__(self) -> None:
        supported = tuple(CurrencyRegistry.validate(c) for c in self.supported_currencies)
        object.__setattr__(self, "supported_currencies", supported)

        default_currency = CurrencyRegistry.validate(self.default_currency)
        if default_currency not in supported:
            raise ValueError(
                f"Default currency {default_currency} is not in supported "
                f"currencies {supported}"
            )
        object.__setattr__(self, "default_currency", default_currency)
        object.__setattr__(self, "agency_source_ids", frozenset(self.agency_source_ids))

        for label, value in (
            ("default_margin", self.default_margin),
            ("default_commission", self.default_commission),
        ):
            try:
                parsed = Decimal(str(value))
            except InvalidOperation as e:
                raise ValueError(f"{label} must be a number, got {value!r}") from e
            if not parsed.is_finite():
                raise ValueError(f"{label} must be finite, got {value!r}")

        if not self.reference_prefix or not self.reference_prefix.isalnum():
            raise ValueError(
                f"reference_prefix must be alphanumeric, got {self.reference_prefix!r}"
            )
        if self.recent_proposal_limit <= 0:
            raise ValueError("recent_proposal_limit must be positive")

    def is_agency_source(self, source_id: str) -> bool:
        return source_id in self.agency_source_ids
