"""
Pricing -- line, collection and proposal totals.

Responsibility:
    Aggregates line totals into per-kind subtotals and a proposal subtotal,
    then applies margin and commission to produce the grand total.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Invariants enforced:
    ADDITIVE_PRICING -- margin and commission are both computed against the
    same subtotal and added; they never compound:

        grand_total = subtotal
                    + apply_percent(subtotal, overall_margin)
                    + apply_percent(subtotal, commission)

    No currency conversion and no silent mixing: only lines in the proposal
    currency (or with a blank tag) are summed.

Failure modes:
    - InvalidCurrencyError if the proposal currency is blank or unknown.
    - CurrencyMismatchError if a line tagged with another currency carries
      a non-zero total.  Zero-total foreign lines are skipped; the
      itinerary gate still reports them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from tour_kernel.domain.amounts import ZERO, apply_percent
from tour_kernel.domain.line_items import LineItem
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.domain.values import Currency, Money
from tour_kernel.exceptions import CurrencyMismatchError, InvalidCurrencyError


@dataclass(frozen=True)
class ProposalTotals:
    """
    Full-precision totals of one proposal, all in the proposal currency.

    Guarantees:
        grand_total == subtotal + margin_amount + commission_amount
        subtotal == sum(subtotals.values())
    """

    currency: Currency
    subtotals: dict[ServiceKind, Money] = field(hash=False)
    subtotal: Money
    margin_amount: Money
    commission_amount: Money
    grand_total: Money

    def rounded(self) -> ProposalTotals:
        """Totals rounded to the currency precision, for presentation."""
        return ProposalTotals(
            currency=self.currency,
            subtotals={kind: m.round() for kind, m in self.subtotals.items()},
            subtotal=self.subtotal.round(),
            margin_amount=self.margin_amount.round(),
            commission_amount=self.commission_amount.round(),
            grand_total=self.grand_total.round(),
        )

    def as_display(self) -> dict[str, str]:
        """Rounded amounts as strings ("1200.00"), keyed by field/kind name."""
        r = self.rounded()
        display = {kind.value: str(m.amount) for kind, m in r.subtotals.items()}
        display.update(
            currency=r.currency.code,
            subtotal=str(r.subtotal.amount),
            margin_amount=str(r.margin_amount.amount),
            commission_amount=str(r.commission_amount.amount),
            grand_total=str(r.grand_total.amount),
        )
        return display


def compute_line_total(item: LineItem, kind: ServiceKind | str) -> Decimal:
    """
    Rate x quantities for one line, at full precision.

    Raises:
        UnknownServiceKindError: if ``kind`` is not a service kind.
        ValueError: if ``item`` is not a line of ``kind``.
    """
    kind = ServiceKind.parse(kind)
    if item.kind is not kind:
        raise ValueError(f"{type(item).__name__} is not a {kind.value} line")
    return item.line_total()


def _proposal_currency(proposal: Proposal) -> Currency:
    code = (proposal.proposal_currency or "").strip()
    try:
        return Currency(code)
    except ValueError as e:
        raise InvalidCurrencyError(code) from e


def _subtotal(proposal: Proposal, kind: ServiceKind, currency: Currency) -> Money:
    total = ZERO
    for line in proposal.lines(kind):
        line_total = compute_line_total(line, kind)
        line_currency = proposal.line_currency(line)
        if line_currency != currency.code:
            if line_total != ZERO:
                raise CurrencyMismatchError(currency.code, line_currency, kind.value, line.id)
            continue
        total += line_total
    return Money(total, currency)


def compute_kind_subtotal(proposal: Proposal, kind: ServiceKind | str) -> Money:
    """Sum of one collection's line totals in the proposal currency."""
    return _subtotal(proposal, ServiceKind.parse(kind), _proposal_currency(proposal))


def compute_proposal_totals(proposal: Proposal) -> ProposalTotals:
    """Subtotals, margin, commission and grand total for a proposal."""
    currency = _proposal_currency(proposal)
    subtotals = {kind: _subtotal(proposal, kind, currency) for kind in ServiceKind}

    subtotal = Money.total(subtotals.values(), currency)

    margin_amount = apply_percent(subtotal, proposal.overall_margin)
    commission_amount = apply_percent(subtotal, proposal.commission)

    return ProposalTotals(
        currency=currency,
        subtotals=subtotals,
        subtotal=subtotal,
        margin_amount=margin_amount,
        commission_amount=commission_amount,
        grand_total=subtotal + margin_amount + commission_amount,
    )
