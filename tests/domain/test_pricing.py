"""
Pricing: line totals, per-kind subtotals, margin and commission.

Margin and commission are both percentages of the subtotal and are added
to it; neither compounds on the other.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from tour_kernel.domain.line_items import FlightLine, HotelLine, TransportationLine
from tour_kernel.domain.pricing import (
    compute_kind_subtotal,
    compute_line_total,
    compute_proposal_totals,
)
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind
from tour_kernel.domain.values import Money
from tour_kernel.exceptions import (
    CurrencyMismatchError,
    InvalidCurrencyError,
    UnknownServiceKindError,
)


def _proposal(**overrides) -> Proposal:
    values = dict(id=uuid4(), reference="TOMS-2024-0001", proposal_currency="USD")
    values.update(overrides)
    return Proposal(**values)


HOTEL = HotelLine(
    id=1, checkin="2024-03-15", checkout="2024-03-19", num_rooms=2, price_per_night="150"
)
TRANSFER = TransportationLine(id=1, num_days=1, num_vehicles=1, price_per_day="300")


class TestLineTotal:
    def test_hotel_example(self):
        assert compute_line_total(HOTEL, "hotels") == Decimal("1200")

    def test_kind_mismatch(self):
        with pytest.raises(ValueError):
            compute_line_total(HOTEL, ServiceKind.FLIGHTS)

    def test_unknown_kind(self):
        with pytest.raises(UnknownServiceKindError):
            compute_line_total(HOTEL, "boats")


class TestProposalTotals:
    def test_additive_margin_and_commission(self):
        totals = compute_proposal_totals(
            _proposal(hotels=(HOTEL,), transportation=(TRANSFER,))
        )
        assert totals.subtotal == Money.of("1500", "USD")
        assert totals.margin_amount == Money.of("225", "USD")
        assert totals.commission_amount == Money.of("75", "USD")
        assert totals.grand_total == Money.of("1800", "USD")

    def test_subtotals_per_kind(self):
        totals = compute_proposal_totals(_proposal(hotels=(HOTEL, HOTEL), flights=()))
        assert totals.subtotals[ServiceKind.HOTELS] == Money.of("2400", "USD")
        assert totals.subtotals[ServiceKind.FLIGHTS].is_zero
        assert set(totals.subtotals) == set(ServiceKind)

    def test_empty_proposal(self):
        totals = compute_proposal_totals(_proposal())
        assert totals.grand_total.is_zero

    def test_garbage_percentages_are_zero(self):
        totals = compute_proposal_totals(
            _proposal(hotels=(HOTEL,), overall_margin="abc", commission="")
        )
        assert totals.grand_total == Money.of("1200", "USD")

    def test_full_precision_until_rounded(self):
        line = FlightLine(id=1, pax=3, price_per_pax="33.333")
        totals = compute_proposal_totals(
            _proposal(flights=(line,), overall_margin="10", commission="0")
        )
        assert totals.grand_total.amount == Decimal("109.9989")
        assert totals.rounded().grand_total.amount == Decimal("110.00")

    def test_as_display(self):
        display = compute_proposal_totals(_proposal(hotels=(HOTEL,))).as_display()
        assert display["currency"] == "USD"
        assert display["hotels"] == "1200.00"
        assert display["margin_amount"] == "180.00"
        assert display["grand_total"] == "1440.00"

    def test_kind_subtotal(self):
        proposal = _proposal(hotels=(HOTEL,), transportation=(TRANSFER,))
        assert compute_kind_subtotal(proposal, "transportation") == Money.of("300", "USD")


class TestCurrencyRules:
    def test_blank_line_currency_inherits(self):
        totals = compute_proposal_totals(_proposal(proposal_currency="EUR", hotels=(HOTEL,)))
        assert totals.grand_total.currency.code == "EUR"

    def test_matching_tag_case_insensitive(self):
        line = TransportationLine(id=1, currency="usd", price_per_day="10")
        assert compute_proposal_totals(_proposal(transportation=(line,))).subtotal == Money.of(
            "10", "USD"
        )

    def test_foreign_priced_line_rejected(self):
        line = TransportationLine(id=4, currency="EUR", price_per_day="10")
        with pytest.raises(CurrencyMismatchError) as exc_info:
            compute_proposal_totals(_proposal(transportation=(line,)))
        assert exc_info.value.line_id == 4
        assert exc_info.value.line_currency == "EUR"

    def test_foreign_zero_line_skipped(self):
        line = TransportationLine(id=1, currency="EUR")
        assert compute_proposal_totals(_proposal(transportation=(line,))).subtotal.is_zero

    def test_invalid_proposal_currency(self):
        with pytest.raises(InvalidCurrencyError):
            compute_proposal_totals(_proposal(proposal_currency="??"))
