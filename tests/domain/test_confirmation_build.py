"""
Voucher construction from a selection.

Line ids are unique only within a collection, so the same id under two
kinds must yield two vouchers.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from tour_kernel.domain.confirmation import (
    UnresolvedSelection,
    build_vouchers,
    normalize_selection,
)
from tour_kernel.domain.lifecycles import VoucherStatus
from tour_kernel.domain.line_items import FlightLine, HotelLine, RentACarLine
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceKind, ServiceType
from tour_kernel.exceptions import UnknownServiceKindError, ValidationFailure


@pytest.fixture
def proposal() -> Proposal:
    return Proposal(
        id=uuid4(),
        reference="TOMS-2024-0042",
        source="agency",
        agency_id="ag-1",
        sales_person_id="u-1",
        hotels=(HotelLine(id=1, hotel_id="pera"), HotelLine(id=2, hotel_id="sultan")),
        flights=(FlightLine(id=1, departure="IST"),),
        rent_a_car=(RentACarLine(id=3, car_type="SUV"),),
    )


def _ids():
    counter = iter(range(1, 100))
    return lambda: UUID(int=next(counter))


class TestNormalizeSelection:
    def test_keys_parsed_and_ordered(self):
        normalized = normalize_selection({"flights": [1], "hotels": [2]})
        assert list(normalized) == [ServiceKind.HOTELS, ServiceKind.FLIGHTS]

    def test_duplicates_dropped_in_order(self):
        assert normalize_selection({"hotels": [2, "2", 1, 2]}) == {ServiceKind.HOTELS: (2, 1)}

    def test_unknown_key(self):
        with pytest.raises(UnknownServiceKindError):
            normalize_selection({"cruises": [1]})

    @pytest.mark.parametrize("raw, expected", [("11", (11,)), (7, (7,)), ("h-1", ("h-1",))])
    def test_single_id_without_list(self, raw, expected):
        assert normalize_selection({"hotels": raw}) == {ServiceKind.HOTELS: expected}

    @pytest.mark.parametrize("raw", [1.5, {"id": 1}, True])
    def test_malformed_value(self, raw):
        with pytest.raises(ValidationFailure, match="must be an id or a list of ids"):
            normalize_selection({"hotels": raw})

    def test_empty(self):
        assert normalize_selection({}) == {}
        assert normalize_selection(None) == {}


class TestBuildVouchers:
    def test_one_voucher_per_resolved_line(self, proposal):
        created = datetime(2024, 3, 1, tzinfo=timezone.utc)
        vouchers, unresolved = build_vouchers(
            proposal,
            normalize_selection({"hotels": [1, 2], "flights": [1], "rentACar": [3]}),
            id_factory=_ids(),
            created_at=created,
        )
        assert unresolved == ()
        assert [(v.service_type, v.service_id) for v in vouchers] == [
            (ServiceType.HOTEL, 1),
            (ServiceType.HOTEL, 2),
            (ServiceType.FLIGHT, 1),
            (ServiceType.RENTACAR, 3),
        ]
        first = vouchers[0]
        assert first.id == UUID(int=1)
        assert first.status == VoucherStatus.PENDING_PAYMENT
        assert first.proposal_reference == "TOMS-2024-0042"
        assert (first.source, first.agency_id, first.sales_person_id) == ("agency", "ag-1", "u-1")
        assert (first.adults, first.children, first.total_pax, first.guests) == (0, 0, 0, ())
        assert first.created_at == created

    def test_snapshot_is_line_value(self, proposal):
        vouchers, _ = build_vouchers(proposal, {ServiceKind.HOTELS: (2,)})
        assert vouchers[0].service_data == HotelLine(id=2, hotel_id="sultan")

    def test_unresolved_ids_reported(self, proposal):
        vouchers, unresolved = build_vouchers(
            proposal, {ServiceKind.HOTELS: (1, 9), ServiceKind.TRANSPORTATION: (1,)}
        )
        assert len(vouchers) == 1
        assert unresolved == (
            UnresolvedSelection(ServiceKind.HOTELS, 9),
            UnresolvedSelection(ServiceKind.TRANSPORTATION, 1),
        )
