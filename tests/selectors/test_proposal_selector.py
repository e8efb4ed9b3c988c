"""ProposalSelector: search, summaries, voucher queries, dashboard stats."""

from uuid import uuid4

import pytest

from tour_kernel.domain.lifecycles import ProposalStatus, VoucherStatus
from tour_kernel.domain.line_items import TransportationLine
from tour_kernel.domain.master_data import UNKNOWN_DESTINATION
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.values import Money
from tour_kernel.selectors.proposal_selector import ProposalSelector


@pytest.fixture
def three_proposals(proposal_service, deterministic_clock):
    ist = proposal_service.create_proposal(source="direct", destination_ids=["ist"])
    deterministic_clock.advance(60)
    cap = proposal_service.create_proposal(source="agency", destination_ids=["cap"])
    deterministic_clock.advance(60)
    both = proposal_service.create_proposal(source="direct", destination_ids=["ist", "cap"])
    return ist, cap, both


class TestSearch:
    def test_newest_first(self, proposal_selector, three_proposals):
        ist, cap, both = three_proposals
        assert [p.id for p in proposal_selector.search()] == [both.id, cap.id, ist.id]

    def test_by_destination_name(self, proposal_selector, three_proposals):
        ist, _, both = three_proposals
        assert [p.id for p in proposal_selector.search("istan")] == [both.id, ist.id]

    def test_by_reference(self, proposal_selector, three_proposals):
        _, cap, _ = three_proposals
        results = proposal_selector.search(cap.reference.lower())
        assert cap.id in [p.id for p in results]

    def test_by_source(self, proposal_selector, three_proposals):
        _, cap, _ = three_proposals
        assert [p.id for p in proposal_selector.search(source="agency")] == [cap.id]

    def test_by_status(self, proposal_selector, proposal_service, three_proposals):
        ist, _, _ = three_proposals
        proposal_service.cancel_proposal(ist.id)
        assert [p.id for p in proposal_selector.search(status="CANCELLED")] == [ist.id]
        assert len(proposal_selector.search(status=ProposalStatus.NEW)) == 2

    def test_filters_combine(self, proposal_selector, three_proposals):
        assert proposal_selector.search("cappadocia", source="agency")[0].id == three_proposals[1].id
        assert proposal_selector.search("nowhere") == []


class TestSummaries:
    def test_labels_resolved(self, proposal_selector, proposal_service, priced_proposal):
        proposal_service.update_basic_info(
            priced_proposal.id, source="agency", agency_id="ag-1", destination_ids=["ist", "gone"]
        )
        summary = proposal_selector.list_summaries()[0]
        assert summary.source_name == "Agency"
        assert summary.sales_person_name == "Ayse Demir"
        assert summary.agency_name == "Blue Travel"
        assert summary.destination_names == ("Istanbul", UNKNOWN_DESTINATION)
        assert summary.grand_total == Money.of("2808", "USD")

    def test_no_agency(self, proposal_selector, priced_proposal):
        assert proposal_selector.summarize(priced_proposal).agency_name is None

    def test_unpriceable_proposal_has_no_total(self, proposal_selector):
        proposal = Proposal(
            id=uuid4(),
            reference="TOMS-2024-0001",
            transportation=(TransportationLine(id=1, currency="EUR", price_per_day="5"),),
        )
        assert proposal_selector.summarize(proposal).grand_total is None


class TestVouchersAndDashboard:
    @pytest.fixture
    def confirmed(self, confirmation_service, priced_proposal):
        return confirmation_service.confirm_proposal(
            priced_proposal.id, {"hotels": [1], "flights": [1]}
        )

    def test_voucher_filters(self, proposal_selector, voucher_service, confirmed):
        hotel = confirmed.vouchers[0]
        voucher_service.mark_paid(hotel.id)
        assert [v.id for v in proposal_selector.vouchers(status="PAID")] == [hotel.id]
        assert [v.id for v in proposal_selector.vouchers(service_type="flight")] == [
            confirmed.vouchers[1].id
        ]
        assert len(proposal_selector.vouchers(confirmed.proposal.id)) == 2
        assert proposal_selector.vouchers(uuid4()) == []
        assert proposal_selector.vouchers(status=VoucherStatus.COMPLETED) == []

    def test_dashboard(self, proposal_selector, proposal_service, confirmed):
        proposal_service.create_proposal()
        stats = proposal_selector.dashboard_stats()
        assert stats.total_proposals == 2
        assert stats.counts_by_status[ProposalStatus.CONFIRMED] == 1
        assert stats.counts_by_status[ProposalStatus.NEW] == 1
        assert stats.counts_by_status[ProposalStatus.CANCELLED] == 0
        assert stats.voucher_count == 2
        assert stats.confirmed_revenue == {"USD": Money.of("2808", "USD")}

    def test_revenue_grouped_by_currency(
        self, proposal_selector, proposal_service, confirmation_service, confirmed, basic_info
    ):
        euro = proposal_service.create_proposal(**basic_info, proposal_currency="EUR")
        proposal_service.add_line(
            euro.id, "transportation",
            destination_id="ist", date="2024-03-12", vehicle_type="Car", price_per_day="100",
        )
        confirmation_service.confirm_proposal(euro.id, {"transportation": [1]})
        revenue = proposal_selector.dashboard_stats().confirmed_revenue
        assert revenue["USD"] == Money.of("2808", "USD")
        assert revenue["EUR"] == Money.of("120", "EUR")

    def test_recent_limit(self, repository, master_data, proposal_service):
        for _ in range(4):
            proposal_service.create_proposal()
        selector = ProposalSelector(
            repository, master_data=master_data, policy=QuotingPolicy(recent_proposal_limit=3)
        )
        assert len(selector.dashboard_stats().recent_proposals) == 3
