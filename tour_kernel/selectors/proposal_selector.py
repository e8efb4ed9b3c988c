"""
Module: tour_kernel.selectors.proposal_selector
Responsibility: Proposal listing/search, voucher listing and the dashboard
    statistics shown on the sales landing page.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Revenue is grouped per currency; amounts in different currencies are
      never added together.
    - Proposals whose totals cannot be computed (foreign-currency lines,
      unknown currency) are left out of revenue and logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC
from uuid import UUID

from tour_kernel.domain.lifecycles import ProposalStatus, VoucherStatus
from tour_kernel.domain.master_data import (
    InMemoryMasterData,
    MasterDataProvider,
    ReferenceResolver,
)
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.pricing import compute_proposal_totals
from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.service_kinds import ServiceType
from tour_kernel.domain.values import Money
from tour_kernel.domain.voucher import Voucher
from tour_kernel.exceptions import CurrencyError
from tour_kernel.logging_config import get_logger
from tour_kernel.repositories.base import QuotingRepository
from tour_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.proposal")

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ProposalSummary:
    """One row of the proposals list, with master-data labels resolved."""

    id: UUID
    reference: str
    status: ProposalStatus
    created_at: datetime | None
    source_name: str
    sales_person_name: str
    agency_name: str | None
    destination_names: tuple[str, ...]
    grand_total: Money | None


@dataclass(frozen=True)
class DashboardStats:
    total_proposals: int
    counts_by_status: dict[ProposalStatus, int] = field(hash=False)
    voucher_count: int
    confirmed_revenue: dict[str, Money] = field(hash=False)
    recent_proposals: tuple[Proposal, ...]


class ProposalSelector(BaseSelector):
    """Read-only queries over proposals and vouchers."""

    def __init__(
        self,
        repository: QuotingRepository,
        master_data: MasterDataProvider | None = None,
        policy: QuotingPolicy | None = None,
    ):
        super().__init__(repository)
        self._resolver = ReferenceResolver(master_data or InMemoryMasterData())
        self._policy = policy or QuotingPolicy()

    def _newest_first(self, proposals: list[Proposal]) -> list[Proposal]:
        return sorted(proposals, key=lambda p: p.created_at or _EPOCH, reverse=True)

    def _matches_search(self, proposal: Proposal, term: str) -> bool:
        if term in proposal.reference.lower():
            return True
        return any(
            term in name.lower()
            for name in self._resolver.destination_names(proposal.destination_ids)
        )

    def search(
        self,
        search: str = "",
        status: ProposalStatus | str | None = None,
        source: str | None = None,
    ) -> list[Proposal]:
        """
        Proposals matching every given filter, newest first.

        ``search`` is case-insensitive and matches the reference or any
        destination name.  Blank filters match everything.
        """
        term = (search or "").strip().lower()
        wanted_status = ProposalStatus(status) if status else None
        results = [
            p for p in self.repository.list_proposals()
            if (not term or self._matches_search(p, term))
            and (wanted_status is None or p.status == wanted_status)
            and (not source or p.source == source)
        ]
        return self._newest_first(results)

    def summarize(self, proposal: Proposal) -> ProposalSummary:
        try:
            grand_total = compute_proposal_totals(proposal).grand_total
        except CurrencyError:
            grand_total = None
        return ProposalSummary(
            id=proposal.id,
            reference=proposal.reference,
            status=proposal.status,
            created_at=proposal.created_at,
            source_name=self._resolver.source_name(proposal.source),
            sales_person_name=self._resolver.user_name(proposal.sales_person_id),
            agency_name=self._resolver.agency_name(proposal.agency_id) if proposal.agency_id else None,
            destination_names=tuple(self._resolver.destination_names(proposal.destination_ids)),
            grand_total=grand_total,
        )

    def list_summaries(self, **filters) -> list[ProposalSummary]:
        return [self.summarize(p) for p in self.search(**filters)]

    def vouchers(
        self,
        proposal_id: UUID | None = None,
        status: VoucherStatus | str | None = None,
        service_type: ServiceType | str | None = None,
    ) -> list[Voucher]:
        wanted_status = VoucherStatus(status) if status else None
        wanted_type = ServiceType(service_type) if service_type else None
        return [
            v for v in self.repository.list_vouchers(proposal_id)
            if (wanted_status is None or v.status == wanted_status)
            and (wanted_type is None or v.service_type == wanted_type)
        ]

    def dashboard_stats(self) -> DashboardStats:
        """Status counts, voucher count, confirmed revenue and recent proposals."""
        proposals = self.repository.list_proposals()

        counts = {status: 0 for status in ProposalStatus}
        revenue: dict[str, Money] = {}
        for proposal in proposals:
            counts[proposal.status] += 1
            if proposal.status != ProposalStatus.CONFIRMED:
                continue
            try:
                grand_total = compute_proposal_totals(proposal).grand_total
            except CurrencyError as e:
                logger.warning(
                    "revenue_skipped",
                    extra={"proposal_id": str(proposal.id), "code": e.code},
                )
                continue
            code = grand_total.currency.code
            revenue[code] = revenue[code] + grand_total if code in revenue else grand_total

        recent = self._newest_first(proposals)[: self._policy.recent_proposal_limit]
        return DashboardStats(
            total_proposals=len(proposals),
            counts_by_status=counts,
            voucher_count=len(self.repository.list_vouchers()),
            confirmed_revenue=revenue,
            recent_proposals=tuple(recent),
        )
