"""
In-memory QuotingRepository.

Used by the test suite and by single-process tools.  ``atomic()`` snapshots
both tables on entry and restores them if the block raises.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Sequence
from uuid import UUID

from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.voucher import Voucher
from tour_kernel.exceptions import DuplicateVoucherError, VoucherNotFoundError
from tour_kernel.logging_config import get_logger

logger = get_logger("repositories.memory")


class InMemoryQuotingRepository:
    """Dict-backed repository. Values are frozen, so no defensive copies."""

    def __init__(self) -> None:
        self._proposals: dict[UUID, Proposal] = {}
        self._vouchers: dict[UUID, Voucher] = {}

    @contextmanager
    def atomic(self) -> Iterator[None]:
        proposals = dict(self._proposals)
        vouchers = dict(self._vouchers)
        try:
            yield
        except Exception:
            self._proposals = proposals
            self._vouchers = vouchers
            logger.debug("memory_transaction_rolled_back")
            raise

    def load_proposal(self, proposal_id: UUID) -> Proposal | None:
        return self._proposals.get(proposal_id)

    def save_proposal(self, proposal: Proposal) -> None:
        self._proposals[proposal.id] = proposal

    def list_proposals(self) -> list[Proposal]:
        return list(self._proposals.values())

    def load_voucher(self, voucher_id: UUID) -> Voucher | None:
        return self._vouchers.get(voucher_id)

    def save_voucher(self, voucher: Voucher) -> None:
        existing = self._vouchers.get(voucher.id)
        if existing is None:
            raise VoucherNotFoundError(str(voucher.id))
        # The confirmation snapshot is write-once.
        self._vouchers[voucher.id] = replace(voucher, service_data=existing.service_data)

    def add_vouchers(self, vouchers: Sequence[Voucher]) -> None:
        taken = {(v.proposal_id, v.service_type, v.service_id) for v in self._vouchers.values()}
        for voucher in vouchers:
            key = (voucher.proposal_id, voucher.service_type, voucher.service_id)
            if key in taken or voucher.id in self._vouchers:
                raise DuplicateVoucherError(
                    str(voucher.proposal_id), voucher.service_type.value, voucher.service_id
                )
            taken.add(key)
        for voucher in vouchers:
            self._vouchers[voucher.id] = voucher

    def list_vouchers(self, proposal_id: UUID | None = None) -> list[Voucher]:
        return [
            v for v in self._vouchers.values()
            if proposal_id is None or v.proposal_id == proposal_id
        ]
