"""
Repository protocol -- the persistence port of the quoting kernel.

Services receive a QuotingRepository and never see sessions or SQL.  Two
implementations ship with the kernel:

    InMemoryQuotingRepository  -- dicts, snapshot-restoring atomic()
    SqlQuotingRepository       -- SQLAlchemy session, savepoint atomic()

Both flush but never commit; the caller owns the outer transaction.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, Sequence, runtime_checkable
from uuid import UUID

from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.voucher import Voucher


@runtime_checkable
class QuotingRepository(Protocol):
    def atomic(self) -> AbstractContextManager[None]:
        """All writes inside the block land together or not at all."""
        ...

    def load_proposal(self, proposal_id: UUID) -> Proposal | None: ...

    def save_proposal(self, proposal: Proposal) -> None:
        """Insert or overwrite a proposal by id."""
        ...

    def list_proposals(self) -> list[Proposal]:
        """All proposals, oldest first."""
        ...

    def load_voucher(self, voucher_id: UUID) -> Voucher | None: ...

    def save_voucher(self, voucher: Voucher) -> None:
        """Overwrite the editable fields of an existing voucher."""
        ...

    def add_vouchers(self, vouchers: Sequence[Voucher]) -> None:
        """
        Insert new vouchers.

        Raises:
            DuplicateVoucherError: if a voucher already exists for one of
                the (proposal_id, service_type, service_id) triples.
        """
        ...

    def list_vouchers(self, proposal_id: UUID | None = None) -> list[Voucher]:
        """Vouchers, optionally for one proposal, oldest first."""
        ...
