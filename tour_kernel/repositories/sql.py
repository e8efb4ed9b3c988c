"""
SQLAlchemy QuotingRepository.

Responsibility:
    Maps frozen Proposal/Voucher values to ProposalModel/VoucherModel rows
    on an injected Session.

Invariants enforced:
    - Never commits.  Writes are flushed so constraint violations surface
      inside the caller's transaction; session_scope() commits.
    - atomic() is a SAVEPOINT (begin_nested): a failure inside it undoes
      every write of the block and leaves the outer transaction usable.
    - The voucher snapshot (service_data) is written once on insert.

Failure modes:
    - DuplicateVoucherError translated from the uq_voucher_service
      IntegrityError.
    - VoucherNotFoundError when saving a voucher that was never added.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tour_kernel.domain.proposal import Proposal
from tour_kernel.domain.voucher import Voucher
from tour_kernel.exceptions import DuplicateVoucherError, VoucherNotFoundError
from tour_kernel.logging_config import get_logger
from tour_kernel.models.proposal import ProposalModel
from tour_kernel.models.voucher import VoucherModel

logger = get_logger("repositories.sql")


class SqlQuotingRepository:
    """Repository over one SQLAlchemy Session. The caller owns the session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._session.begin_nested():
            yield
            self._session.flush()

    def load_proposal(self, proposal_id: UUID) -> Proposal | None:
        model = self._session.get(ProposalModel, proposal_id)
        return model.to_dto() if model is not None else None

    def save_proposal(self, proposal: Proposal) -> None:
        model = self._session.get(ProposalModel, proposal.id)
        if model is None:
            self._session.add(ProposalModel.from_dto(proposal))
        else:
            model.apply_dto(proposal)
        self._session.flush()

    def list_proposals(self) -> list[Proposal]:
        stmt = select(ProposalModel).order_by(
            ProposalModel.created_at, ProposalModel.reference
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def load_voucher(self, voucher_id: UUID) -> Voucher | None:
        model = self._session.get(VoucherModel, voucher_id)
        return model.to_dto() if model is not None else None

    def save_voucher(self, voucher: Voucher) -> None:
        model = self._session.get(VoucherModel, voucher.id)
        if model is None:
            raise VoucherNotFoundError(str(voucher.id))
        model.apply_dto(voucher)
        self._session.flush()

    def add_vouchers(self, vouchers: Sequence[Voucher]) -> None:
        self._session.add_all([VoucherModel.from_dto(v) for v in vouchers])
        try:
            self._session.flush()
        except IntegrityError as e:
            first = vouchers[0]
            logger.warning(
                "voucher_insert_conflict",
                extra={"proposal_id": str(first.proposal_id), "error": str(e.orig)},
            )
            raise DuplicateVoucherError(
                str(first.proposal_id), first.service_type.value, first.service_id
            ) from e

    def list_vouchers(self, proposal_id: UUID | None = None) -> list[Voucher]:
        stmt = select(VoucherModel)
        if proposal_id is not None:
            stmt = stmt.where(VoucherModel.proposal_id == proposal_id)
        stmt = stmt.order_by(VoucherModel.created_at, VoucherModel.service_type, VoucherModel.service_id)
        return [m.to_dto() for m in self._session.scalars(stmt)]
