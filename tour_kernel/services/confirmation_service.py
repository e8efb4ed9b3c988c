"""
ConfirmationService -- NEW -> CONFIRMED and voucher generation.

Responsibility:
    Confirms a proposal for a selection of its line items and persists the
    confirmed proposal together with one voucher per selected line.

Architecture position:
    Kernel > Services.  Delegates voucher construction to
    domain/confirmation.py and the status check to PROPOSAL_WORKFLOW.

Invariants enforced:
    SINGLE_CONFIRMATION -- a CONFIRMED proposal is rejected before anything
        is built, so vouchers are never duplicated.  The SQL schema backs
        this with uq_voucher_service.
    SNAPSHOT_ON_CONFIRM -- vouchers carry the line value as it was at
        confirmation time.
    Atomicity -- the status update and the voucher inserts happen inside
        one ``repository.atomic()`` block.

Failure modes (all raised before any write):
    - ProposalNotFoundError
    - ProposalAlreadyConfirmedError for a CONFIRMED proposal
    - InvalidTransitionError for a CANCELLED proposal
    - UnknownServiceKindError for a selection key that is not a collection
    - EmptySelectionError when nothing is selected, or nothing selected
      resolves to a line

Audit relevance:
    ``proposal_confirmed`` is logged with the voucher ids; every skipped
    selection id is logged at WARNING as ``selection_unresolved``.
"""

from __future__ import annotations

import time
from typing import Callable
from uuid import UUID, uuid4

from tour_kernel.domain.clock import Clock
from tour_kernel.domain.confirmation import (
    ConfirmationResult,
    Selection,
    build_vouchers,
    normalize_selection,
)
from tour_kernel.domain.lifecycles import PROPOSAL_WORKFLOW, ProposalStatus
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.workflow import resolve_transition
from tour_kernel.exceptions import (
    EmptySelectionError,
    ProposalAlreadyConfirmedError,
    TourKernelError,
)
from tour_kernel.invariants import KernelInvariant
from tour_kernel.logging_config import LogContext, get_logger
from tour_kernel.repositories.base import QuotingRepository
from tour_kernel.services.base import BaseService

logger = get_logger("services.confirmation")


class ConfirmationService(BaseService):
    """
    Contract:
        confirm_proposal() either returns a ConfirmationResult whose proposal
        and vouchers are persisted, or raises with the repository untouched.

    Non-goals:
        - Does NOT run the basic-info or itinerary gates; the sales flow
          runs them before offering confirmation.
        - Does NOT take payments; vouchers start in PENDING_PAYMENT.
    """

    def __init__(
        self,
        repository: QuotingRepository,
        clock: Clock | None = None,
        policy: QuotingPolicy | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        super().__init__(repository, clock=clock, policy=policy)
        self._id_factory = id_factory

    def confirm_proposal(
        self,
        proposal_id: UUID,
        selection: Selection,
        actor_id: str | None = None,
    ) -> ConfirmationResult:
        """
        Confirm a proposal and issue vouchers for the selected lines.

        Args:
            proposal_id: Proposal to confirm.
            selection: Line ids keyed by collection, e.g.
                ``{"hotels": [1, 2], "flights": [1]}``.
            actor_id: Optional caller identity, recorded in the log context.
        """
        with LogContext.bind(proposal_id=str(proposal_id), actor_id=actor_id):
            t0 = time.monotonic()
            try:
                result = self._confirm(proposal_id, selection)
            except TourKernelError as e:
                logger.warning(
                    "proposal_confirmation_rejected",
                    extra={"code": e.code, "error": str(e)},
                )
                raise

            logger.info(
                "proposal_confirmed",
                extra={
                    "reference": result.proposal.reference,
                    "voucher_count": len(result.vouchers),
                    "voucher_ids": [str(v.id) for v in result.vouchers],
                    "unresolved_count": len(result.unresolved),
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
            return result

    def _confirm(self, proposal_id: UUID, selection: Selection) -> ConfirmationResult:
        proposal = self._require_proposal(proposal_id)
        if proposal.status == ProposalStatus.CONFIRMED:
            raise ProposalAlreadyConfirmedError(str(proposal_id), proposal.reference)
        resolve_transition(PROPOSAL_WORKFLOW, proposal.status, ProposalStatus.CONFIRMED)

        normalized = normalize_selection(selection)
        if not any(normalized.values()):
            raise EmptySelectionError(str(proposal_id))

        vouchers, unresolved = build_vouchers(
            proposal,
            normalized,
            id_factory=self._id_factory,
            created_at=self._clock.now_utc(),
        )
        for missing in unresolved:
            logger.warning(
                "selection_unresolved",
                extra={"kind": missing.kind.value, "line_id": missing.line_id},
            )
        if not vouchers:
            raise EmptySelectionError(str(proposal_id))

        confirmed = proposal.with_status(ProposalStatus.CONFIRMED)
        with self.repository.atomic():
            self.repository.save_proposal(confirmed)
            self.repository.add_vouchers(vouchers)

        logger.debug(
            "vouchers_snapshotted",
            extra={"invariant": KernelInvariant.SNAPSHOT_ON_CONFIRM.value},
        )
        return ConfirmationResult(proposal=confirmed, vouchers=vouchers, unresolved=unresolved)
