"""
BaseService -- abstract base for the kernel's write-side services.

Responsibility:
    Common constructor and lookup helpers.  Every service receives a
    QuotingRepository, a Clock and a QuotingPolicy from its caller and
    persists through the repository -- it never opens or commits a
    transaction itself.

Architecture position:
    Kernel > Services -- imperative shell around the pure domain.

Invariants enforced:
    Transaction boundaries belong to the caller: services write through
    ``repository.atomic()`` blocks and the repository only flushes.
"""

from __future__ import annotations

from abc import ABC
from uuid import UUID

from tour_kernel.domain.clock import Clock, SystemClock
from tour_kernel.domain.policy import QuotingPolicy
from tour_kernel.domain.proposal import Proposal
from tour_kernel.exceptions import ProposalNotFoundError
from tour_kernel.repositories.base import QuotingRepository


class BaseService(ABC):
    """
    Contract:
        Accepts a repository from the caller; reads and writes go through it.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide list/search queries -- those belong in
          ``tour_kernel/selectors/``.
    """

    def __init__(
        self,
        repository: QuotingRepository,
        clock: Clock | None = None,
        policy: QuotingPolicy | None = None,
    ):
        self.repository = repository
        self._clock = clock or SystemClock()
        self._policy = policy or QuotingPolicy()

    @property
    def policy(self) -> QuotingPolicy:
        return self._policy

    def _require_proposal(self, proposal_id: UUID) -> Proposal:
        proposal = self.repository.load_proposal(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(str(proposal_id))
        return proposal
