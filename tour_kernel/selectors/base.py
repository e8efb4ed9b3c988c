"""
Module: tour_kernel.selectors.base
Responsibility: Abstract base class for read-only selectors, the query side
    of the kernel.
Architecture position: Kernel > Selectors.  May import from domain/ and
    repositories/.  MUST NOT import from services/.

Invariants enforced:
    - Read-only access: selectors call only the load/list methods of the
      repository, never save/add or atomic().
    - Selectors return frozen domain values or computed summaries.
"""

from abc import ABC

from tour_kernel.repositories.base import QuotingRepository


class BaseSelector(ABC):
    """
    Contract:
        Accepts a repository from the caller and only reads from it.

    Non-goals:
        - BaseSelector does NOT define any query methods.
    """

    def __init__(self, repository: QuotingRepository):
        self.repository = repository
