"""Persistence port and its implementations."""

from tour_kernel.repositories.base import QuotingRepository
from tour_kernel.repositories.memory import InMemoryQuotingRepository
from tour_kernel.repositories.sql import SqlQuotingRepository

__all__ = [
    "InMemoryQuotingRepository",
    "QuotingRepository",
    "SqlQuotingRepository",
]
