"""Selectors for the tour kernel (read side)."""

from tour_kernel.selectors.proposal_selector import (
    DashboardStats,
    ProposalSelector,
    ProposalSummary,
)

__all__ = [
    "DashboardStats",
    "ProposalSelector",
    "ProposalSummary",
]
