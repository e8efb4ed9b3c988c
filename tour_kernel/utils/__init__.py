"""Utility modules for the tour kernel."""

from tour_kernel.utils.references import generate_proposal_reference, is_proposal_reference

__all__ = [
    "generate_proposal_reference",
    "is_proposal_reference",
]
