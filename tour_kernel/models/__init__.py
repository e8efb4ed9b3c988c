"""ORM models for the tour kernel."""

from tour_kernel.models.proposal import ProposalModel
from tour_kernel.models.voucher import VoucherModel

__all__ = [
    "ProposalModel",
    "VoucherModel",
]
