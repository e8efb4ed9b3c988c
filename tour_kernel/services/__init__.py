"""Services for the tour kernel (write side)."""

from tour_kernel.services.confirmation_service import ConfirmationService
from tour_kernel.services.proposal_service import ProposalService
from tour_kernel.services.voucher_service import VoucherService

__all__ = [
    "ConfirmationService",
    "ProposalService",
    "VoucherService",
]
