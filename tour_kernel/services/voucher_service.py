"""
VoucherService -- fulfilment-side maintenance of vouchers.

Responsibility:
    Moves vouchers through their payment lifecycle and maintains the
    booking details the supplier needs: pax counts, the guest list and
    notes.

Architecture position:
    Kernel > Services.  Status moves go through VOUCHER_WORKFLOW; edits use
    the pure functions in domain/voucher.py.

Invariants enforced:
    SNAPSHOT_ON_CONFIRM -- no method touches service_data.
    Voucher lifecycle -- PENDING_PAYMENT -> PAID -> COMPLETED, cancel from
        PENDING_PAYMENT or PAID; COMPLETED and CANCELLED are terminal.

Failure modes:
    - VoucherNotFoundError, GuestNotFoundError
    - InvalidTransitionError for a move the workflow does not allow
    - ValidationFailure for negative pax counts
"""

from __future__ import annotations

from typing import Callable
from uuid import UUID

from tour_kernel.domain import voucher as voucher_ops
from tour_kernel.domain.lifecycles import VOUCHER_WORKFLOW, VoucherStatus
from tour_kernel.domain.voucher import Voucher
from tour_kernel.domain.workflow import resolve_transition
from tour_kernel.exceptions import InvalidTransitionError, VoucherNotFoundError
from tour_kernel.logging_config import LogContext, get_logger
from tour_kernel.services.base import BaseService

logger = get_logger("services.voucher")


class VoucherService(BaseService):
    """
    Contract:
        Each method loads the voucher, applies one edit and saves it.
        The saved voucher is returned.
    """

    def get_voucher(self, voucher_id: UUID) -> Voucher:
        voucher = self.repository.load_voucher(voucher_id)
        if voucher is None:
            raise VoucherNotFoundError(str(voucher_id))
        return voucher

    def _edit(self, voucher_id: UUID, event: str, edit: Callable[[Voucher], Voucher]) -> Voucher:
        with LogContext.bind(voucher_id=str(voucher_id)):
            updated = edit(self.get_voucher(voucher_id))
            with self.repository.atomic():
                self.repository.save_voucher(updated)
            logger.info(event, extra={"proposal_reference": updated.proposal_reference})
            return updated

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def change_status(self, voucher_id: UUID, new_status: VoucherStatus | str) -> Voucher:
        """Move a voucher to ``new_status`` if the workflow allows it."""
        target = VoucherStatus(new_status)
        with LogContext.bind(voucher_id=str(voucher_id)):
            voucher = self.get_voucher(voucher_id)
            try:
                resolve_transition(VOUCHER_WORKFLOW, voucher.status, target)
            except InvalidTransitionError as e:
                logger.warning(
                    "voucher_transition_rejected",
                    extra={
                        "from_state": voucher.status.value,
                        "to_state": target.value,
                        "code": e.code,
                    },
                )
                raise

            updated = voucher_ops.with_status(voucher, target)
            with self.repository.atomic():
                self.repository.save_voucher(updated)
            logger.info(
                "voucher_status_changed",
                extra={"from_state": voucher.status.value, "to_state": target.value},
            )
            return updated

    def mark_paid(self, voucher_id: UUID) -> Voucher:
        return self.change_status(voucher_id, VoucherStatus.PAID)

    def mark_completed(self, voucher_id: UUID) -> Voucher:
        return self.change_status(voucher_id, VoucherStatus.COMPLETED)

    def cancel_voucher(self, voucher_id: UUID) -> Voucher:
        return self.change_status(voucher_id, VoucherStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Booking details
    # ------------------------------------------------------------------

    def update_pax(self, voucher_id: UUID, adults: int, children: int) -> Voucher:
        """Set adults/children; total_pax is their sum."""
        return self._edit(
            voucher_id,
            "voucher_pax_updated",
            lambda v: voucher_ops.with_pax(v, adults, children),
        )

    def update_notes(self, voucher_id: UUID, notes: str) -> Voucher:
        return self._edit(
            voucher_id, "voucher_notes_updated", lambda v: voucher_ops.with_notes(v, notes)
        )

    def add_guest(self, voucher_id: UUID, **details: str) -> Voucher:
        return self._edit(
            voucher_id, "voucher_guest_added", lambda v: voucher_ops.add_guest(v, **details)
        )

    def update_guest(self, voucher_id: UUID, guest_id: int, **changes: str) -> Voucher:
        return self._edit(
            voucher_id,
            "voucher_guest_updated",
            lambda v: voucher_ops.update_guest(v, guest_id, **changes),
        )

    def remove_guest(self, voucher_id: UUID, guest_id: int) -> Voucher:
        return self._edit(
            voucher_id,
            "voucher_guest_removed",
            lambda v: voucher_ops.remove_guest(v, guest_id),
        )

    def duplicate_guest(self, voucher_id: UUID, guest_id: int) -> Voucher:
        return self._edit(
            voucher_id,
            "voucher_guest_duplicated",
            lambda v: voucher_ops.duplicate_guest(v, guest_id),
        )
