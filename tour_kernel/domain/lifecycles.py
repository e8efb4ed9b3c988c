"""
Lifecycles -- proposal and voucher statuses and their state machines.

    Proposal:  NEW --confirm--> CONFIRMED
               NEW --cancel---> CANCELLED

    Voucher:   PENDING_PAYMENT --pay------> PAID --complete--> COMPLETED
               PENDING_PAYMENT --cancel---> CANCELLED
               PAID            --cancel---> CANCELLED

CONFIRMED, COMPLETED and both CANCELLED states are terminal.  A confirmed
proposal is never re-confirmed; to quote it again, copy it.
"""

from __future__ import annotations

from enum import Enum

from tour_kernel.domain.workflow import Guard, Transition, Workflow


class ProposalStatus(str, Enum):
    NEW = "NEW"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class VoucherStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


HAS_SELECTION = Guard(
    name="has_selection",
    description="At least one selected line item resolves in the proposal",
)

PROPOSAL_WORKFLOW = Workflow(
    name="proposal",
    description="Quote lifecycle from draft to confirmation or cancellation",
    initial_state=ProposalStatus.NEW.value,
    states=tuple(s.value for s in ProposalStatus),
    transitions=(
        Transition(
            ProposalStatus.NEW.value,
            ProposalStatus.CONFIRMED.value,
            action="confirm",
            guard=HAS_SELECTION,
        ),
        Transition(ProposalStatus.NEW.value, ProposalStatus.CANCELLED.value, action="cancel"),
    ),
    terminal_states=(ProposalStatus.CONFIRMED.value, ProposalStatus.CANCELLED.value),
)

VOUCHER_WORKFLOW = Workflow(
    name="voucher",
    description="Fulfilment lifecycle of one confirmed service",
    initial_state=VoucherStatus.PENDING_PAYMENT.value,
    states=tuple(s.value for s in VoucherStatus),
    transitions=(
        Transition(VoucherStatus.PENDING_PAYMENT.value, VoucherStatus.PAID.value, action="pay"),
        Transition(VoucherStatus.PAID.value, VoucherStatus.COMPLETED.value, action="complete"),
        Transition(
            VoucherStatus.PENDING_PAYMENT.value, VoucherStatus.CANCELLED.value, action="cancel"
        ),
        Transition(VoucherStatus.PAID.value, VoucherStatus.CANCELLED.value, action="cancel"),
    ),
    terminal_states=(VoucherStatus.COMPLETED.value, VoucherStatus.CANCELLED.value),
)
