"""Proposal and voucher lifecycle definitions."""

import pytest

from tour_kernel.domain.lifecycles import (
    HAS_SELECTION,
    PROPOSAL_WORKFLOW,
    VOUCHER_WORKFLOW,
    ProposalStatus,
    VoucherStatus,
)
from tour_kernel.domain.workflow import Transition, Workflow, resolve_transition
from tour_kernel.exceptions import InvalidTransitionError


class TestProposalWorkflow:
    def test_initial_state(self):
        assert PROPOSAL_WORKFLOW.initial_state == ProposalStatus.NEW

    def test_confirm_is_guarded(self):
        transition = resolve_transition(
            PROPOSAL_WORKFLOW, ProposalStatus.NEW, ProposalStatus.CONFIRMED
        )
        assert transition.action == "confirm"
        assert transition.guard is HAS_SELECTION

    def test_cancel_from_new(self):
        transition = resolve_transition(
            PROPOSAL_WORKFLOW, ProposalStatus.NEW, ProposalStatus.CANCELLED
        )
        assert transition.action == "cancel"

    @pytest.mark.parametrize(
        "from_state, to_state",
        [
            (ProposalStatus.CONFIRMED, ProposalStatus.CONFIRMED),
            (ProposalStatus.CONFIRMED, ProposalStatus.NEW),
            (ProposalStatus.CANCELLED, ProposalStatus.CONFIRMED),
            (ProposalStatus.CONFIRMED, ProposalStatus.CANCELLED),
        ],
    )
    def test_terminal_states_have_no_exit(self, from_state, to_state):
        with pytest.raises(InvalidTransitionError) as exc_info:
            resolve_transition(PROPOSAL_WORKFLOW, from_state, to_state)
        assert exc_info.value.from_state == from_state.value
        assert exc_info.value.to_state == to_state.value

    def test_terminal_states(self):
        assert PROPOSAL_WORKFLOW.is_terminal(ProposalStatus.CONFIRMED)
        assert PROPOSAL_WORKFLOW.is_terminal(ProposalStatus.CANCELLED)
        assert not PROPOSAL_WORKFLOW.is_terminal(ProposalStatus.NEW)


class TestVoucherWorkflow:
    def test_happy_path(self):
        resolve_transition(VOUCHER_WORKFLOW, VoucherStatus.PENDING_PAYMENT, VoucherStatus.PAID)
        resolve_transition(VOUCHER_WORKFLOW, VoucherStatus.PAID, VoucherStatus.COMPLETED)

    def test_allowed_targets(self):
        assert set(VOUCHER_WORKFLOW.allowed_targets(VoucherStatus.PENDING_PAYMENT)) == {
            "PAID",
            "CANCELLED",
        }
        assert VOUCHER_WORKFLOW.allowed_targets(VoucherStatus.COMPLETED) == ()

    def test_cannot_skip_payment(self):
        with pytest.raises(InvalidTransitionError):
            resolve_transition(
                VOUCHER_WORKFLOW, VoucherStatus.PENDING_PAYMENT, VoucherStatus.COMPLETED
            )

    def test_completed_cannot_be_cancelled(self):
        with pytest.raises(InvalidTransitionError):
            resolve_transition(VOUCHER_WORKFLOW, VoucherStatus.COMPLETED, VoucherStatus.CANCELLED)


class TestWorkflowDefinition:
    def test_undeclared_initial_state(self):
        with pytest.raises(ValueError, match="initial state"):
            Workflow("w", "", "X", ("A",), ())

    def test_undeclared_transition_state(self):
        with pytest.raises(ValueError, match="undeclared state"):
            Workflow("w", "", "A", ("A",), (Transition("A", "B", "go"),))

    def test_terminal_state_with_exit(self):
        with pytest.raises(ValueError, match="terminal state"):
            Workflow(
                "w", "", "A", ("A", "B"),
                (Transition("A", "B", "go"), Transition("B", "A", "back")),
                terminal_states=("B",),
            )
