"""
Workflow types (``tour_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for lifecycle state machines.  Proposal and voucher
lifecycles are declared once (see ``lifecycles.py``) with the same Guard,
Transition and Workflow types, and every status change goes through
``resolve_transition`` so an illegal move is rejected the same way
everywhere.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``services/``, ``selectors/``, or outer layers.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions.

Failure modes
-------------
* ``ValueError`` at declaration time for a malformed workflow.
* ``InvalidTransitionError`` when no transition leads from the current
  state to the requested one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tour_kernel.exceptions import InvalidTransitionError


@dataclass(frozen=True)
class Guard:
    """A condition that must be satisfied before a transition fires.

    Contract: frozen, descriptive only.
    Non-goals: does not evaluate the condition -- the owning service does.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    Guarantees: ``initial_state`` is a member of ``states`` and
    ``terminal_states`` have no outgoing transitions.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"Workflow {self.name}: initial state {self.initial_state!r} "
                f"is not a declared state"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(
                    f"Workflow {self.name}: transition {t.action!r} references "
                    f"an undeclared state ({t.from_state} -> {t.to_state})"
                )
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"Workflow {self.name}: terminal state {t.from_state!r} "
                    f"has an outgoing transition"
                )

    def find_transition(self, from_state: str, to_state: str) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.to_state == to_state:
                return t
        return None

    def allowed_targets(self, from_state: str) -> tuple[str, ...]:
        return tuple(t.to_state for t in self.transitions if t.from_state == from_state)

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states


def resolve_transition(workflow: Workflow, from_state: str, to_state: str) -> Transition:
    """
    Return the transition ``from_state -> to_state``.

    Raises:
        InvalidTransitionError: if the workflow does not allow the move.
    """
    transition = workflow.find_transition(from_state, to_state)
    if transition is None:
        raise InvalidTransitionError(
            workflow.name, _state_name(from_state), _state_name(to_state)
        )
    return transition


def _state_name(state: str) -> str:
    return state.value if isinstance(state, Enum) else state
