"""Finite state machine with validated transitions.

Used for the command execution engine lifecycle: every transition has to be
declared in the state graph up front, and each declared transition may carry
an effect that runs when it is taken. Anything else raises ``ValueError``.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

State = TypeVar("State", bound=Enum)
"""Type variable for state enumerations."""

ActionFn = Callable[..., Any]
"""Effect executed when a transition is taken."""

StateGraph = dict[Enum, Iterable["Action"]]
"""Mapping from a state to the actions allowed out of it."""


@dataclass(frozen=True)
class Action:
    """A transition to ``state`` with an optional effect.

    Attributes:
        state: Target state of the transition.
        effect: Called with the arguments given to
            :meth:`StateMachine.request_transition`.
    """

    state: Enum
    effect: ActionFn | None = None

    def __call__(self, *args, **kwargs) -> Any:
        if self.effect:
            return self.effect(*args, **kwargs)
        return None


class StateMachine:
    """A finite state machine that only follows declared transitions.

    Attributes:
        _state: Current state.
        _allowed: Allowed actions per state.
    """

    _allowed: StateGraph
    _state: Enum

    def __init__(self, initial_state: Enum, nodes_graph: StateGraph):
        self._state = initial_state
        self._allowed = nodes_graph

    @property
    def current(self) -> Enum:
        """The current state."""
        return self._state

    def can_transition(self, to: Enum) -> bool:
        """Whether a transition from the current state to ``to`` is declared."""
        return any(action.state == to for action in self._allowed.get(self._state, ()))

    def request_transition(self, next_state: Enum, *args, **kwargs) -> Any:
        """Move to ``next_state`` and run the transition's effect.

        The state is updated before the effect runs, so effects observe the
        new state.

        Returns:
            Whatever the effect returns, or None.

        Raises:
            ValueError: If the transition is not declared.
        """
        next_action = self._validate_transition(self._state, next_state)
        self._state = next_action.state
        return next_action(*args, **kwargs)

    def _validate_transition(self, frm: Enum, to: Enum) -> Action:
        for action in self._allowed.get(frm, ()):
            if action.state == to:
                return action

        msg = f"Illegal transition {frm.name} → {to.name}"
        raise ValueError(msg)
