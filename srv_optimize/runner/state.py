"""
StateMachine - Menu workflow states.

MENU → (action) → MENU
MENU → SUPER_CONFIRM → MENU
MENU → EXIT

Every action returns to MENU. SUPER_CONFIRM runs all five operations on
an affirmative answer and returns to MENU either way.
"""

from enum import Enum, auto
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime


class State(Enum):
    """Menu workflow states."""
    MENU = auto()
    ACTION = auto()
    SUPER_CONFIRM = auto()
    EXIT = auto()


# Valid state transitions
TRANSITIONS: Dict[State, List[State]] = {
    State.MENU: [State.ACTION, State.SUPER_CONFIRM, State.EXIT],
    State.ACTION: [State.MENU],
    State.SUPER_CONFIRM: [State.ACTION, State.MENU],
    State.EXIT: [],
}


@dataclass
class StateEvent:
    """Record of a state transition."""
    from_state: State
    to_state: State
    timestamp: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)


class StateMachine:
    """
    Tracks the menu state and rejects invalid transitions.
    """

    def __init__(self, initial_state: State = State.MENU):
        self._state = initial_state
        self._history: List[StateEvent] = []

    @property
    def state(self) -> State:
        """Get current state."""
        return self._state

    @property
    def history(self) -> List[StateEvent]:
        """Get state transition history."""
        return self._history.copy()

    def can_transition(self, to_state: State) -> bool:
        """Check if transition to target state is valid."""
        return to_state in TRANSITIONS.get(self._state, [])

    def transition(self, to_state: State, metadata: Optional[Dict[str, Any]] = None):
        """
        Transition to a new state.

        Args:
            to_state: Target state
            metadata: Optional data about the transition

        Raises:
            ValueError: If transition is not valid
        """
        if not self.can_transition(to_state):
            raise ValueError(
                f"Invalid transition: {self._state.name} → {to_state.name}. "
                f"Valid transitions: {[s.name for s in TRANSITIONS.get(self._state, [])]}"
            )

        self._history.append(StateEvent(
            from_state=self._state,
            to_state=to_state,
            timestamp=datetime.now(),
            metadata=metadata or {},
        ))
        self._state = to_state

    def is_terminal(self) -> bool:
        return self._state == State.EXIT

    def format_history(self) -> str:
        """Format history as human-readable string."""
        return '\n'.join(
            f"{event.from_state.name} → {event.to_state.name}" for event in self._history
        )
