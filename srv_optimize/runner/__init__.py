"""
Runner module - Drives the interactive menu.

It:
- Tracks menu state transitions
- Dispatches selections to backup, restore and tuning actions
"""

from .engine import Orchestrator
from .state import StateMachine, State

__all__ = [
    "Orchestrator",
    "StateMachine",
    "State",
]
