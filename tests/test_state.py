"""
Tests for the menu state machine.
"""

import pytest

from srv_optimize.runner.state import State, StateMachine


def test_action_round_trip():
    sm = StateMachine()

    sm.transition(State.ACTION, {"choice": "3"})
    sm.transition(State.MENU)

    assert sm.state == State.MENU
    assert [e.to_state for e in sm.history] == [State.ACTION, State.MENU]
    assert sm.history[0].metadata == {"choice": "3"}


def test_super_confirm_can_decline_or_proceed():
    sm = StateMachine()
    sm.transition(State.SUPER_CONFIRM)
    assert sm.can_transition(State.MENU)
    assert sm.can_transition(State.ACTION)
    assert not sm.can_transition(State.EXIT)


def test_exit_is_terminal():
    sm = StateMachine()
    sm.transition(State.EXIT)

    assert sm.is_terminal()
    with pytest.raises(ValueError):
        sm.transition(State.MENU)


def test_action_cannot_chain_to_action():
    sm = StateMachine()
    sm.transition(State.ACTION)

    with pytest.raises(ValueError, match="Invalid transition: ACTION"):
        sm.transition(State.ACTION)


def test_format_history():
    sm = StateMachine()
    sm.transition(State.ACTION)
    sm.transition(State.MENU)

    assert sm.format_history() == "MENU → ACTION\nACTION → MENU"
