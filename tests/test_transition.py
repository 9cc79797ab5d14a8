import pytest

from ticketmachine import State
from ticketmachine import TicketMachine
from ticketmachine import Transition
from ticketmachine import TRANSITIONS
from ticketmachine.transition import CANCEL
from ticketmachine.transition import PAY
from ticketmachine.transition import RESET
from ticketmachine.transition import SELECT


def test_can_transition_from():
    assert SELECT.can_transition_from(State.IDLE) == True
    assert SELECT.can_transition_from(State.WAITING_FOR_MONEY) == False

    assert CANCEL.can_transition_from(State.WAITING_FOR_MONEY) == True
    assert CANCEL.can_transition_from(State.MONEY_RECEIVED) == True
    assert CANCEL.can_transition_from(State.TICKET_DISPENSED) == False

    assert RESET.can_transition_from(State.TICKET_DISPENSED) == True
    assert RESET.can_transition_from(State.TRANSACTION_CANCELED) == True
    assert RESET.can_transition_from(State.IDLE) == False


def test_name():
    assert str(SELECT) == "select_ticket"
    assert str(PAY) == "insert_money [balance >= ticket_price]"


def test_only_reset_leaves_absorbing_states():
    for t in TRANSITIONS:
        if any(s.absorbing for s in t.from_states):
            assert t is RESET


def test_expecting_states():
    with pytest.raises(ValueError):
        Transition(from_states=("Idle",), to_state=State.IDLE, action="foo")

    with pytest.raises(ValueError):
        Transition(from_states=(State.IDLE,), to_state="Idle", action="foo")


def test_can_transition():
    tm = TicketMachine()
    assert tm.transitions() == TRANSITIONS
    assert tm.can_transition(SELECT) == True
    assert tm.can_transition(PAY) == False

    tm.select_ticket()
    assert tm.can_transition(SELECT) == False
    assert tm.can_transition(PAY) == True
    assert tm.can_transition(CANCEL) == True
