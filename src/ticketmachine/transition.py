from dataclasses import dataclass
from typing import Optional

from .state import State


@dataclass(frozen=True)
class Transition:
    """State transition.

    Describes which action moves the machine from any of `from_states`
    to `to_state`. An optional `guard` documents the condition that must
    hold for the transition to fire.
    """

    from_states: tuple[State, ...]
    to_state: State
    action: str
    guard: Optional[str] = None

    def __post_init__(self):
        for state in self.from_states:
            if not isinstance(state, State):
                raise ValueError(f"Expecting State, got {state}.")

        if not isinstance(self.to_state, State):
            raise ValueError(f"Expecting State, got {self.to_state}.")

    def __str__(self):
        return f"{self.action} [{self.guard}]" if self.guard else self.action

    def can_transition_from(self, from_state: State) -> bool:
        """Is transition possible from given state to target state."""
        return from_state in self.from_states


SELECT = Transition(
    from_states=(State.IDLE,),
    to_state=State.WAITING_FOR_MONEY,
    action="select_ticket",
)
PAY = Transition(
    from_states=(State.WAITING_FOR_MONEY,),
    to_state=State.MONEY_RECEIVED,
    action="insert_money",
    guard="balance >= ticket_price",
)
DISPENSE = Transition(
    from_states=(State.MONEY_RECEIVED,),
    to_state=State.TICKET_DISPENSED,
    action="dispense_ticket",
)
CANCEL = Transition(
    from_states=(State.WAITING_FOR_MONEY, State.MONEY_RECEIVED),
    to_state=State.TRANSACTION_CANCELED,
    action="cancel_transaction",
)
RESET = Transition(
    from_states=(State.TICKET_DISPENSED, State.TRANSACTION_CANCELED),
    to_state=State.IDLE,
    action="reset",
)

TRANSITIONS: tuple[Transition, ...] = (SELECT, PAY, DISPENSE, CANCEL, RESET)
