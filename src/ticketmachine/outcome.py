import enum
from dataclasses import dataclass
from decimal import Decimal

from .state import State


class Status(enum.Enum):
    """Outcome code of an action."""

    # Applied actions.
    SELECTED = "selected"
    MONEY_INSERTED = "money_inserted"
    DISPENSING = "dispensing"
    CANCELED = "canceled"
    RESET = "reset"

    # Informational no-ops.
    SELECT_FIRST = "select_first"
    NOTHING_SELECTED = "nothing_selected"
    NOTHING_TO_CANCEL = "nothing_to_cancel"
    NOTHING_TO_RESET = "nothing_to_reset"
    ALREADY_SELECTED = "already_selected"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_IN_PROGRESS = "transaction_in_progress"
    ALREADY_PAID = "already_paid"
    ALREADY_RECEIVED = "already_received"
    PROCESSING = "processing"
    ALREADY_COMPLETED = "already_completed"
    ALREADY_DISPENSED = "already_dispensed"
    CANNOT_CANCEL = "cannot_cancel"
    START_NEW_TRANSACTION = "start_new_transaction"
    NOTHING_TO_DISPENSE = "nothing_to_dispense"
    ALREADY_CANCELED = "already_canceled"

    def __str__(self) -> str:
        return self.value


_APPLIED = frozenset(
    [Status.SELECTED, Status.MONEY_INSERTED, Status.DISPENSING, Status.CANCELED, Status.RESET]
)


@dataclass(frozen=True)
class Outcome:
    """Outcome of a ticket machine action.

    Returned by every action instead of printing. `balance` is the balance
    after the action and `refund` the money handed back by it.
    """

    action: str
    status: Status
    message: str
    previous_state: State
    state: State
    balance: Decimal
    refund: Decimal = Decimal(0)

    def __str__(self) -> str:
        return self.message

    @property
    def accepted(self) -> bool:
        """Was the action applied instead of being ignored."""
        return self.status in _APPLIED

    @property
    def changed(self) -> bool:
        """Did the action change the state."""
        return self.previous_state is not self.state
