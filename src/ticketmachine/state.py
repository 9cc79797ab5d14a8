import enum


class State(enum.Enum):
    """Ticket machine state.

    A state is a plain tag. Balance and price live on the TicketMachine,
    so a state holds no data and no reference to the machine.

    Usage:
        machine = TicketMachine()
        machine.select_ticket()
        assert machine.state is State.WAITING_FOR_MONEY
    """

    IDLE = "Idle"
    WAITING_FOR_MONEY = "WaitingForMoney"
    MONEY_RECEIVED = "MoneyReceived"
    TICKET_DISPENSED = "TicketDispensed"
    TRANSACTION_CANCELED = "TransactionCanceled"

    def __str__(self) -> str:
        return self.value

    @property
    def absorbing(self) -> bool:
        """Is the purchase over.

        Only `TicketMachine.reset()` leaves an absorbing state.
        """
        return self in (State.TICKET_DISPENSED, State.TRANSACTION_CANCELED)

    @property
    def in_transaction(self) -> bool:
        """Is a purchase in progress and cancelable."""
        return self in (State.WAITING_FOR_MONEY, State.MONEY_RECEIVED)
