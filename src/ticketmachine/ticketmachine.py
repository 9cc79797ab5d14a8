import logging
import threading
import time
from decimal import Decimal
from threading import RLock
from typing import Iterable
from typing import Optional

from .errors import ConfigurationError
from .errors import InvalidAmount
from .errors import InvalidTransitionError
from .errors import TicketMachineBusyError
from .money import Amount
from .money import to_amount
from .outcome import Outcome
from .outcome import Status
from .state import State
from .transition import CANCEL
from .transition import DISPENSE
from .transition import PAY
from .transition import RESET
from .transition import SELECT
from .transition import TRANSITIONS
from .transition import Transition

logger = logging.getLogger("TicketMachine")

DEFAULT_TICKET_PRICE = Decimal(50)
ZERO = Decimal(0)

_Result = tuple[Status, str, Decimal]


class TicketMachine:
    """Ticket machine.

    A customer selects a ticket, inserts money until the ticket price is
    covered and gets the ticket dispensed. The purchase can be canceled
    until the ticket is dispensed.

    Every action is accepted in every state. An action that does not apply
    to the current state is ignored and reported in the returned Outcome
    instead of raising.

    Usage:
        machine = TicketMachine(ticket_price=Decimal("50"))
        machine.select_ticket()
        machine.insert_money(30)
        machine.insert_money(20)
        outcome = machine.dispense_ticket()
        print(outcome)
        ...
        machine.reset()
    """

    def __init__(self, ticket_price: Amount = DEFAULT_TICKET_PRICE):
        try:
            self._ticket_price: Decimal = to_amount(ticket_price)
        except InvalidAmount as error:
            raise ConfigurationError(f"Invalid ticket price: {error}") from error

        # Each action is one critical section. The lock is re-entrant so that
        # hooks and use() blocks can call actions while holding it.
        self._lock = RLock()
        self._state_changed_condition = threading.Condition()
        self._state: State = State.IDLE
        self._balance: Decimal = ZERO

    def __str__(self):
        return self.__class__.__name__

    def __contains__(self, state: State):
        return self.state is state

    @property
    def state(self) -> State:
        """Current state."""
        return self._state

    @property
    def balance(self) -> Decimal:
        """Money inserted during the current transaction."""
        return self._balance

    @property
    def ticket_price(self) -> Decimal:
        return self._ticket_price

    def get_balance(self) -> Decimal:
        return self.balance

    def get_ticket_price(self) -> Decimal:
        return self.ticket_price

    def transitions(self) -> tuple[Transition, ...]:
        """Get transitions."""
        return TRANSITIONS

    def can_transition(self, transition: Transition) -> bool:
        """Check if a transition can be done from the current state.

        Guards are not evaluated. `PAY` is possible in WaitingForMoney
        although it fires only once the balance covers the ticket price.
        """
        return transition.can_transition_from(self.state)

    def select_ticket(self) -> Outcome:
        """Start a purchase."""
        return self._dispatch("select_ticket", self._select_ticket)

    def insert_money(self, amount: Amount) -> Outcome:
        """Add money toward the ticket price.

        Money is accepted only while waiting for money. The machine moves on
        to MoneyReceived once the balance covers the ticket price. Any
        overpayment is kept in the balance.

        Raises InvalidAmount if amount is not a positive finite number, is too
        large or too precise to be added exactly (see money.to_amount). The
        machine is left untouched in that case.
        """
        amount = to_amount(amount)
        return self._dispatch("insert_money", self._insert_money, amount)

    def dispense_ticket(self) -> Outcome:
        """Dispense the ticket once it has been paid.

        Exactly the ticket price is charged. Overpayment stays in the
        balance until reset() refunds it.
        """
        return self._dispatch("dispense_ticket", self._dispense_ticket)

    def cancel_transaction(self) -> Outcome:
        """Cancel the purchase and refund the balance."""
        return self._dispatch("cancel_transaction", self._cancel_transaction)

    def reset(self) -> Outcome:
        """Get ready for the next customer.

        Moves the machine from TicketDispensed or TransactionCanceled back
        to Idle and refunds whatever remains in the balance. Ignored while
        a purchase is in progress or when already idle.
        """
        return self._dispatch("reset", self._reset)

    def _dispatch(self, action: str, handler, *args) -> Outcome:
        with self._lock:
            previous_state = self._state
            logger.debug("Dispatching %s in state %s.", action, previous_state)

            status, message, refund = handler(*args)

            outcome = Outcome(
                action=action,
                status=status,
                message=message,
                previous_state=previous_state,
                state=self._state,
                balance=self._balance,
                refund=refund,
            )

            if outcome.accepted:
                logger.info("%s: %s", action, message)
            else:
                logger.debug("%s ignored in state %s: %s", action, previous_state, message)

            self._call_on_outcome(outcome)
            return outcome

    def _select_ticket(self) -> _Result:
        state = self._state
        if state is State.IDLE:
            self._apply(SELECT)
            return Status.SELECTED, "Ticket selected. Please insert money.", ZERO
        if state is State.WAITING_FOR_MONEY:
            return Status.ALREADY_SELECTED, "Ticket already selected.", ZERO
        if state is State.MONEY_RECEIVED:
            return (
                Status.ALREADY_PAID,
                "Ticket already selected and money received.",
                ZERO,
            )
        if state is State.TICKET_DISPENSED:
            return Status.PROCESSING, "Please wait, processing your ticket.", ZERO
        return (
            Status.START_NEW_TRANSACTION,
            "Transaction canceled. Please start a new transaction.",
            ZERO,
        )

    def _insert_money(self, amount: Decimal) -> _Result:
        state = self._state
        if state is State.WAITING_FOR_MONEY:
            self._balance += amount
            message = f"Money inserted: {amount}. Current balance: {self._balance}."
            if self._balance >= self._ticket_price:
                self._apply(PAY)
            return Status.MONEY_INSERTED, message, ZERO
        if state is State.IDLE:
            return Status.SELECT_FIRST, "Please select a ticket first.", ZERO
        if state is State.MONEY_RECEIVED:
            return Status.ALREADY_RECEIVED, "Money already received.", ZERO
        if state is State.TICKET_DISPENSED:
            return Status.ALREADY_COMPLETED, "Transaction already completed.", ZERO
        return (
            Status.START_NEW_TRANSACTION,
            "Transaction canceled. Please start a new transaction.",
            ZERO,
        )

    def _dispense_ticket(self) -> _Result:
        state = self._state
        if state is State.MONEY_RECEIVED:
            self._balance -= self._ticket_price
            self._apply(DISPENSE)
            return Status.DISPENSING, "Dispensing ticket...", ZERO
        if state is State.IDLE:
            return Status.NOTHING_SELECTED, "No ticket selected.", ZERO
        if state is State.WAITING_FOR_MONEY:
            return (
                Status.INSUFFICIENT_FUNDS,
                "Insert enough money to purchase the ticket.",
                ZERO,
            )
        if state is State.TICKET_DISPENSED:
            return Status.ALREADY_DISPENSED, "Ticket already dispensed.", ZERO
        return (
            Status.NOTHING_TO_DISPENSE,
            "No ticket to dispense. Transaction canceled.",
            ZERO,
        )

    def _cancel_transaction(self) -> _Result:
        state = self._state
        if state.in_transaction:
            refund = self._balance
            self._balance = ZERO
            self._apply(CANCEL)
            if refund:
                return Status.CANCELED, f"Transaction canceled. Refunding {refund}.", refund
            return Status.CANCELED, "Transaction canceled.", refund
        if state is State.IDLE:
            return Status.NOTHING_TO_CANCEL, "No transaction to cancel.", ZERO
        if state is State.TICKET_DISPENSED:
            return (
                Status.CANNOT_CANCEL,
                "Cannot cancel, ticket already dispensed.",
                ZERO,
            )
        return Status.ALREADY_CANCELED, "Transaction already canceled.", ZERO

    def _reset(self) -> _Result:
        state = self._state
        if state.absorbing:
            refund = self._balance
            self._balance = ZERO
            self._apply(RESET)
            if refund:
                return Status.RESET, f"Ready. Returning change: {refund}.", refund
            return Status.RESET, "Ready.", refund
        if state is State.IDLE:
            return Status.NOTHING_TO_RESET, "Already idle.", ZERO
        return (
            Status.TRANSACTION_IN_PROGRESS,
            "Transaction in progress. Cancel it first.",
            ZERO,
        )

    def _apply(self, transition: Transition):
        if not transition.can_transition_from(self._state):
            raise InvalidTransitionError(
                f"Invalid state transition from '{self._state}' to '{transition.to_state}'."
            )

        previous_state = self._state
        self._state = transition.to_state
        logger.debug("State changed from '%s' to '%s'.", previous_state, self._state)

        self._call_on_state_changed(previous_state, self._state)
        self._notify_state_changed()

    def _notify_state_changed(self):
        with self._state_changed_condition:
            self._state_changed_condition.notify_all()

    def _call_on_state_changed(self, from_state: State, to_state: State):
        try:
            self.on_state_changed(from_state, to_state)
        except Exception as error:
            logger.warning("Calling on_state_changed() caused an error: %s", error)
            logger.exception(error)

    def _call_on_outcome(self, outcome: Outcome):
        try:
            self.on_outcome(outcome)
        except Exception as error:
            logger.warning("Calling on_outcome() caused an error: %s", error)
            logger.exception(error)

    def wait(
        self, states: State | Iterable[State], timeout: Optional[float] = None
    ) -> bool:
        """Wait a state to be applied.

        The return value is True unless a given timeout expired, in which case it is False.
        """
        target_states = _as_states(states)
        logger.debug("Waiting %s to occur. Timeout is set as %s.", states, timeout)

        with self._state_changed_condition:
            return self._state_changed_condition.wait_for(
                lambda: self.state in target_states, timeout
            )

    def use(self, blocking: bool = True, timeout: Optional[float] = None) -> "_Use":
        """Reserve the ticket machine for exclusive use by the current thread.

        Actions called by other threads wait until the block is completed.

        Args:
            blocking (bool): If True (default), wait until the machine becomes available.
                             If False, raise TicketMachineBusyError immediately if the
                             machine is already in use.
            timeout (float, optional): Maximum time in seconds to wait for the machine.
                                       If None, wait indefinitely (when blocking=True).

        Example:
            with machine.use():
                machine.select_ticket()
                machine.insert_money(50)
                machine.dispense_ticket()
        """
        return _Use(self, blocking=blocking, timeout=timeout)

    def when(
        self, states: State | Iterable[State], timeout: Optional[float] = None
    ) -> "_When":
        """Wait until the machine reaches one of the states, then reserve it.

        Raises TimeoutError if none of the states is reached in time.

        Example:
            with machine.when([State.TICKET_DISPENSED, State.TRANSACTION_CANCELED]):
                machine.reset()
        """
        return _When(ticket_machine=self, states=states, timeout=timeout)

    def on_state_changed(self, from_state: State, to_state: State):
        """On state changed callback.

        Called while the action is still in progress, before the Outcome
        is created.
        """

    def on_outcome(self, outcome: Outcome):
        """Called after every action, applied or ignored."""


class _Use:
    def __init__(
        self,
        ticket_machine: TicketMachine,
        blocking: bool,
        timeout: Optional[float] = None,
    ):
        self._ticket_machine = ticket_machine
        self._blocking = blocking
        self._timeout = timeout

    def __enter__(self):
        tm = self._ticket_machine
        # Lock.acquire(): It is forbidden to specify a timeout when blocking is False.
        timeout = self._timeout if self._blocking and self._timeout is not None else -1
        if not tm._lock.acquire(blocking=self._blocking, timeout=timeout):
            raise TicketMachineBusyError(
                f"Failed to reserve {tm} (blocking={self._blocking} timeout={self._timeout}): "
                "Busy serving another thread."
            )
        return tm

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._ticket_machine._lock.release()


class _When:
    def __init__(
        self,
        ticket_machine: TicketMachine,
        states: State | Iterable[State],
        timeout: Optional[float] = None,
    ):
        self._ticket_machine = ticket_machine
        self._states = _as_states(states)
        self._timeout = timeout

    def __enter__(self):
        tm = self._ticket_machine
        timer = _CountdownTimer(self._timeout)
        while tm.wait(self._states, timeout=timer.time_left):
            if not tm._lock.acquire(timeout=_lock_timeout(timer.time_left)):
                break
            # Another thread may have moved the machine on before the lock
            # was acquired.
            if tm.state in self._states:
                return tm
            tm._lock.release()
            if timer.expired():
                break
        raise TimeoutError(
            f"Waiting for {self._states} state(s) timed out in {self._timeout} seconds."
        )

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._ticket_machine._lock.release()


def _as_states(states: State | Iterable[State]) -> list[State]:
    return [states] if isinstance(states, State) else list(states)


def _lock_timeout(time_left: Optional[float]) -> float:
    return -1 if time_left is None else time_left


class _CountdownTimer:
    def __init__(self, duration: Optional[float] = None):
        self.duration = duration
        self.start_time = time.time()

    def __str__(self) -> str:
        return str(self.time_left)

    @property
    def time_left(self) -> Optional[float]:
        if self.duration is None:
            return None
        return max(0.0, self.duration - (time.time() - self.start_time))

    def expired(self) -> bool:
        time_left = self.time_left
        if self.duration is None or time_left is None:
            return False
        return time_left <= 0
