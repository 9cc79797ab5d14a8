class TicketMachineError(Exception):
    """Generic base for ticket machine errors."""


class InvalidAmount(TicketMachineError, ValueError):
    """Amount is not a positive finite number.

    Raised by `TicketMachine.insert_money()` before the machine is touched.
    """


class ConfigurationError(TicketMachineError):
    """Configuration error.

    Raised for example if ticket price is not positive.
    """


class InvalidTransitionError(TicketMachineError):
    """Raised if a state transition is not allowed from the current state."""


class TicketMachineBusyError(TicketMachineError):
    """Raised when the ticket machine is reserved by another thread."""
