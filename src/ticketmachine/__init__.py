from ._version import __version__
from .errors import *
from .state import State
from .transition import Transition
from .transition import TRANSITIONS
from .outcome import Outcome
from .outcome import Status
from .ticketmachine import TicketMachine
