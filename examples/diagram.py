import logging

from ticketmachine import TicketMachine
from ticketmachine.diagram import show_state_diagram

logging.basicConfig(format="%(levelname)s %(message)s", level=logging.DEBUG)

show_state_diagram(TicketMachine(), name="Ticket machine")
