import logging
from decimal import Decimal

from ticketmachine import Outcome, State, TicketMachine

# Configure logging
logging.basicConfig(format="%(levelname)s %(message)s", level=logging.INFO)


class Kiosk(TicketMachine):
    """Ticket machine that prints every outcome and hands out refunds."""

    def on_outcome(self, outcome: Outcome):
        print(f"[{outcome.state}] {outcome}")
        if outcome.refund:
            print(f"Coins returned: {outcome.refund}")

    def on_state_changed(self, from_state: State, to_state: State):
        print(f"State changed: {from_state} → {to_state}.")


kiosk = Kiosk(ticket_price=Decimal("2.50"))
kiosk.select_ticket()

# Inserting money more than the price moves the machine on immediately.
kiosk.insert_money(2)
kiosk.insert_money(1)

# Only the ticket price is charged. The rest stays in the balance ...
kiosk.dispense_ticket()

# ... until the machine gets ready for the next customer.
kiosk.reset()
