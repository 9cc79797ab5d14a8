"""Demonstrate a ticket purchase.

Runs a purchase on a fresh ticket machine and prints the outcome of each
action:

    python -m ticketmachine
    python -m ticketmachine --price 2.50 --insert 2 --insert 1
    python -m ticketmachine --insert 30 --cancel
    python -m ticketmachine --diagram
"""
import argparse
import logging
import sys
from decimal import Decimal
from typing import Optional

from ticketmachine import InvalidAmount
from ticketmachine import TicketMachine
from ticketmachine import TicketMachineError
from ticketmachine.diagram import create_state_diagram
from ticketmachine.ticketmachine import DEFAULT_TICKET_PRICE

logger = logging.getLogger(__name__)

DEFAULT_INSERTIONS = [Decimal(30), Decimal(20)]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ticketmachine", description="Buy a ticket from a ticket machine."
    )
    parser.add_argument(
        "--price",
        default=DEFAULT_TICKET_PRICE,
        help="ticket price (default: %(default)s)",
    )
    parser.add_argument(
        "--insert",
        dest="insertions",
        metavar="AMOUNT",
        action="append",
        help="insert money, can be repeated (default: 30 and 20)",
    )
    parser.add_argument(
        "--cancel",
        action="store_true",
        help="cancel the purchase instead of dispensing the ticket",
    )
    parser.add_argument(
        "--diagram",
        action="store_true",
        help="print the state diagram in Mermaid syntax and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def run(machine: TicketMachine, insertions: list, cancel: bool = False) -> list:
    """Run one purchase and return the outcomes in order."""
    outcomes = [machine.select_ticket()]
    outcomes += [machine.insert_money(amount) for amount in insertions]

    if cancel:
        outcomes.append(machine.cancel_transaction())
    else:
        outcomes.append(machine.dispense_ticket())

    outcomes.append(machine.reset())
    return outcomes


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        format=" %(name)-12s [%(levelname)-5s] %(message)s", level=args.log_level
    )

    try:
        machine = TicketMachine(ticket_price=args.price)
    except TicketMachineError as error:
        print(f"error: {error}", file=sys.stderr)
        return 2

    if args.diagram:
        print(create_state_diagram(machine))
        return 0

    insertions = args.insertions if args.insertions else DEFAULT_INSERTIONS

    try:
        outcomes = run(machine, insertions, cancel=args.cancel)
    except InvalidAmount as error:
        print(f"error: {error}", file=sys.stderr)
        return 2

    for outcome in outcomes:
        print(f"[{outcome.state}] {outcome}")

    print("Process completed.")
    logger.debug("Final state: %s, balance: %s", machine.state, machine.balance)
    return 0


if __name__ == "__main__":
    sys.exit(main())
