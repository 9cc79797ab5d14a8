import threading

from ticketmachine import State, TicketMachine

machine = TicketMachine()


def customer(name: str, amounts: list):
    # Reserve the machine so that purchases of two customers do not mix.
    with machine.when(State.IDLE):
        machine.select_ticket()
        for amount in amounts:
            machine.insert_money(amount)
        print(f"{name}: {machine.dispense_ticket()}")


def attendant(count: int):
    for _ in range(count):
        with machine.when([State.TICKET_DISPENSED, State.TRANSACTION_CANCELED]):
            print(f"Attendant: {machine.reset()}")


threads = [
    threading.Thread(target=attendant, args=(3,)),
    threading.Thread(target=customer, args=("Alice", [50])),
    threading.Thread(target=customer, args=("Bob", [20, 20, 10])),
    threading.Thread(target=customer, args=("Carol", [100])),
]

for t in threads:
    t.start()

for t in threads:
    t.join()
