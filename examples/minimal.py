from ticketmachine import TicketMachine

# Instantiate the machine with the default ticket price of 50.
machine = TicketMachine()

# Buy a ticket paying in two parts.
print(machine.select_ticket())
print(machine.insert_money(30))
print(machine.insert_money(20))
print(machine.dispense_ticket())

print(f"State: {machine.state}, balance: {machine.balance}")
