from ticketmachine import TicketMachine
from ticketmachine.diagram import HTML_TEMPLATE
from ticketmachine.diagram import _create_html_page
from ticketmachine.diagram import create_state_diagram


def test_create_state_diagram():
    diagram = create_state_diagram(TicketMachine())
    lines = diagram.splitlines()

    assert "idle: Idle" in lines
    assert "waiting_for_money: WaitingForMoney" in lines
    assert "[*] --> idle" in lines
    assert "idle --> waiting_for_money : select_ticket" in lines
    assert (
        "waiting_for_money --> money_received : insert_money [balance >= ticket_price]"
        in lines
    )
    assert "money_received --> transaction_canceled : cancel_transaction" in lines
    assert "ticket_dispensed --> idle : reset" in lines


def test_html_page():
    html = _create_html_page("Ticket", "idle: Idle")
    assert "title: Ticket" in html
    assert "      idle: Idle" in html
    assert "$diagram" in HTML_TEMPLATE
    assert "$diagram" not in html
