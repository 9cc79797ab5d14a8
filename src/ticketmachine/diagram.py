import logging
import textwrap
import time
import webbrowser
from string import Template
from tempfile import NamedTemporaryFile
from typing import Optional

from ticketmachine import State
from ticketmachine import TicketMachine

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
  <script type="module">
    import mermaid from 'https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.esm.min.mjs';
    mermaid.initialize({ startOnLoad: true });
  </script>
</head>
<body>
  <div class="mermaid">
    ---
    title: $name
    ---
    stateDiagram-v2
$diagram
  </div>
</body>
</html>
"""


def show_state_diagram(ticket_machine: TicketMachine, name: Optional[str] = None):
    """Render the state diagram and open it on a web browser."""
    name = str(ticket_machine) if name is None else name
    state_diagram = create_state_diagram(ticket_machine)
    logger.debug("State diagram of %s:\n%s", name, state_diagram)

    html = _create_html_page(name, state_diagram)
    _open_with_web_browser(html)


def create_state_diagram(ticket_machine: TicketMachine) -> str:
    """Create a Mermaid state diagram of the ticket machine.

    Every state is declared with its display name. Transitions are labeled
    with the action triggering them and the guard, if any. The machine
    starts from Idle, which is marked with the `[*]` pseudo state.

    See also https://mermaid.js.org/syntax/stateDiagram.html.
    """
    state_definitions = [f"{_get_id(state)}: {state}" for state in State]
    lines = [f"[*] --> {_get_id(State.IDLE)}"]

    for t in ticket_machine.transitions():
        for from_state in t.from_states:
            lines.append(f"{_get_id(from_state)} --> {_get_id(t.to_state)} : {t}")

    return "\n".join(state_definitions + [""] + lines)


def _get_id(state: State) -> str:
    """Get state id."""
    return state.name.lower()


def _create_html_page(name: str, diagram: str, template: str = HTML_TEMPLATE) -> str:
    """Create a HTML page with given state diagram."""
    indented_text = textwrap.indent(diagram, " " * 6)
    return Template(template).safe_substitute(name=name, diagram=indented_text)


def _open_with_web_browser(content: str, suffix: str = ".html", delete: bool = True):
    """Write content to a temp file and open it with default web browser.

    The temporary file gets deleted by default. Use `delete=False` to preserve the file.
    """
    with NamedTemporaryFile(
        delete=delete, suffix=suffix, mode="w", encoding="utf-8"
    ) as fh:
        fh.write(content)
        fh.flush()

        logger.debug("State diagram written to %s.", fh.name)
        webbrowser.open(f"file:///{fh.name}")

        # Browser needs the file until the page is rendered.
        time.sleep(3.0 if delete else 0.0)
