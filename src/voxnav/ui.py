"""Terminal feedback for voxnav.

Render functions are pure: they take an intent or a UiState snapshot and
return Rich renderables. ConsoleFeedback is the status line the session
controller writes to.
"""

from dataclasses import dataclass, field

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from voxnav.core.types import Intent

_DETAIL_KEYS = ("target", "query", "tag", "tags", "action", "direction", "field", "value", "list", "title")


@dataclass(slots=True)
class UiState:
    """Snapshot of what the status line has shown."""

    status: str = "Voice idle"
    history: list[Intent] = field(default_factory=list)
    max_history: int = 50


def describe_intent(intent: Intent) -> str:
    """One-line summary such as ``filter tag=Motor``."""
    parts = [intent.type]
    for key in _DETAIL_KEYS:
        value = intent.get(key)
        if value is None:
            continue
        if isinstance(value, tuple):
            value = ", ".join(str(v) for v in value)
        parts.append(f"{key}={value}")
    return " ".join(parts)


def render_intent(intent: Intent) -> Text:
    """Render an intent as a single styled line."""
    line = Text()
    line.append("> ", style="bold green")
    line.append(intent.type, style="cyan")
    details = describe_intent(intent).split(" ", 1)
    if len(details) > 1:
        line.append(" ")
        line.append(details[1])
    if intent.utterance:
        line.append(f'  "{intent.utterance}"', style="dim")
    return line


def render_status(state: UiState) -> Text:
    status = Text()
    status.append("voice: ", style="bold")
    status.append(state.status, style="yellow")
    return status


def render_history_panel(state: UiState) -> Panel:
    """Render the commands handled this session."""
    table = Table.grid(expand=True, padding=(0, 1))
    table.add_column(justify="right", style="cyan")
    table.add_column()
    for intent in state.history[-state.max_history :]:
        table.add_row(intent.type, describe_intent(intent).partition(" ")[2] or "--")
    if not state.history:
        table.add_row("--", Text("No commands yet", style="dim"))
    return Panel(table, title="Commands", padding=(0, 1))


class ConsoleFeedback:
    """Status line on a Rich console. Repeated identical messages are skipped."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.state = UiState()

    def update_status(self, message: str) -> None:
        if message == self.state.status:
            return
        self.state.status = message
        self.console.print(render_status(self.state))

    def announce_command(self, intent: Intent) -> None:
        self.state.history.append(intent)
        del self.state.history[: -self.state.max_history]
        self.update_status(f"Heard: {intent.utterance or intent.type}")
