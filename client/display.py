"""Rich terminal rendering for session state."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modules.auth import SessionPhase, SessionState, UserRecord

console = Console()


PHASE_STYLES = {
    SessionPhase.IDLE: "dim",
    SessionPhase.IN_FLIGHT: "yellow",
    SessionPhase.AUTHENTICATED: "green",
    SessionPhase.FAILED: "red",
}


def format_phase(phase: SessionPhase) -> str:
    """Format a phase for display, e.g. "in_flight" -> "In Flight"."""
    return phase.value.replace("_", " ").title()


def create_user_table(user: UserRecord) -> Table:
    """Two-column table of the user's fields; absent optionals show as '-'."""
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Field", style="bold")
    table.add_column("Value")

    rows = [
        ("ID", user.id),
        ("Username", user.username),
        ("Email", user.email),
        ("Phone", user.phone_number),
        ("Address", user.address),
        ("Avatar", user.profile_image),
    ]
    for label, value in rows:
        table.add_row(label, value or "-")
    return table


def create_user_panel(user: Optional[UserRecord]) -> Panel:
    if user is None or user.is_empty:
        return Panel("[dim]Not signed in[/dim]", title="BillPoint")
    return Panel(create_user_table(user), title=f"Signed in as {user.username or user.email}")


def render_state(state: SessionState) -> None:
    """Print one line per state change; used as a SessionNotifier listener."""
    phase = state.phase
    style = PHASE_STYLES[phase]
    line = f"[{style}]{format_phase(phase)}[/{style}]"
    if state.error_message:
        line += f" [red]{state.error_message}[/red]"
    console.print(line)
