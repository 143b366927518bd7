"""Rich terminal reporter for extracted changes."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from changefeed.changes.history import ChangeHistory
from changefeed.changes.models import ChangeKind

_KIND_STYLE = {
    ChangeKind.ADDITION: "bold green",
    ChangeKind.REMOVAL: "bold red",
}


def render(history: ChangeHistory, *, console: Console | None = None) -> None:
    """Print the changes of *history* as a table."""
    console = console or Console()

    if not history.events:
        console.print(f"[dim]No list changes found in {history.path}.[/dim]")
        _print_summary(console, history)
        return

    table = Table(
        title=f"Changes to {history.path}",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Change", justify="center")
    table.add_column("Entry", style="cyan", min_width=15)
    table.add_column("Author", style="magenta")
    table.add_column("Link")

    for event in history.events:
        revision = event.metadata
        table.add_row(
            revision.authored_at.strftime("%Y-%m-%d"),
            Text(event.kind.value, style=_KIND_STYLE[event.kind]),
            event.name,
            revision.author_name,
            event.url,
        )

    console.print(table)
    _print_summary(console, history)


def _print_summary(console: Console, history: ChangeHistory) -> None:
    additions = sum(1 for e in history.events if e.kind is ChangeKind.ADDITION)
    console.print()
    console.print(f"[dim]Commits:[/dim]    {len(history.revisions)}")
    console.print(f"[dim]Additions:[/dim]  {additions}")
    console.print(f"[dim]Removals:[/dim]   {len(history.events) - additions}")
