"""changefeed CLI — Typer application with build, changes, and init commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from changefeed import __version__

app = typer.Typer(
    name="changefeed",
    help="Publish the list entries added to and removed from a file as Atom, RSS and JSON feeds.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _resolve_repo_root(workdir: Path) -> Path:
    """Find the git repo root, exit 2 on failure."""
    from changefeed.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root(workdir)
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] failed to open repository: {workdir}: {exc}")
        raise typer.Exit(code=2) from exc


def _load(workdir: Path, config: Optional[str], file: Optional[str]):
    """Resolve repo root and config, apply the tracked-file override, exit 2 on failure."""
    from changefeed.config.loader import ConfigError, load_config

    repo_root = _resolve_repo_root(workdir)
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if file:
        cfg.source.file = file
    if not (repo_root / cfg.source.file).is_file():
        console.print(f"[bold red]Error:[/bold red] failed to locate file: {repo_root / cfg.source.file}")
        raise typer.Exit(code=2)
    return repo_root, cfg


def _collect(repo_root: Path, path: str, *, net: bool, verbose: bool):
    """Build the change history, exit 2 on git or history errors."""
    from changefeed.changes.history import HistoryError, build_history
    from changefeed.git.adapter import GitError

    def on_revision(revision, events) -> None:
        console.print(
            f"[dim]===> commit: {revision.short_hash} by {escape(revision.author_name)} "
            f"at {revision.authored_at.isoformat()}: {escape(revision.subject)}[/dim]"
        )
        for event in events:
            console.print(
                f"[dim]=====>> {event.kind.value}: {escape(event.name)} -- {escape(event.url)} "
                f"-- {escape(event.description)}[/dim]"
            )

    try:
        return build_history(repo_root, path, net=net, on_revision=on_revision if verbose else None)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except HistoryError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── build ─────────────────────────────────────────────────────────────────────


@app.command()
def build(
    workdir: Path = typer.Option(Path("."), "--workdir", "-w", help="Working directory with a git repository"),
    destdir: Optional[Path] = typer.Option(None, "--destdir", "-d", help="Destination directory for feed files"),
    file: Optional[str] = typer.Option(None, "--file", help="Tracked file, relative to the repository root"),
    stylesheet: Optional[str] = typer.Option(None, "--stylesheet", help="XSLT stylesheet to reference from the Atom feed"),
    formats: Optional[List[str]] = typer.Option(None, "--format", "-f", help="Feed format: atom | json | rss (repeatable)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .changefeed.toml"),
    net: Optional[bool] = typer.Option(None, "--net/--all-lines", help="Report only the net change per entry"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Mine the tracked file's history and write the feed files."""
    from changefeed.config.schema import valid_formats
    from changefeed.output.models import Feed
    from changefeed.output.writer import OutputError, write_feeds

    repo_root, cfg = _load(workdir, config, file)

    # --- CLI overrides ---
    if formats:
        chosen = valid_formats(formats)
        if len(chosen) != len({f.strip().lower() for f in formats}):
            console.print(f"[bold red]Invalid format:[/bold red] {', '.join(formats)}")
            raise typer.Exit(code=2)
        cfg.output.formats = chosen
    if stylesheet is not None:
        cfg.output.stylesheet = stylesheet
    if destdir is not None:
        cfg.output.destdir = str(destdir)
    if net is not None:
        cfg.source.net = net

    if verbose:
        console.print(f"[dim]Repo root: {repo_root}[/dim]")
        console.print(f"[dim]Tracked file: {cfg.source.file}[/dim]")
        console.print(f"[dim]Formats: {', '.join(cfg.output.formats)}[/dim]")

    history = _collect(repo_root, cfg.source.file, net=cfg.source.net, verbose=verbose)
    feed = Feed.from_history(
        history,
        cfg.feed,
        repo_root=repo_root,
        newest_first=cfg.output.newest_first,
    )

    try:
        written = write_feeds(feed, Path(cfg.output.destdir), cfg.output)
    except OutputError as exc:
        console.print(f"[bold red]Output error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if verbose:
        console.print(f"[dim]files written: {', '.join(str(p) for p in written)}[/dim]")


# ── changes ───────────────────────────────────────────────────────────────────


@app.command()
def changes(
    workdir: Path = typer.Option(Path("."), "--workdir", "-w", help="Working directory with a git repository"),
    file: Optional[str] = typer.Option(None, "--file", help="Tracked file, relative to the repository root"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .changefeed.toml"),
    net: Optional[bool] = typer.Option(None, "--net/--all-lines", help="Report only the net change per entry"),
    as_json: bool = typer.Option(False, "--json", help="Print changes as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show the extracted changes without writing any feed."""
    from changefeed.output import terminal

    repo_root, cfg = _load(workdir, config, file)
    if net is not None:
        cfg.source.net = net

    history = _collect(repo_root, cfg.source.file, net=cfg.source.net, verbose=verbose)

    if as_json:
        payload = [
            {
                **event.as_dict(),
                "commit": event.metadata.hash,
                "author": event.metadata.author_name,
                "date": event.metadata.authored_at.isoformat(),
            }
            for event in history.events
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    terminal.render(history)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    workdir: Path = typer.Option(Path("."), "--workdir", "-w", help="Working directory with a git repository"),
) -> None:
    """Generate a starter .changefeed.toml in the repo root."""
    from changefeed.config.defaults import DEFAULT_TOML
    from changefeed.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root(workdir)
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"changefeed {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """changefeed — syndication feeds from the history of a curated list."""
