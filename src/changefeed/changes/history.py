"""History driver — walks the tracked file's commits and collects changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from changefeed.changes.extractor import extract
from changefeed.changes.models import ChangeEvent
from changefeed.git.adapter import get_file_diff, get_file_history
from changefeed.git.models import Revision

DiffSource = Callable[[Revision, Revision], str]
RevisionHook = Callable[[Revision, List[ChangeEvent[Revision]]], None]


class HistoryError(Exception):
    """Raised when the tracked file has no usable history."""


@dataclass
class ChangeHistory:
    """Changes of one tracked file, oldest first."""

    path: str
    revisions: List[Revision] = field(default_factory=list)
    events: List[ChangeEvent[Revision]] = field(default_factory=list)

    @property
    def created(self) -> datetime:
        return self.revisions[0].authored_at

    @property
    def updated(self) -> datetime:
        if self.events:
            return self.events[-1].metadata.authored_at
        return self.created


def collect_changes(
    revisions: Sequence[Revision],
    diff_for: DiffSource,
    *,
    net: bool = False,
    on_revision: Optional[RevisionHook] = None,
) -> List[ChangeEvent[Revision]]:
    """Extract changes from every adjacent pair of *revisions* (oldest first).

    The first revision is only ever the left side of a diff; its own content
    is not reported. Events are stamped with the newer revision of each pair.
    """
    events: List[ChangeEvent[Revision]] = []
    for older, newer in zip(revisions, revisions[1:]):
        found = extract(diff_for(older, newer), newer, net=net)
        if on_revision is not None:
            on_revision(newer, found)
        events.extend(found)
    return events


def build_history(
    repo_root: Path,
    path: str,
    *,
    net: bool = False,
    on_revision: Optional[RevisionHook] = None,
) -> ChangeHistory:
    """Read *path*'s history from git and collect its changes."""
    revisions = get_file_history(repo_root, path)
    if not revisions:
        raise HistoryError(f"failed to find commits for {path}")

    def diff_for(older: Revision, newer: Revision) -> str:
        return get_file_diff(repo_root, older.hash, newer.hash, path)

    events = collect_changes(revisions, diff_for, net=net, on_revision=on_revision)
    return ChangeHistory(path=path, revisions=list(revisions), events=events)
