"""Change models, the per-diff extractor, and the history driver."""

from changefeed.changes.extractor import ENTRY_RE, extract, find_matches, tally
from changefeed.changes.history import (
    ChangeHistory,
    HistoryError,
    build_history,
    collect_changes,
)
from changefeed.changes.models import ChangeEvent, ChangeKind, RawMatch, Sign

__all__ = [
    "ENTRY_RE",
    "ChangeEvent",
    "ChangeHistory",
    "ChangeKind",
    "HistoryError",
    "RawMatch",
    "Sign",
    "build_history",
    "collect_changes",
    "extract",
    "find_matches",
    "tally",
]
