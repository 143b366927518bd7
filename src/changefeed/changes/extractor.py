"""Change extractor — turns one diff into addition/removal events.

Each diff is reduced independently. Entry lines are matched by ``ENTRY_RE``;
occurrences of the same entry name are tallied (+1 per added line, -1 per
removed line) and names whose tally nets to zero are dropped. A reorder shows
up in a line diff as a removal plus an addition of the same entry, so it
cancels out and never reaches the feed.

Cancellation looks at the entry name only. An edit to an entry's URL or
description that keeps the name produces a ``-``/``+`` pair that cancels
like a move does.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List, Sequence, TypeVar

from changefeed.changes.models import ChangeEvent, ChangeKind, RawMatch, Sign

M = TypeVar("M")

# <sign><optional-space>- [<name>](<url>) - <description>
ENTRY_RE = re.compile(
    r"^([+-])[ \t]*- \[([^\]\n]+)\]\(([^)\n]+)\) - ([^\r\n]+)",
    re.MULTILINE,
)

_KIND_FOR_SIGN = {
    Sign.PLUS: ChangeKind.ADDITION,
    Sign.MINUS: ChangeKind.REMOVAL,
}


def find_matches(diff_text: str) -> List[RawMatch]:
    """Return every entry line in *diff_text*, top to bottom."""
    return [
        RawMatch(
            sign=Sign(m.group(1)),
            name=m.group(2),
            url=m.group(3),
            description=m.group(4),
        )
        for m in ENTRY_RE.finditer(diff_text)
    ]


def tally(matches: Sequence[RawMatch]) -> Dict[str, int]:
    """Net count per entry name: added lines minus removed lines."""
    counts: Counter[str] = Counter()
    for match in matches:
        counts[match.name] += 1 if match.sign is Sign.PLUS else -1
    return dict(counts)


def extract(diff_text: str, metadata: M, *, net: bool = False) -> List[ChangeEvent[M]]:
    """Reduce *diff_text* to change events carrying *metadata*.

    By default every entry line whose name has a non-zero tally becomes an
    event. With ``net=True`` only ``abs(tally)`` events are kept per name:
    the first lines, in document order, whose sign agrees with the tally.
    """
    matches = find_matches(diff_text)
    counts = tally(matches)

    remaining = {name: abs(total) for name, total in counts.items()}
    events: List[ChangeEvent[M]] = []

    # Iterate matches, not the tally: output follows document order.
    for match in matches:
        total = counts[match.name]
        if total == 0:
            continue
        if net:
            agrees = (total > 0) == (match.sign is Sign.PLUS)
            if not agrees or remaining[match.name] == 0:
                continue
            remaining[match.name] -= 1
        events.append(
            ChangeEvent(
                kind=_KIND_FOR_SIGN[match.sign],
                name=match.name,
                url=match.url,
                description=match.description,
                metadata=metadata,
            )
        )
    return events
