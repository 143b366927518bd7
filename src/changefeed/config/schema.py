"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

# format name → file written into the destination directory
FEED_FILES: dict[str, str] = {
    "atom": "feed.xml",
    "json": "feed.json",
    "rss": "feed.rss",
}


def valid_formats(names: List[str]) -> List[str]:
    """Return *names* restricted to known feed formats, order and duplicates removed."""
    seen: List[str] = []
    for name in names:
        name = name.strip().lower()
        if name in FEED_FILES and name not in seen:
            seen.append(name)
    return seen


@dataclass
class SourceConfig:
    file: str = "README.md"  # tracked file, relative to the repository root
    net: bool = False  # emit only the net change per entry name


@dataclass
class FeedConfig:
    title: str = ""  # empty = derived from the repository name
    link: str = ""  # empty = file:// URI of the repository
    description: str = ""
    author: str = ""


@dataclass
class OutputConfig:
    destdir: str = "."
    formats: List[str] = field(default_factory=lambda: list(FEED_FILES))
    stylesheet: str = ""  # XSLT href injected into the Atom feed
    newest_first: bool = False


@dataclass
class ChangefeedConfig:
    version: str = "1.0"
    source: SourceConfig = field(default_factory=SourceConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
