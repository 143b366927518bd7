"""Feed models handed to the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from changefeed.changes.history import ChangeHistory
from changefeed.config.schema import FeedConfig


@dataclass
class FeedItem:
    id: str
    title: str
    link: str
    description: str
    author_name: str
    created: datetime


@dataclass
class Feed:
    title: str
    link: str
    description: str
    created: datetime
    updated: datetime
    author: str = ""
    items: List[FeedItem] = field(default_factory=list)

    @classmethod
    def from_history(
        cls,
        history: ChangeHistory,
        config: FeedConfig,
        *,
        repo_root: Optional[Path] = None,
        newest_first: bool = False,
    ) -> "Feed":
        """Build a Feed from *history*; empty config fields fall back to repo-derived values."""
        repo_name = repo_root.name if repo_root else "repository"
        items: List[FeedItem] = []
        index_in_revision = 0
        previous_hash = None
        for event in history.events:
            revision = event.metadata
            if revision.hash != previous_hash:
                index_in_revision = 0
                previous_hash = revision.hash
            items.append(
                FeedItem(
                    id=_tag_uri(revision.hash, revision.authored_at, index_in_revision),
                    title=event.title,
                    link=event.url,
                    description=event.description,
                    author_name=revision.author_name,
                    created=revision.authored_at,
                )
            )
            index_in_revision += 1

        if newest_first:
            items.reverse()

        return cls(
            title=config.title or f"{repo_name} changes",
            link=config.link or (repo_root.as_uri() if repo_root else "about:blank"),
            description=config.description or f"Additions and removals in {history.path}",
            created=history.created,
            updated=history.updated,
            author=config.author,
            items=items,
        )


def _tag_uri(commit: str, when: datetime, index: int) -> str:
    # RFC 4151 tag URI, stable across rebuilds
    return f"tag:changefeed,{when.date().isoformat()}:{commit}/{index}"
