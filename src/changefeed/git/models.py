"""Data models for repository history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Revision:
    """One commit that touched the tracked file."""

    hash: str
    author_name: str
    author_email: str
    authored_at: datetime  # timezone-aware
    subject: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:10]
