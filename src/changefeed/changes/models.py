"""Change data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, TypeVar

M = TypeVar("M")


class Sign(str, Enum):
    PLUS = "+"
    MINUS = "-"


class ChangeKind(str, Enum):
    ADDITION = "Addition"
    REMOVAL = "Removal"


@dataclass(frozen=True, slots=True)
class RawMatch:
    """One entry line found in a diff, before net-change filtering."""

    sign: Sign
    name: str
    url: str
    description: str


@dataclass(frozen=True)
class ChangeEvent(Generic[M]):
    """An addition or removal of a list entry, stamped with revision metadata."""

    kind: ChangeKind
    name: str
    url: str
    description: str
    metadata: M

    @property
    def title(self) -> str:
        return f"{self.kind.value} of {self.name}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "url": self.url,
            "description": self.description,
        }
