"""Git interface layer — adapter and revision model."""

from changefeed.git.adapter import (
    GitError,
    get_file_diff,
    get_file_history,
    get_repo_root,
)
from changefeed.git.models import Revision

__all__ = [
    "GitError",
    "Revision",
    "get_file_diff",
    "get_file_history",
    "get_repo_root",
]
