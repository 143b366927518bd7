"""Git subprocess wrapper — repo root, file history, per-file diffs."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from changefeed.git.models import Revision

# unit separator between fields, record separator between commits
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%s"]) + _RECORD_SEP


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 60) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except NotADirectoryError:
        raise GitError(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitError(f"git error: {stderr or f'git {args[0]} exited with {result.returncode}'}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    if not cwd.is_dir():
        raise GitError(f"failed to open repository: {cwd} is not a directory")
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def _parse_revision(record: str) -> Revision:
    parts = record.split(_FIELD_SEP)
    if len(parts) != 5:
        raise GitError(f"unexpected git log record: {record!r}")
    commit, name, email, when, subject = parts
    try:
        authored_at = datetime.fromisoformat(when)
    except ValueError as exc:
        raise GitError(f"bad author date {when!r} on {commit}") from exc
    return Revision(
        hash=commit,
        author_name=name,
        author_email=email,
        authored_at=authored_at,
        subject=subject,
    )


def get_file_history(repo_root: Path, path: str, ref: str = "HEAD") -> List[Revision]:
    """Return the commits reachable from *ref* that touched *path*, oldest first."""
    out = _run_git(
        ["log", "--date-order", f"--format={_LOG_FORMAT}", ref, "--", path],
        cwd=repo_root,
    )
    revisions = [
        _parse_revision(record.strip("\n"))
        for record in out.split(_RECORD_SEP)
        if record.strip()
    ]
    # git lists newest first
    revisions.reverse()
    return revisions


def get_file_diff(repo_root: Path, older: str, newer: str, path: str) -> str:
    """Return the unified diff of *path* between two commits."""
    return _run_git(
        ["diff", "--no-color", "--no-ext-diff", older, newer, "--", path],
        cwd=repo_root,
    )
