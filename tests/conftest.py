"""Shared test fixtures — sample diffs and temp git repos."""

from __future__ import annotations

import os
import subprocess
import textwrap
from pathlib import Path
from typing import Callable

import pytest

README_HEAD = "# Awesome Things\n\n## Tools\n\n"


@pytest.fixture
def sample_diff_addition() -> str:
    """A diff adding one entry."""
    return textwrap.dedent("""\
        diff --git a/README.md b/README.md
        index 1234567..abcdef0 100644
        --- a/README.md
        +++ b/README.md
        @@ -3,3 +3,4 @@
         ## Tools
         
         - [Alpha](https://alpha.example) - First tool.
        +- [Beta](https://beta.example) - Second tool.
    """)


@pytest.fixture
def sample_diff_reorder() -> str:
    """A diff that only moves an entry further down the list."""
    return textwrap.dedent("""\
        diff --git a/README.md b/README.md
        index 1234567..abcdef0 100644
        --- a/README.md
        +++ b/README.md
        @@ -3,4 +3,4 @@
         ## Tools
         
        -- [Beta](https://beta.example) - Second tool.
         - [Alpha](https://alpha.example) - First tool.
        +- [Beta](https://beta.example) - Second tool.
    """)


@pytest.fixture
def sample_diff_mixed() -> str:
    """A diff with a move, an addition, and a removal."""
    return textwrap.dedent("""\
        diff --git a/README.md b/README.md
        index 1234567..abcdef0 100644
        --- a/README.md
        +++ b/README.md
        @@ -3,5 +3,5 @@
         ## Tools
         
        -- [Gamma](https://gamma.example) - Third tool.
        -- [Beta](https://beta.example) - Second tool.
         - [Alpha](https://alpha.example) - First tool.
        +- [Beta](https://beta.example) - Second tool.
        +- [Delta](https://delta.example) - Fourth tool.
    """)


def _git(repo: Path, *args: str, env: dict | None = None) -> None:
    subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, check=True,
        env={**os.environ, **(env or {})},
    )


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with an initial README commit."""
    repo = tmp_path / "awesome-things"
    repo.mkdir()
    subprocess.run(["git", "init", str(repo)], capture_output=True, check=True)
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test")
    _git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text(README_HEAD + "- [Alpha](https://alpha.example) - First tool.\n")
    _git(repo, "add", ".")
    _git(
        repo, "commit", "-m", "init",
        env={"GIT_AUTHOR_DATE": "2024-01-01T10:00:00+00:00", "GIT_COMMITTER_DATE": "2024-01-01T10:00:00+00:00"},
    )
    return repo


@pytest.fixture
def commit_readme(tmp_git_repo: Path) -> Callable[..., None]:
    """Return a helper that rewrites README.md's entry list and commits it."""
    counter = {"day": 1}

    def _commit(entries: list[str], message: str = "update", author: str = "Test") -> None:
        counter["day"] += 1
        stamp = f"2024-01-{counter['day']:02d}T10:00:00+00:00"
        (tmp_git_repo / "README.md").write_text(README_HEAD + "".join(e + "\n" for e in entries))
        _git(tmp_git_repo, "add", "README.md")
        _git(
            tmp_git_repo, "commit", "-m", message, f"--author={author} <{author.lower()}@test.com>",
            env={"GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp},
        )

    return _commit
