"""Feed file writer — atomic replace, world-readable files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import List, Tuple

from changefeed.config.schema import FEED_FILES, OutputConfig
from changefeed.output import atom, json_feed, rss
from changefeed.output.models import Feed

FILE_MODE = 0o644


class OutputError(Exception):
    """Raised when a feed cannot be rendered or written."""


def _stage(path: Path, text: str) -> str:
    """Write *text* to a temporary file beside *path* and return its name."""
    if path.is_dir():
        raise OutputError(f"failed to write {path}: is a directory")
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, FILE_MODE)
    except OSError as exc:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise OutputError(f"failed to write {path}: {exc}") from exc
    return tmp_name


def _commit(tmp_name: str, path: Path) -> None:
    try:
        os.replace(tmp_name, path)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        raise OutputError(f"failed to write {path}: {exc}") from exc


def write_feed_file(path: Path, text: str) -> None:
    """Atomically replace *path* with *text*.

    The content goes to a temporary file in the same directory first, so
    readers never see a partially written feed.
    """
    _commit(_stage(path, text), path)


def render_format(feed: Feed, fmt: str, config: OutputConfig) -> str:
    """Render *feed* in one of the FEED_FILES formats."""
    filename = FEED_FILES[fmt]
    if fmt == "atom":
        return atom.render(feed, self_href=_join_url(feed.link, filename), stylesheet=config.stylesheet or None)
    if fmt == "json":
        return json_feed.render(feed, feed_url=_join_url(feed.link, filename))
    if fmt == "rss":
        return rss.render(feed)
    raise OutputError(f"unknown feed format: {fmt}")


def _join_url(base: str, filename: str) -> str:
    return f"{base.rstrip('/')}/{filename}"


def write_feeds(feed: Feed, destdir: Path, config: OutputConfig) -> List[Path]:
    """Render and write every configured format. Returns the written paths.

    All formats are rendered and staged before any feed file is replaced.
    """
    if not destdir.is_dir():
        raise OutputError(f"destination directory does not exist: {destdir}")

    rendered: List[Tuple[Path, str]] = []
    for fmt in config.formats:
        try:
            text = render_format(feed, fmt, config)
        except (ValueError, KeyError) as exc:
            raise OutputError(f"failed to generate {fmt} feed: {exc}") from exc
        rendered.append((destdir / FEED_FILES[fmt], text))

    staged: List[Tuple[str, Path]] = []
    try:
        for path, text in rendered:
            staged.append((_stage(path, text), path))
    except OutputError:
        for tmp_name, _ in staged:
            Path(tmp_name).unlink(missing_ok=True)
        raise

    for index, (tmp_name, path) in enumerate(staged):
        try:
            _commit(tmp_name, path)
        except OutputError:
            for leftover, _ in staged[index + 1:]:
                Path(leftover).unlink(missing_ok=True)
            raise
    return [path for _, path in staged]
