"""Tests for feed models, renderers, and the feed writer."""

import json
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from changefeed.changes.history import ChangeHistory, collect_changes
from changefeed.config.schema import FeedConfig, OutputConfig
from changefeed.git.models import Revision
from changefeed.output import atom, json_feed, rss
from changefeed.output.models import Feed
from changefeed.output.writer import OutputError, write_feed_file, write_feeds

T0 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def _history() -> ChangeHistory:
    revisions = [
        Revision(hash="a" * 40, author_name="Ann", author_email="ann@test.com", authored_at=T0),
        Revision(hash="b" * 40, author_name="Bob", author_email="bob@test.com",
                 authored_at=T0 + timedelta(days=1)),
        Revision(hash="c" * 40, author_name="Cy", author_email="cy@test.com",
                 authored_at=T0 + timedelta(days=2)),
    ]
    diffs = {
        "b" * 40: "+- [Beta](https://beta.example) - Second tool.\n+- [Gamma](https://gamma.example) - Third.\n",
        "c" * 40: "-- [Alpha](https://alpha.example) - First tool.\n",
    }
    events = collect_changes(revisions, lambda old, new: diffs[new.hash])
    return ChangeHistory(path="README.md", revisions=revisions, events=events)


def _feed(**overrides) -> Feed:
    config = FeedConfig(
        title="Awesome Feed",
        link="https://awesome.example/",
        description="Curated things.",
    )
    return Feed.from_history(_history(), config, **overrides)


class TestFeedModel:
    def test_items_from_events(self):
        feed = _feed()
        assert [i.title for i in feed.items] == [
            "Addition of Beta",
            "Addition of Gamma",
            "Removal of Alpha",
        ]
        assert feed.items[0].link == "https://beta.example"
        assert feed.items[0].description == "Second tool."
        assert feed.items[0].author_name == "Bob"
        assert feed.items[2].created == T0 + timedelta(days=2)

    def test_ids_unique(self):
        ids = [i.id for i in _feed().items]
        assert len(set(ids)) == len(ids)
        assert ids[0] == f"tag:changefeed,2024-01-02:{'b' * 40}/0"
        assert ids[1].endswith("/1")
        assert ids[2].endswith("/0")

    def test_dates(self):
        feed = _feed()
        assert feed.created == T0
        assert feed.updated == T0 + timedelta(days=2)

    def test_newest_first(self):
        feed = _feed(newest_first=True)
        assert feed.items[0].title == "Removal of Alpha"

    def test_fallbacks(self, tmp_path: Path):
        repo = tmp_path / "awesome-things"
        feed = Feed.from_history(_history(), FeedConfig(), repo_root=repo)
        assert feed.title == "awesome-things changes"
        assert feed.link == repo.as_uri()
        assert "README.md" in feed.description


class TestAtom:
    def test_entries_and_links(self):
        text = atom.render(_feed(), self_href="https://awesome.example/feed.xml")
        assert "<title>Awesome Feed</title>" in text
        assert "Addition of Beta" in text
        assert 'href="https://awesome.example/feed.xml"' in text
        assert 'rel="self"' in text
        assert 'rel="alternate"' in text
        assert "<name>Bob</name>" in text
        assert text.index("Addition of Beta") < text.index("Removal of Alpha")

    def test_stylesheet_after_declaration(self):
        text = atom.render(_feed(), stylesheet="feed.xsl")
        lines = text.splitlines()
        assert lines[0].startswith("<?xml version")
        assert lines[1] == '<?xml-stylesheet href="feed.xsl" type="text/xsl"?>'
        assert lines[2].startswith("<feed")

    def test_inject_without_declaration(self):
        assert atom.inject_stylesheet("<feed/>", "s.xsl").startswith("<?xml-stylesheet")


class TestRss:
    def test_dc_creator(self):
        text = rss.render(_feed())
        assert "xmlns:dc=" in text
        assert "<dc:creator>Bob</dc:creator>" in text
        assert "<author>" not in text
        assert "<title>Removal of Alpha</title>" in text
        assert "<link>https://awesome.example/</link>" in text


class TestJsonFeed:
    def test_structure(self):
        data = json.loads(json_feed.render(_feed(), feed_url="https://awesome.example/feed.json"))
        assert data["version"] == "https://jsonfeed.org/version/1.1"
        assert data["home_page_url"] == "https://awesome.example/"
        assert data["feed_url"] == "https://awesome.example/feed.json"
        assert len(data["items"]) == 3
        item = data["items"][0]
        assert item["title"] == "Addition of Beta"
        assert item["url"] == "https://beta.example"
        assert item["content_text"] == "Second tool."
        assert item["authors"] == [{"name": "Bob"}]
        assert item["date_published"] == "2024-01-02T10:00:00+00:00"

    def test_empty_feed(self):
        history = _history()
        history.events = []
        feed = Feed.from_history(history, FeedConfig(title="t", link="https://x/"))
        data = json_feed.to_dict(feed)
        assert data["items"] == []
        assert "feed_url" not in data


class TestWriter:
    def test_writes_all_formats(self, tmp_path: Path):
        written = write_feeds(_feed(), tmp_path, OutputConfig())
        assert [p.name for p in written] == ["feed.xml", "feed.json", "feed.rss"]
        for path in written:
            assert stat.S_IMODE(path.stat().st_mode) == 0o644
        data = json.loads((tmp_path / "feed.json").read_text())
        assert data["feed_url"] == "https://awesome.example/feed.json"
        assert 'href="https://awesome.example/feed.xml"' in (tmp_path / "feed.xml").read_text()

    def test_selected_formats(self, tmp_path: Path):
        written = write_feeds(_feed(), tmp_path, OutputConfig(formats=["rss"]))
        assert [p.name for p in written] == ["feed.rss"]
        assert not (tmp_path / "feed.xml").exists()

    def test_stylesheet_applied(self, tmp_path: Path):
        write_feeds(_feed(), tmp_path, OutputConfig(formats=["atom"], stylesheet="style.xsl"))
        assert "xml-stylesheet" in (tmp_path / "feed.xml").read_text()

    def test_missing_destdir(self, tmp_path: Path):
        with pytest.raises(OutputError):
            write_feeds(_feed(), tmp_path / "missing", OutputConfig())

    def test_replace_leaves_no_temp_files(self, tmp_path: Path):
        target = tmp_path / "feed.json"
        target.write_text("old")
        write_feed_file(target, "new")
        assert target.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["feed.json"]

    def test_unwritable_directory(self, tmp_path: Path, monkeypatch):
        def deny(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr("changefeed.output.writer.tempfile.mkstemp", deny)
        with pytest.raises(OutputError):
            write_feed_file(tmp_path / "feed.xml", "x")
        assert list(tmp_path.iterdir()) == []

    def test_render_failure_replaces_nothing(self, tmp_path: Path, monkeypatch):
        (tmp_path / "feed.xml").write_text("old atom")

        def broken(feed):
            raise ValueError("Required fields not set")

        monkeypatch.setattr("changefeed.output.rss.render", broken)
        with pytest.raises(OutputError):
            write_feeds(_feed(), tmp_path, OutputConfig())
        assert (tmp_path / "feed.xml").read_text() == "old atom"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["feed.xml"]

    def test_write_failure_replaces_nothing(self, tmp_path: Path):
        (tmp_path / "feed.xml").write_text("old atom")
        (tmp_path / "feed.json").mkdir()
        with pytest.raises(OutputError):
            write_feeds(_feed(), tmp_path, OutputConfig())
        assert (tmp_path / "feed.xml").read_text() == "old atom"
        assert not (tmp_path / "feed.rss").exists()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["feed.json", "feed.xml"]
