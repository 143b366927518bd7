"""JSON Feed 1.1 renderer (feed.json)."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from changefeed.output.models import Feed

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def to_dict(feed: Feed, *, feed_url: Optional[str] = None) -> Dict[str, Any]:
    """Convert Feed to a JSON-serialisable dict."""
    items: List[Dict[str, Any]] = []
    for item in feed.items:
        items.append({
            "id": item.id,
            "url": item.link,
            "title": item.title,
            "content_text": item.description,
            "date_published": item.created.isoformat(),
            **({"authors": [{"name": item.author_name}]} if item.author_name else {}),
        })

    return {
        "version": JSON_FEED_VERSION,
        "title": feed.title,
        "home_page_url": feed.link,
        **({"feed_url": feed_url} if feed_url else {}),
        "description": feed.description,
        **({"authors": [{"name": feed.author}]} if feed.author else {}),
        "items": items,
    }


def render(feed: Feed, *, feed_url: Optional[str] = None) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(feed, feed_url=feed_url), indent=2, ensure_ascii=False)
