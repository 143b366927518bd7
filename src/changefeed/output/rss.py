"""RSS 2.0 renderer (feed.rss).

RSS ``<author>`` must hold an e-mail address; commit author names are
published as Dublin Core ``<dc:creator>`` instead.
"""

from __future__ import annotations

from feedgen.feed import FeedGenerator

from changefeed.output.models import Feed


def render(feed: Feed) -> str:
    fg = FeedGenerator()
    fg.load_extension("dc", atom=False, rss=True)
    fg.title(feed.title)
    fg.link(href=feed.link, rel="alternate")
    fg.description(feed.description or feed.title)
    fg.lastBuildDate(feed.updated)
    if feed.author:
        fg.dc.dc_creator(feed.author)

    for item in feed.items:
        fe = fg.add_entry(order="append")
        fe.guid(item.id, permalink=False)
        fe.title(item.title)
        fe.link(href=item.link)
        fe.description(item.description)
        if item.author_name:
            fe.dc.dc_creator(item.author_name)
        fe.published(item.created)

    return fg.rss_str(pretty=True).decode("utf-8")
