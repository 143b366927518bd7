"""Atom renderer (feed.xml)."""

from __future__ import annotations

from typing import Optional

from feedgen.feed import FeedGenerator

from changefeed.output.models import Feed

_XML_DECL_END = "?>"


def _generator(feed: Feed, self_href: Optional[str]) -> FeedGenerator:
    fg = FeedGenerator()
    fg.id(feed.link)
    fg.title(feed.title)
    if feed.description:
        fg.subtitle(feed.description)
    if self_href:
        fg.link(href=self_href, rel="self")
    fg.link(href=feed.link, rel="alternate")
    if feed.author:
        fg.author({"name": feed.author})
    fg.updated(feed.updated)

    for item in feed.items:
        fe = fg.add_entry(order="append")
        fe.id(item.id)
        fe.title(item.title)
        fe.link(href=item.link, rel="alternate")
        fe.summary(item.description)
        if item.author_name:
            fe.author({"name": item.author_name})
        fe.published(item.created)
        fe.updated(item.created)
    return fg


def inject_stylesheet(atom: str, href: str) -> str:
    """Insert an xml-stylesheet processing instruction after the XML declaration."""
    pi = f'<?xml-stylesheet href="{href}" type="text/xsl"?>'
    if atom.startswith("<?xml"):
        decl, _, rest = atom.partition(_XML_DECL_END)
        return f"{decl}{_XML_DECL_END}\n{pi}\n{rest.lstrip()}"
    return f"{pi}\n{atom}"


def render(feed: Feed, *, self_href: Optional[str] = None, stylesheet: Optional[str] = None) -> str:
    """Return the Atom document for *feed*.

    *self_href* adds a ``rel="self"`` link pointing at the published feed file.
    """
    atom = _generator(feed, self_href).atom_str(pretty=True).decode("utf-8")
    if stylesheet:
        atom = inject_stylesheet(atom, stylesheet)
    return atom
