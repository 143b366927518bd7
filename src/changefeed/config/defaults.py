"""Starter .changefeed.toml template."""

DEFAULT_TOML = """\
# changefeed configuration
version = "1.0"

[source]
file = "README.md"        # tracked file, relative to the repository root
net = false               # true: report only the net change per entry

[feed]
# title = "Awesome List Feed"
# link = "https://example.com/"
# description = "New and removed entries of the list."
# author = ""

[output]
destdir = "."
formats = ["atom", "json", "rss"]
# stylesheet = "feed.xsl"  # XSLT stylesheet referenced from the Atom feed
newest_first = false
"""
