"""changefeed — syndication feeds from the history of a curated list."""

__version__ = "0.1.0"
