"""Feed models, renderers, and the feed file writer."""

from changefeed.output.models import Feed, FeedItem
from changefeed.output.writer import OutputError, write_feed_file, write_feeds

__all__ = ["Feed", "FeedItem", "OutputError", "write_feed_file", "write_feeds"]
