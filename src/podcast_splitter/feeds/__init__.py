"""
Feed documents: decoding, show filtering, fetching and rebuilding.
"""

from podcast_splitter.feeds.document import FeedDocument, parse_feed_document
from podcast_splitter.feeds.filter import filter_items
from podcast_splitter.feeds.builder import build_show_feed
from podcast_splitter.feeds.fetch import download_feed, load_feed_document

__all__ = [
    "FeedDocument",
    "parse_feed_document",
    "filter_items",
    "build_show_feed",
    "download_feed",
    "load_feed_document",
]
