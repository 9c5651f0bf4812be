"""
Podcast Splitter

Splits combined podcast RSS feeds into per-show feeds, filling each
show's back catalogue from archived episode exports.
"""

__version__ = "0.1.0"

from podcast_splitter.config import Settings, ShowConfig, FeedConfig

__all__ = ["Settings", "ShowConfig", "FeedConfig", "__version__"]
