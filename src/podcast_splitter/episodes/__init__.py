"""
Episode numbering, normalization and merging.

Turns live-feed items and archived JSON records into one deduplicated,
numbered episode list per show.
"""

from podcast_splitter.episodes.models import EpisodeItem, FeedItem, SourceRank
from podcast_splitter.episodes.numbering import EpisodeNumberExtractor, extract_episode_number
from podcast_splitter.episodes.merge import merge_episodes, merge_keyed

__all__ = [
    "EpisodeItem",
    "FeedItem",
    "SourceRank",
    "EpisodeNumberExtractor",
    "extract_episode_number",
    "merge_episodes",
    "merge_keyed",
]
