"""
Merge and deduplication of episodes from the live feed and archives.

Episodes are keyed by episode number. The live feed claims numbers
first, then the cloud-host export fills gaps, then the scraped archive
fills whatever is left. Records without a number are dropped. The
result is sorted newest (highest number) first.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, List, Optional

from podcast_splitter.episodes.models import EpisodeItem, FeedItem
from podcast_splitter.episodes.normalize import (
    from_archive_record,
    from_cloud_record,
    from_live_item,
)
from podcast_splitter.episodes.numbering import EpisodeNumberExtractor

logger = logging.getLogger(__name__)


def merge_keyed(
    live_items: Iterable[ET.Element],
    cloud_records: Iterable[Dict[str, Any]] = (),
    archive_records: Iterable[Dict[str, Any]] = (),
    extractor: Optional[EpisodeNumberExtractor] = None,
) -> List[EpisodeItem]:
    """
    Merge all sources into keyed EpisodeItems, highest number first.

    Args:
        live_items: <item> elements already filtered to one show
        cloud_records: Cloud-host export records
        archive_records: Scraped-archive records
        extractor: Rules for reading numbers out of live titles

    Returns:
        EpisodeItems with unique, non-null episode numbers, sorted
        descending
    """
    episode_map: Dict[int, EpisodeItem] = {}

    # A number repeated within the live feed keeps the last item seen
    for element in live_items:
        item = from_live_item(element, extractor)
        if item.episode_number is None:
            logger.debug("No episode number in live title %r", item.title)
            continue
        episode_map[item.episode_number] = item

    for normalize, records in (
        (from_cloud_record, cloud_records),
        (from_archive_record, archive_records),
    ):
        for record in records:
            item = normalize(record)
            if item.episode_number is None:
                logger.debug("Dropping %s record without episode number: %r",
                             item.source_rank.name.lower(), item.title)
                continue
            if item.episode_number not in episode_map:
                episode_map[item.episode_number] = item

    return sorted(episode_map.values(), key=lambda ep: ep.episode_number, reverse=True)


def merge_episodes(
    live_items: Iterable[ET.Element],
    cloud_records: Iterable[Dict[str, Any]] = (),
    archive_records: Iterable[Dict[str, Any]] = (),
    extractor: Optional[EpisodeNumberExtractor] = None,
) -> List[FeedItem]:
    """
    Merge all sources into the final, deduplicated feed item list.

    Priority on a shared episode number is live feed, then cloud-host
    export, then scraped archive.

    Example:
        >>> items = merge_episodes(show_items, cloud, archive, extractor)
        >>> print(f"{len(items)} unique episodes")
    """
    return [
        episode.to_feed_item()
        for episode in merge_keyed(live_items, cloud_records, archive_records, extractor)
    ]
