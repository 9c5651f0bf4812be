"""
Normalization of raw episode records into canonical EpisodeItems.

Three record shapes feed the merger:

- live-feed ``<item>`` elements from the current RSS document
- cloud-host export records: ``{title, url, datetime, mp3Url, episodeNumber}``
- scraped-archive records: ``{title, date, trackUrl, mp3Url, episodeNumber}``

All functions here are pure. A bad date never fails a record; it
degrades to an empty publish date.
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from podcast_splitter.episodes.models import EpisodeItem, SourceRank
from podcast_splitter.episodes.numbering import EpisodeNumberExtractor, extract_episode_number


def format_rfc2822(value: datetime) -> str:
    """
    Format a datetime as an RFC-2822 GMT string.

    Naive datetimes are taken to be UTC.

    Example:
        >>> format_rfc2822(datetime(2023, 3, 14))
        'Tue, 14 Mar 2023 00:00:00 GMT'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


# Two defaults differing in year and month; a date that parses the same
# against both named its own year and month.
_PARTIAL_DATE_DEFAULTS = (datetime(1900, 1, 1), datetime(1901, 2, 1))


def parse_publish_date(raw: Any) -> str:
    """
    Parse a free-form date into RFC-2822 text.

    Text missing a year or month ("Tuesday", "March") is rejected rather
    than completed from the current date. A missing day is the 1st.

    Args:
        raw: Date string from an archive record ("14 Mar 2023",
             "2023-03-14T10:00:00Z", ...)

    Returns:
        RFC-2822 GMT string, or "" if the value is missing or unparseable
    """
    if not raw or not isinstance(raw, str):
        return ""
    try:
        first, second = (date_parser.parse(raw, default=d) for d in _PARTIAL_DATE_DEFAULTS)
    except (ValueError, OverflowError):
        return ""
    if first != second:
        return ""
    return format_rfc2822(first)


def coerce_episode_number(value: Any) -> Optional[int]:
    """Read an archive record's episodeNumber field as a non-negative int, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value >= 0 else None
    if isinstance(value, str):
        digits = value.strip()
        # ASCII only: str.isdigit() also accepts "²", which int() rejects
        if digits.isascii() and digits.isdigit():
            return int(digits, 10)
    return None


def _child_text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def from_live_item(
    element: ET.Element,
    extractor: Optional[EpisodeNumberExtractor] = None,
) -> EpisodeItem:
    """
    Normalize a live-feed <item> element.

    The element itself is kept on the record so the item is written back
    unchanged.

    Args:
        element: RSS <item> element
        extractor: Episode-number rules (built-in rules if None)

    Returns:
        EpisodeItem with rank LIVE; episode_number may be None
    """
    title = _child_text(element, "title")

    enclosure_url = None
    enclosure = element.find("enclosure")
    if enclosure is not None:
        enclosure_url = enclosure.get("url") or None

    guid = ""
    guid_is_permalink = True
    guid_el = element.find("guid")
    if guid_el is not None:
        guid = (guid_el.text or "").strip()
        # RSS 2.0: isPermaLink defaults to true
        guid_is_permalink = guid_el.get("isPermaLink", "true").lower() == "true"

    return EpisodeItem(
        title=title,
        description=_child_text(element, "description"),
        published_at=_child_text(element, "pubDate"),
        guid=guid,
        guid_is_permalink=guid_is_permalink,
        source_rank=SourceRank.LIVE,
        episode_number=extract_episode_number(title, extractor),
        enclosure_url=enclosure_url,
        link=_child_text(element, "link") or None,
        element=element,
    )


def _from_json_record(
    record: Dict[str, Any],
    url_field: str,
    date_field: str,
    guid_prefix: str,
    rank: SourceRank,
) -> EpisodeItem:
    title = record.get("title") or ""
    episode_number = coerce_episode_number(record.get("episodeNumber"))
    page_url = record.get(url_field) or None

    return EpisodeItem(
        title=title,
        description=title,
        published_at=parse_publish_date(record.get(date_field)),
        guid=page_url or f"{guid_prefix}-{episode_number}",
        guid_is_permalink=page_url is not None,
        source_rank=rank,
        episode_number=episode_number,
        enclosure_url=record.get("mp3Url") or None,
        link=page_url,
    )


def from_archive_record(record: Dict[str, Any]) -> EpisodeItem:
    """
    Normalize a scraped-archive record.

    Args:
        record: ``{title, date, trackUrl, mp3Url, episodeNumber}``

    Returns:
        EpisodeItem with rank TERTIARY
    """
    return _from_json_record(record, "trackUrl", "date", "archive", SourceRank.TERTIARY)


def from_cloud_record(record: Dict[str, Any]) -> EpisodeItem:
    """
    Normalize a cloud-host export record.

    Args:
        record: ``{title, url, datetime, mp3Url, episodeNumber}``

    Returns:
        EpisodeItem with rank SECONDARY
    """
    return _from_json_record(record, "url", "datetime", "soundcloud", SourceRank.SECONDARY)
