"""
Episode data models.

``EpisodeItem`` is the canonical record the merger works on; it carries
the episode number and the rank of the source it came from. ``FeedItem``
is what leaves the merger: the same episode without that bookkeeping,
ready to be written back into a feed.
"""

import copy
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class SourceRank(IntEnum):
    """
    Provenance of an episode record. Lower value wins a merge conflict.

    LIVE is the current RSS feed, SECONDARY the cloud-host JSON export,
    TERTIARY the scraped-archive JSON file.
    """
    LIVE = 0
    SECONDARY = 1
    TERTIARY = 2


@dataclass
class FeedItem:
    """
    Public, source-agnostic representation of one feed item.

    Attributes:
        title: Episode title
        description: Episode description (archive records reuse the title)
        published_at: RFC-2822 date text, or "" when unknown
        guid: Unique identifier string
        guid_is_permalink: Whether the guid is a resolvable URL
        enclosure_url: Audio file URL, None when the item has no enclosure
        link: Episode page URL, None when absent
        element: Original <item> element for live-feed items
    """

    title: str
    description: str
    published_at: str
    guid: str
    guid_is_permalink: bool
    enclosure_url: Optional[str] = None
    link: Optional[str] = None
    element: Optional[ET.Element] = None

    def to_element(self) -> ET.Element:
        """
        Render as an RSS <item> element.

        Live-feed items are copied as-is so extension tags survive;
        everything else is built from the fields.
        """
        if self.element is not None:
            return copy.deepcopy(self.element)

        item = ET.Element("item")
        ET.SubElement(item, "title").text = self.title
        ET.SubElement(item, "description").text = self.description
        ET.SubElement(item, "pubDate").text = self.published_at
        if self.enclosure_url:
            ET.SubElement(
                item,
                "enclosure",
                url=self.enclosure_url,
                type="audio/mpeg",
                length="0",
            )
        guid = ET.SubElement(
            item,
            "guid",
            isPermaLink="true" if self.guid_is_permalink else "false",
        )
        guid.text = self.guid
        if self.link:
            ET.SubElement(item, "link").text = self.link
        return item


@dataclass
class EpisodeItem:
    """Canonical episode record used while merging."""

    title: str
    description: str
    published_at: str
    guid: str
    guid_is_permalink: bool
    source_rank: SourceRank
    episode_number: Optional[int] = None
    enclosure_url: Optional[str] = None
    link: Optional[str] = None
    element: Optional[ET.Element] = None

    def to_feed_item(self) -> FeedItem:
        """Drop merge bookkeeping (episode number, source rank)."""
        return FeedItem(
            title=self.title,
            description=self.description,
            published_at=self.published_at,
            guid=self.guid,
            guid_is_permalink=self.guid_is_permalink,
            enclosure_url=self.enclosure_url,
            link=self.link,
            element=self.element,
        )
