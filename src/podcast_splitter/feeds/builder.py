"""
Per-show feed generation.

Takes the source feed as an envelope: every channel-level tag is kept,
the show's own title and description are written over the channel's,
and the item list is replaced.
"""

import copy
import xml.etree.ElementTree as ET
from typing import Iterable, Optional, Union

from podcast_splitter.episodes.models import FeedItem
from podcast_splitter.feeds.document import ITUNES_NS, FeedDocument


def _set_child_text(parent: ET.Element, tag: str, text: str) -> None:
    child = parent.find(tag)
    if child is None:
        child = ET.SubElement(parent, tag)
    child.text = text


def _overwrite_if_present(parent: ET.Element, tag: str, text: str) -> None:
    child = parent.find(tag)
    if child is not None:
        child.text = text


def build_show_feed(
    document: FeedDocument,
    items: Iterable[Union[FeedItem, ET.Element]],
    title: str,
    description: Optional[str] = None,
) -> str:
    """
    Build the RSS text for one show.

    The source document is not modified. ``itunes:title`` and
    ``itunes:summary`` are only overwritten when the source channel
    already has them.

    Args:
        document: Decoded source feed
        items: Final item list, as FeedItems or raw <item> elements
        title: Channel title for the show
        description: Channel description (left unchanged if None)

    Returns:
        Serialized RSS document

    Example:
        >>> xml = build_show_feed(document, merged, "Muscle Minds", "Bodybuilding science")
    """
    feed = document.clone()
    channel = feed.channel

    _set_child_text(channel, "title", title)
    _overwrite_if_present(channel, f"{{{ITUNES_NS}}}title", title)
    if description is not None:
        _set_child_text(channel, "description", description)
        _overwrite_if_present(channel, f"{{{ITUNES_NS}}}summary", description)

    old_items = channel.findall("item")
    position = list(channel).index(old_items[0]) if old_items else len(channel)
    for old in old_items:
        channel.remove(old)

    for offset, item in enumerate(items):
        if isinstance(item, FeedItem):
            element = item.to_element()
        else:
            element = copy.deepcopy(item)
        channel.insert(position + offset, element)

    return feed.to_xml()
