"""
RSS document decoding and encoding.

Feeds are kept as ElementTree trees so that channel metadata and item
extension tags (itunes:*, podcast:*, ...) pass through untouched. The
namespace prefixes declared in the source document are recorded while
parsing and re-registered before serializing, so ``itunes:title`` is
written back as ``itunes:title`` rather than ``ns0:title``.
"""

import copy
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Union

from podcast_splitter.errors import FeedParseError

logger = logging.getLogger(__name__)

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class FeedDocument:
    """
    A decoded RSS document.

    Attributes:
        root: The <rss> root element
        namespaces: Prefix -> URI map declared in the source document
    """

    def __init__(self, root: ET.Element, namespaces: Optional[Dict[str, str]] = None) -> None:
        self.root = root
        self.namespaces: Dict[str, str] = dict(namespaces or {})

    @property
    def channel(self) -> ET.Element:
        channel = self.root.find("channel")
        if channel is None:
            raise FeedParseError("RSS document has no <channel> element")
        return channel

    @property
    def items(self) -> List[ET.Element]:
        """Channel <item> elements in document order."""
        return self.channel.findall("item")

    @property
    def title(self) -> str:
        title = self.channel.find("title")
        return (title.text or "").strip() if title is not None else ""

    def clone(self) -> "FeedDocument":
        """Deep copy; edits to the clone never touch this document."""
        return FeedDocument(copy.deepcopy(self.root), self.namespaces)

    def to_xml(self) -> str:
        """
        Serialize to XML text with a declaration, indented.

        Returns:
            The document as a string
        """
        for prefix, uri in self.namespaces.items():
            try:
                ET.register_namespace(prefix, uri)
            except ValueError as exc:
                logger.debug("Not registering namespace prefix %r: %s", prefix, exc)

        root = copy.deepcopy(self.root)
        ET.indent(root)
        return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def parse_feed_document(source: Union[str, bytes]) -> FeedDocument:
    """
    Decode RSS text into a FeedDocument.

    Args:
        source: Raw feed XML, as text or undecoded bytes

    Returns:
        FeedDocument for the feed

    Raises:
        FeedParseError: If the XML is malformed or is not an RSS
            document with a <channel>
    """
    parser = ET.XMLPullParser(events=("start", "start-ns"))
    root: Optional[ET.Element] = None
    namespaces: Dict[str, str] = {}

    try:
        parser.feed(source)
        parser.close()
        # Syntax errors are queued and re-raised while reading events
        for event, payload in parser.read_events():
            if event == "start-ns":
                prefix, uri = payload
                # The default namespace stays implicit
                if prefix:
                    namespaces.setdefault(prefix, uri)
            elif event == "start" and root is None:
                root = payload
    except ET.ParseError as exc:
        raise FeedParseError(f"Failed to parse RSS feed: {exc}") from exc

    if root is None or root.tag != "rss":
        tag = root.tag if root is not None else None
        raise FeedParseError(f"Not an RSS document (root element {tag!r})")
    if root.find("channel") is None:
        raise FeedParseError("RSS document has no <channel> element")

    return FeedDocument(root, namespaces)
