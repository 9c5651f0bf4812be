"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- Temporary input/output directories and settings
- A combined source feed in the style of the Think Big Bodybuilding feed
- Show configuration and archive records
"""

import tempfile
from pathlib import Path
from typing import Any, Dict, List

import pytest

from podcast_splitter.config import FeedConfig, Settings, ShowConfig
from podcast_splitter.feeds.document import FeedDocument, parse_feed_document


COMBINED_FEED_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Think Big Bodybuilding</title>
    <description>Every Think Big show in one feed</description>
    <link>https://example.com/thinkbig</link>
    <itunes:title>Think Big Bodybuilding</itunes:title>
    <itunes:summary>Every Think Big show in one feed</itunes:summary>
    <itunes:author>Think Big</itunes:author>
    <item>
      <title>Muscle Minds 179</title>
      <description>Training volume revisited</description>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/mm179.mp3" type="audio/mpeg" length="1234"/>
      <guid isPermaLink="false">mm-179</guid>
      <itunes:duration>01:02:03</itunes:duration>
    </item>
    <item>
      <title>Drug n Stuff 286</title>
      <description>Cycle design</description>
      <pubDate>Fri, 03 Jan 2025 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/dns286.mp3" type="audio/mpeg" length="2345"/>
      <guid isPermaLink="false">dns-286</guid>
    </item>
    <item>
      <title>DNS 285 | Bloodwork</title>
      <description>Reading your labs</description>
      <pubDate>Fri, 27 Dec 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/dns285.mp3" type="audio/mpeg" length="3456"/>
      <guid isPermaLink="false">dns-285</guid>
    </item>
    <item>
      <title>Muscle Minds, 178</title>
      <description>Recovery</description>
      <pubDate>Mon, 30 Dec 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://cdn.example.com/mm178.mp3" type="audio/mpeg" length="4567"/>
      <guid isPermaLink="false">mm-178</guid>
    </item>
    <item>
      <title>Live Q&amp;A with Scott</title>
      <description>Listener questions</description>
      <pubDate>Sun, 29 Dec 2024 10:00:00 GMT</pubDate>
      <guid isPermaLink="false">qa-1</guid>
    </item>
    <language>en</language>
  </channel>
</rss>
"""


@pytest.fixture
def temp_dir():
    """
    Create temporary directory for test files.

    Yields:
        Path: Temporary directory path
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Settings pointing at temporary input/output directories."""
    input_dir = temp_dir / "input"
    input_dir.mkdir()
    return Settings(
        input_dir=input_dir,
        output_dir=temp_dir / "output",
        request_timeout=5,
    )


@pytest.fixture
def combined_feed_xml() -> str:
    """Raw XML of a combined multi-show feed."""
    return COMBINED_FEED_XML


@pytest.fixture
def combined_feed(combined_feed_xml: str) -> FeedDocument:
    """Decoded combined multi-show feed."""
    return parse_feed_document(combined_feed_xml)


@pytest.fixture
def muscle_minds_show() -> ShowConfig:
    """Numbered show with archive and cloud sources."""
    return ShowConfig(
        key="muscle-minds",
        name="Muscle Minds",
        description="Bodybuilding science",
        patterns=[r"muscle\s*minds"],
        aliases=[r"muscle\s*minds"],
        archive_file="archive-mm.json",
        cloud_file="cloud-mm.json",
        output_file="muscle-minds.rss",
        mp3_prefix="MM",
    )


@pytest.fixture
def dns_show() -> ShowConfig:
    """Numbered show matched by name or acronym."""
    return ShowConfig(
        key="drugs-n-stuff",
        name="Drugs N Stuff",
        description="PED education",
        patterns=[r"drugs?\s*n\s*stuff", r"\bDNS\s+\d+"],
        aliases=[r"drugs?\s*n\s*stuff"],
        acronyms=["DNS"],
        archive_file="archive-dns.json",
        output_file="drugs-n-stuff.rss",
    )


@pytest.fixture
def think_big_feed(muscle_minds_show: ShowConfig, dns_show: ShowConfig) -> FeedConfig:
    """Feed configuration holding both numbered shows."""
    return FeedConfig(
        name="think-big",
        url="https://feeds.example.com/thinkbig.rss",
        shows=[dns_show, muscle_minds_show],
    )


@pytest.fixture
def archive_records() -> List[Dict[str, Any]]:
    """Scraped-archive records for Muscle Minds."""
    return [
        {
            "title": "Muscle Minds 178",
            "date": "30 Dec 2024",
            "trackUrl": "https://archive.example.com/mm-178",
            "mp3Url": "https://archive.example.com/mm-178.mp3",
            "episodeNumber": 178,
        },
        {
            "title": "Muscle Minds 150",
            "date": "14 Mar 2023",
            "trackUrl": None,
            "mp3Url": None,
            "episodeNumber": 150,
        },
    ]


@pytest.fixture
def cloud_records() -> List[Dict[str, Any]]:
    """Cloud-host export records for Muscle Minds."""
    return [
        {
            "title": "Muscle Minds 150 (cloud)",
            "url": "https://cloud.example.com/mm-150",
            "datetime": "2023-03-14T09:00:00Z",
            "mp3Url": "https://cloud.example.com/mm-150.mp3",
            "episodeNumber": 150,
        },
    ]
