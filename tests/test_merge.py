"""
Tests for episode merging and deduplication.

Covers:
- Source priority on shared episode numbers (live > cloud > archive)
- Repeated numbers within the live feed
- Exclusion of records without an episode number
- Descending sort and idempotence
- Removal of merge bookkeeping from the output
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

import pytest

from podcast_splitter.episodes.merge import merge_episodes, merge_keyed
from podcast_splitter.episodes.models import FeedItem, SourceRank
from podcast_splitter.episodes.numbering import EpisodeNumberExtractor


# ---------------------------------------------------------------------------
#  Helpers
# ---------------------------------------------------------------------------

def _make_live(title: str, guid: Optional[str] = None) -> ET.Element:
    item = ET.Element("item")
    ET.SubElement(item, "title").text = title
    ET.SubElement(item, "description").text = f"live: {title}"
    ET.SubElement(item, "guid", isPermaLink="false").text = guid or title.lower().replace(" ", "-")
    return item


def _make_archive(number: Optional[int], title: Optional[str] = None) -> Dict[str, Any]:
    return {
        "title": title or f"Muscle Minds {number}",
        "date": "14 Mar 2023",
        "trackUrl": f"https://archive.example.com/{number}",
        "mp3Url": f"https://archive.example.com/{number}.mp3",
        "episodeNumber": number,
    }


def _make_cloud(number: Optional[int], title: Optional[str] = None) -> Dict[str, Any]:
    return {
        "title": title or f"Muscle Minds {number} (cloud)",
        "url": f"https://cloud.example.com/{number}",
        "datetime": "2023-03-14T09:00:00Z",
        "mp3Url": f"https://cloud.example.com/{number}.mp3",
        "episodeNumber": number,
    }


@pytest.fixture
def extractor() -> EpisodeNumberExtractor:
    return EpisodeNumberExtractor(aliases=[r"muscle\s*minds"])


# ===================================================================
# Scenarios
# ===================================================================

class TestMergeScenarios:
    """End-to-end merge scenarios."""

    def test_live_and_archive_combined_in_order(self, extractor):
        live = [_make_live("Muscle Minds 179")]
        archive = [_make_archive(178)]

        result = merge_keyed(live, [], archive, extractor)

        assert [ep.episode_number for ep in result] == [179, 178]
        assert [ep.source_rank for ep in result] == [SourceRank.LIVE, SourceRank.TERTIARY]

    def test_live_wins_over_archive(self, extractor):
        live = [_make_live("Muscle Minds 200", guid="live-200")]
        archive = [_make_archive(200, title="Muscle Minds 200 (old scrape)")]

        result = merge_episodes(live, [], archive, extractor)

        assert len(result) == 1
        assert result[0].guid == "live-200"
        assert result[0].title == "Muscle Minds 200"

    def test_live_wins_over_cloud(self, extractor):
        live = [_make_live("Muscle Minds 200", guid="live-200")]

        result = merge_episodes(live, [_make_cloud(200)], [], extractor)

        assert [item.guid for item in result] == ["live-200"]

    def test_cloud_wins_over_archive(self, extractor):
        result = merge_keyed([], [_make_cloud(150)], [_make_archive(150)], extractor)

        assert len(result) == 1
        assert result[0].source_rank == SourceRank.SECONDARY
        assert result[0].guid == "https://cloud.example.com/150"

    def test_cloud_wins_for_every_shared_number(self, extractor):
        archive = [_make_archive(150), _make_archive(151)]
        cloud = [_make_cloud(151), _make_cloud(150)]

        result = merge_keyed([], cloud, archive, extractor)

        assert {ep.source_rank for ep in result} == {SourceRank.SECONDARY}

    def test_sources_fill_each_others_gaps(self, extractor):
        live = [_make_live("Muscle Minds 10")]
        cloud = [_make_cloud(9), _make_cloud(10)]
        archive = [_make_archive(8), _make_archive(9)]

        result = merge_keyed(live, cloud, archive, extractor)

        assert [(ep.episode_number, ep.source_rank) for ep in result] == [
            (10, SourceRank.LIVE),
            (9, SourceRank.SECONDARY),
            (8, SourceRank.TERTIARY),
        ]

    def test_empty_inputs(self, extractor):
        assert merge_episodes([], [], [], extractor) == []


# ===================================================================
# Deduplication inside the live feed
# ===================================================================

class TestLiveDuplicates:
    """A number repeated among live items keeps the last one."""

    def test_last_live_item_wins(self, extractor):
        live = [
            _make_live("Muscle Minds 50", guid="first"),
            _make_live("Muscle Minds 50 (re-upload)", guid="second"),
        ]

        result = merge_episodes(live, [], [], extractor)

        assert [item.guid for item in result] == ["second"]

    def test_first_archive_record_wins_within_archive(self, extractor):
        archive = [_make_archive(7, title="first"), _make_archive(7, title="second")]

        result = merge_episodes([], [], archive, extractor)

        assert [item.title for item in result] == ["first"]


# ===================================================================
# Exclusion of unkeyed records
# ===================================================================

class TestExclusion:
    """Records without a derivable number never reach the output."""

    def test_unnumbered_live_item_dropped(self, extractor):
        live = [_make_live("Live Q&A with Scott"), _make_live("Muscle Minds 3")]

        result = merge_keyed(live, [], [], extractor)

        assert [ep.episode_number for ep in result] == [3]

    def test_archive_without_number_dropped(self, extractor):
        archive = [_make_archive(None, title="Muscle Minds 77"), _make_archive(5)]

        result = merge_keyed([], [], archive, extractor)

        assert [ep.episode_number for ep in result] == [5]

    def test_cloud_with_junk_number_dropped(self, extractor):
        cloud = [dict(_make_cloud(1), episodeNumber="n/a")]

        assert merge_keyed([], cloud, [], extractor) == []

    def test_negative_number_dropped(self, extractor):
        archive = [_make_archive(-1), _make_archive(2)]
        cloud = [dict(_make_cloud(3), episodeNumber=-3)]

        result = merge_keyed([], cloud, archive, extractor)

        assert [ep.episode_number for ep in result] == [2]

    def test_non_ascii_digits_dropped(self, extractor):
        archive = [dict(_make_archive(1), episodeNumber="²"), _make_archive(4)]

        result = merge_keyed([], [], archive, extractor)

        assert [ep.episode_number for ep in result] == [4]

    def test_no_null_numbers_in_output(self, extractor):
        live = [_make_live("Bonus"), _make_live("Muscle Minds 2")]
        cloud = [_make_cloud(None), _make_cloud(1)]
        archive = [_make_archive(None)]

        result = merge_keyed(live, cloud, archive, extractor)

        assert all(ep.episode_number is not None for ep in result)
        assert len(result) == 2


# ===================================================================
# Ordering, idempotence and output shape
# ===================================================================

class TestOutputProperties:
    """Sort order, determinism and public item shape."""

    def test_strictly_descending(self, extractor):
        live = [_make_live(f"Muscle Minds {n}") for n in (3, 11, 7)]
        archive = [_make_archive(n) for n in (1, 12, 5, 7)]
        cloud = [_make_cloud(n) for n in (2, 9)]

        result = merge_keyed(live, cloud, archive, extractor)
        numbers = [ep.episode_number for ep in result]

        assert numbers == [12, 11, 9, 7, 5, 3, 2, 1]
        assert all(a > b for a, b in zip(numbers, numbers[1:]))

    def test_idempotent(self, extractor):
        live = [_make_live(f"Muscle Minds {n}") for n in (3, 4)]
        archive = [_make_archive(n) for n in (1, 2, 3)]
        cloud = [_make_cloud(n) for n in (2, 5)]

        first = merge_episodes(live, cloud, archive, extractor)
        second = merge_episodes(live, cloud, archive, extractor)

        assert first == second

    def test_output_has_no_bookkeeping(self, extractor):
        result = merge_episodes([_make_live("Muscle Minds 1")], [], [_make_archive(2)], extractor)

        for item in result:
            assert isinstance(item, FeedItem)
            assert not hasattr(item, "episode_number")
            assert not hasattr(item, "source_rank")

    def test_live_items_keep_their_element(self, extractor):
        element = _make_live("Muscle Minds 1")

        result = merge_episodes([element], [], [], extractor)

        assert result[0].element is element
        rendered = result[0].to_element()
        assert rendered is not element
        assert rendered.findtext("description") == "live: Muscle Minds 1"

    def test_archive_items_render_as_rss(self, extractor):
        result = merge_episodes([], [], [_make_archive(4)], extractor)

        element = result[0].to_element()

        assert element.tag == "item"
        assert element.findtext("title") == "Muscle Minds 4"
        assert element.findtext("pubDate") == "Tue, 14 Mar 2023 00:00:00 GMT"
        assert element.find("enclosure").get("url") == "https://archive.example.com/4.mp3"
        assert element.find("enclosure").get("type") == "audio/mpeg"
        assert element.find("guid").get("isPermaLink") == "true"
        assert element.findtext("link") == "https://archive.example.com/4"
