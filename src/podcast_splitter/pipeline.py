"""
Split run orchestration.

For each configured feed: fetch and decode it once, then for each show
carved out of it select the show's items, merge them with the show's
archives, rebuild the feed and write it out.

Example:
    >>> from podcast_splitter.pipeline import run_split
    >>> result = run_split(get_settings(), get_feeds(settings))
    >>> for show in result.shows:
    ...     print(show.show_name, show.item_count)
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from podcast_splitter.config import FeedConfig, Settings, ShowConfig, select_feed
from podcast_splitter.episodes.merge import merge_episodes
from podcast_splitter.episodes.numbering import EpisodeNumberExtractor
from podcast_splitter.errors import ConfigError, FeedError, SplitterError
from podcast_splitter.feeds.builder import build_show_feed
from podcast_splitter.feeds.document import FeedDocument
from podcast_splitter.feeds.fetch import load_feed_document
from podcast_splitter.feeds.filter import filter_items
from podcast_splitter.sources import load_archive_records

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
#  Data models
# ---------------------------------------------------------------------------

@dataclass
class ShowResult:
    """
    Outcome of building one show's feed.

    Attributes:
        show_key: Show identifier from configuration
        show_name: Channel title written for the show
        mode: "merge" or "filter"
        output_path: File the feed was written to ("" if not written)
        live_count: Items of this show found in the live feed
        cloud_count: Records loaded from the cloud-host export
        archive_count: Records loaded from the scraped archive
        item_count: Items in the written feed
        errors: Error messages for this show
    """

    show_key: str
    show_name: str
    mode: str = "merge"
    output_path: str = ""
    live_count: int = 0
    cloud_count: int = 0
    archive_count: int = 0
    item_count: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass
class SplitResult:
    """
    Result of a split run across feeds and shows.

    Attributes:
        started_at: ISO-8601 timestamp of the run start
        feeds: Names of the feeds that were loaded
        shows: Per-show results
        errors: Feed-level errors (fetch/parse failures)
    """

    started_at: str = ""
    feeds: List[str] = field(default_factory=list)
    shows: List[ShowResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors) or any(show.errors for show in self.shows)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "started_at": self.started_at,
            "feeds": self.feeds,
            "shows": [show.to_dict() for show in self.shows],
            "errors": self.errors,
            "has_errors": self.has_errors,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
#  Helpers
# ---------------------------------------------------------------------------

def write_atomic(path: Path, text: str) -> None:
    """
    Write ``text`` to ``path`` via a temp file and rename.

    Either the complete file appears or the previous one is left alone.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except Exception:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise


def _input_path(settings: Settings, filename: Optional[str]) -> Optional[Path]:
    if not filename:
        return None
    return settings.input_dir / filename


def raw_feed_path(settings: Settings, feed: FeedConfig) -> Path:
    """Local path of a feed's saved raw copy."""
    return settings.input_dir / (feed.raw_file or f"{feed.name}-raw.rss")


# ---------------------------------------------------------------------------
#  Core functions
# ---------------------------------------------------------------------------

def process_show(
    show: ShowConfig,
    document: FeedDocument,
    settings: Settings,
    extractor: Optional[EpisodeNumberExtractor] = None,
) -> ShowResult:
    """
    Build and write the feed for a single show.

    In ``merge`` mode the show's live items are merged with its archives
    and sorted by episode number. In ``filter`` mode the matching live
    items are written in feed order.

    Args:
        show: Show configuration
        document: Decoded source feed (not modified)
        settings: Application settings (input/output directories)
        extractor: Episode-number rules (the show's own rules if None)

    Returns:
        ShowResult describing what was written
    """
    logger.info("Processing %s...", show.name)
    result = ShowResult(show_key=show.key, show_name=show.name, mode=show.mode)

    live_items = filter_items(document.items, show.patterns)
    result.live_count = len(live_items)
    logger.info("  Found %d episodes in live feed", result.live_count)

    if show.mode == "filter":
        items: List[Any] = list(live_items)
    else:
        cloud_records = load_archive_records(_input_path(settings, show.cloud_file))
        result.cloud_count = len(cloud_records)
        if show.cloud_file:
            logger.info("  Found %d episodes in cloud export", result.cloud_count)

        archive_records = load_archive_records(_input_path(settings, show.archive_file))
        result.archive_count = len(archive_records)
        if show.archive_file:
            logger.info("  Found %d episodes in archive", result.archive_count)

        if extractor is None:
            extractor = EpisodeNumberExtractor.for_shows([show])
        items = merge_episodes(live_items, cloud_records, archive_records, extractor)

    result.item_count = len(items)
    logger.info("  Total unique episodes: %d", result.item_count)

    xml = build_show_feed(document, items, show.name, show.description or None)

    output_path = settings.output_dir / show.output_file
    write_atomic(output_path, xml)
    result.output_path = str(output_path)
    logger.info("  Written to %s", output_path)

    return result


def _select_feeds(
    feeds: List[FeedConfig],
    feed_name: Optional[str],
    show_key: Optional[str],
    source: Optional[Union[str, Path]] = None,
) -> List[FeedConfig]:
    selected = feeds
    if feed_name is not None:
        selected = [select_feed(feeds, feed_name)]
    if show_key is not None:
        selected = [feed for feed in selected if any(s.key == show_key for s in feed.shows)]
        if not selected:
            raise ConfigError(f"Unknown show '{show_key}'")
    # One override document cannot stand in for several different feeds
    if source is not None and len(selected) > 1:
        names = ", ".join(feed.name for feed in selected)
        raise ConfigError(
            f"A source override applies to a single feed; choose one with --feed ({names})"
        )
    return selected


def run_split(
    settings: Settings,
    feeds: List[FeedConfig],
    feed_name: Optional[str] = None,
    show_key: Optional[str] = None,
    source: Optional[Union[str, Path]] = None,
    offline: bool = False,
) -> SplitResult:
    """
    Run the split for the selected feeds and shows.

    A feed that cannot be fetched or parsed is recorded as an error and
    its shows are skipped; other feeds still run. A show that fails while
    building or writing is recorded without touching its previous output.

    Args:
        settings: Application settings
        feeds: Feed configuration
        feed_name: Only process this feed
        show_key: Only process this show
        source: Read the feed from this URL/path instead of its configured URL
                (only valid when a single feed is selected)
        offline: Read each feed from its saved raw copy in the input dir

    Returns:
        SplitResult with per-show details and any errors

    Raises:
        ConfigError: If ``feed_name`` or ``show_key`` is unknown, or if
            ``source`` is given while more than one feed is selected
    """
    result = SplitResult(started_at=datetime.now().isoformat())
    selected = _select_feeds(feeds, feed_name, show_key, source)
    settings.ensure_directories()

    for feed in selected:
        if source is not None:
            feed_source: Union[str, Path] = source
        elif offline:
            feed_source = raw_feed_path(settings, feed)
        else:
            feed_source = feed.url

        try:
            document = load_feed_document(feed_source, timeout=settings.request_timeout)
        except FeedError as exc:
            message = f"Feed '{feed.name}' unavailable: {exc}"
            logger.error(message)
            result.errors.append(message)
            continue
        result.feeds.append(feed.name)

        extractor = EpisodeNumberExtractor.for_shows(feed.shows)
        shows = [feed.get_show(show_key)] if show_key else feed.shows

        for show in shows:
            try:
                result.shows.append(process_show(show, document, settings, extractor))
            except (SplitterError, OSError) as exc:
                logger.exception("Failed to build feed for %s", show.name)
                result.shows.append(
                    ShowResult(
                        show_key=show.key,
                        show_name=show.name,
                        mode=show.mode,
                        errors=[str(exc)],
                    )
                )

    return result
