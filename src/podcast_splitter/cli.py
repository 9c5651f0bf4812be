"""
Command-line interface for the podcast splitter.

Usage:
    podcast-splitter split                       # Build every configured show feed
    podcast-splitter split --feed think-big      # Only shows of one source feed
    podcast-splitter split --show muscle-minds   # Only one show
    podcast-splitter split --offline             # Use saved raw feeds from the input dir
    podcast-splitter split --output-json         # JSON output for CI integration
    podcast-splitter download                    # Save raw source feeds to the input dir
    podcast-splitter shows                       # List configured feeds and shows
    podcast-splitter extract "Muscle Minds 179"  # Show the episode number read from a title
"""

import argparse
import json
import logging
import sys

from podcast_splitter.config import get_feeds, get_settings, select_feed
from podcast_splitter.errors import ConfigError, FeedError

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool, level_name: str) -> None:
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")


def cmd_split(args):
    """Build per-show feeds from the configured source feeds."""
    from podcast_splitter.pipeline import run_split

    settings = get_settings()
    try:
        feeds = get_feeds(settings)
        result = run_split(
            settings,
            feeds,
            feed_name=args.feed,
            show_key=args.show,
            source=args.source,
            offline=args.offline,
        )
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    # JSON output mode (for CI/automation)
    if args.output_json:
        print(result.to_json())
        sys.exit(1 if result.has_errors else 0)

    # Human-readable output
    for err in result.errors:
        print(f"ERROR: {err}")

    for show in result.shows:
        if show.errors:
            for err in show.errors:
                print(f"ERROR: {show.show_name}: {err}")
            continue
        print(f"{show.show_name}: {show.item_count} episode(s) -> {show.output_path}")

    if result.has_errors:
        sys.exit(1)
    print("\nDone!")


def cmd_download(args):
    """Download raw source feeds into the input directory."""
    from podcast_splitter.feeds.fetch import download_feed
    from podcast_splitter.pipeline import raw_feed_path

    settings = get_settings()
    try:
        feeds = get_feeds(settings)
        if args.feed:
            feeds = [select_feed(feeds, args.feed)]
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    failed = False
    for feed in feeds:
        try:
            path = download_feed(
                feed.url,
                raw_feed_path(settings, feed),
                timeout=settings.request_timeout,
            )
            print(f"{feed.name}: saved to {path}")
        except FeedError as exc:
            logger.error("Download of '%s' failed: %s", feed.name, exc)
            print(f"ERROR: {exc}")
            failed = True

    if failed:
        sys.exit(1)


def cmd_shows(args):
    """List configured feeds and shows."""
    settings = get_settings()
    try:
        feeds = get_feeds(settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    if args.output_json:
        print(json.dumps([feed.model_dump() for feed in feeds], indent=2, ensure_ascii=False))
        return

    for feed in feeds:
        print(f"{feed.name} ({feed.url})")
        for show in feed.shows:
            prefix_info = f", prefix={show.mp3_prefix}" if show.mp3_prefix else ""
            print(f"  - {show.key}: {show.name} [{show.mode}{prefix_info}] -> {show.output_file}")


def cmd_extract(args):
    """Print the episode number extracted from each title."""
    from podcast_splitter.episodes.numbering import EpisodeNumberExtractor

    settings = get_settings()
    try:
        feeds = get_feeds(settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    extractor = EpisodeNumberExtractor.for_shows(
        show for feed in feeds for show in feed.shows
    )
    for title in args.titles:
        number = extractor.extract(title)
        print(f"{number if number is not None else '-'}\t{title}")


def main():
    parser = argparse.ArgumentParser(
        prog="podcast-splitter",
        description="Split combined podcast feeds into per-show feeds merged with archives",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # split
    sub_split = subparsers.add_parser("split", help="Build per-show feeds")
    sub_split.add_argument("--feed", default=None, help="Only process this source feed")
    sub_split.add_argument("--show", default=None, help="Only process this show")
    sub_split.add_argument(
        "--source",
        default=None,
        help="Read the source feed from this URL or file instead of the configured URL",
    )
    sub_split.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Read source feeds from the raw copies saved by 'download'",
    )
    sub_split.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for CI/automation)",
    )
    sub_split.set_defaults(func=cmd_split)

    # download
    sub_download = subparsers.add_parser("download", help="Save raw source feeds")
    sub_download.add_argument("--feed", default=None, help="Only download this source feed")
    sub_download.set_defaults(func=cmd_download)

    # shows
    sub_shows = subparsers.add_parser("shows", help="List configured feeds and shows")
    sub_shows.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output configuration as JSON",
    )
    sub_shows.set_defaults(func=cmd_shows)

    # extract
    sub_extract = subparsers.add_parser("extract", help="Extract episode numbers from titles")
    sub_extract.add_argument("titles", nargs="+", help="Episode titles")
    sub_extract.set_defaults(func=cmd_extract)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(args.verbose, get_settings().log_level)
    args.func(args)


if __name__ == "__main__":
    main()
