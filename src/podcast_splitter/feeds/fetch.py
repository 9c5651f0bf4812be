"""
Feed retrieval.

Downloads source feeds over HTTP or reads a local copy. A feed that
cannot be obtained is fatal for every show built from it, so failures
are raised as FeedFetchError rather than swallowed.
"""

import logging
from pathlib import Path
from typing import Union

import requests

from podcast_splitter.errors import FeedFetchError
from podcast_splitter.feeds.document import FeedDocument, parse_feed_document

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds
USER_AGENT = "podcast-splitter/0.1"


def fetch_feed_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """
    Download a feed and return the undecoded body.

    The body is left as bytes so the XML parser can honour the
    document's own encoding declaration.

    Args:
        url: Feed URL
        timeout: Request timeout in seconds

    Returns:
        Response body

    Raises:
        FeedFetchError: On connection errors, timeouts and HTTP errors
    """
    logger.info("Fetching RSS feed: %s", url)
    try:
        response = requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.exceptions.Timeout as exc:
        raise FeedFetchError(f"Timed out fetching {url}") from exc
    except requests.exceptions.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch {url}: {exc}") from exc

    return response.content


def download_feed(url: str, path: Path, timeout: float = DEFAULT_TIMEOUT) -> Path:
    """
    Download a feed and save the raw document to ``path``.

    Returns:
        The path written
    """
    content = fetch_feed_bytes(url, timeout=timeout)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info("Raw RSS feed downloaded to %s (%d bytes)", path, len(content))
    return path


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_feed_document(
    source: Union[str, Path],
    timeout: float = DEFAULT_TIMEOUT,
) -> FeedDocument:
    """
    Load and decode a feed from a URL or a local file.

    Args:
        source: http(s) URL or filesystem path
        timeout: Request timeout for URLs

    Returns:
        Decoded FeedDocument

    Raises:
        FeedFetchError: If the feed cannot be downloaded or read
        FeedParseError: If the content is not a valid RSS document
    """
    if isinstance(source, str) and _is_url(source):
        content = fetch_feed_bytes(source, timeout=timeout)
    else:
        path = Path(source)
        logger.info("Reading RSS feed from %s", path)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FeedFetchError(f"Could not read feed file {path}: {exc}") from exc

    document = parse_feed_document(content)
    logger.info("Loaded feed '%s': %d total items", document.title, len(document.items))
    return document
