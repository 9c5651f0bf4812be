"""
Configuration management for the podcast splitter.

Runtime settings (directories, timeouts, log level) come from environment
variables via Pydantic settings. The list of feeds and the shows carved out
of each feed is static data: it lives in a feeds.yaml file when one is
configured, and falls back to the built-in defaults otherwise.
"""

import re
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from podcast_splitter.errors import ConfigError


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Default data paths relative to project root
INPUT_DIR = PROJECT_ROOT / "input"
OUTPUT_DIR = PROJECT_ROOT / "output"

ShowMode = Literal["merge", "filter"]


class ShowConfig(BaseModel):
    """
    One logical show carved out of a combined feed.

    ``patterns`` select feed items by title. ``aliases`` and ``acronyms``
    drive episode-number extraction and are kept separate from the filter
    patterns, since a show may be matched more loosely than it is numbered.
    """

    key: str
    name: str
    description: str = ""
    patterns: List[str] = Field(default_factory=list)
    aliases: List[str] = Field(default_factory=list)
    acronyms: List[str] = Field(default_factory=list)
    archive_file: Optional[str] = None
    cloud_file: Optional[str] = None
    output_file: str
    mp3_prefix: Optional[str] = None
    mode: ShowMode = "merge"

    @field_validator("patterns", "aliases")
    @classmethod
    def validate_regexes(cls, v: List[str]) -> List[str]:
        """Reject patterns that do not compile."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid regular expression {pattern!r}: {exc}")
        return v


class FeedConfig(BaseModel):
    """A source feed and the shows split out of it."""

    name: str
    url: str
    raw_file: Optional[str] = None
    shows: List[ShowConfig] = Field(default_factory=list)

    def get_show(self, key: str) -> ShowConfig:
        for show in self.shows:
            if show.key == key:
                return show
        available = ", ".join(show.key for show in self.shows)
        raise ConfigError(
            f"Unknown show '{key}' in feed '{self.name}'. Available shows: {available}"
        )


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Settings can be provided via:
    1. Environment variables (prefixed with PODCAST_SPLITTER_)
    2. .env file
    3. Default values

    Example:
        export PODCAST_SPLITTER_OUTPUT_DIR="/srv/feeds"
        export PODCAST_SPLITTER_FEEDS_FILE="feeds.yaml"
    """

    model_config = SettingsConfigDict(
        env_prefix="PODCAST_SPLITTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    input_dir: Path = Field(
        default=INPUT_DIR,
        description="Directory holding raw feeds and archive JSON files"
    )
    output_dir: Path = Field(
        default=OUTPUT_DIR,
        description="Directory the generated per-show feeds are written to"
    )
    feeds_file: Optional[Path] = Field(
        default=None,
        description="YAML file describing feeds and shows (built-in defaults if unset)"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for feed downloads"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name"
    )

    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


def default_feeds() -> List[FeedConfig]:
    """
    Built-in feed configuration.

    Returns:
        The Think Big Bodybuilding split (two numbered shows) and the
        EconTalk keyword filter.
    """
    return [
        FeedConfig(
            name="think-big",
            url="https://anchor.fm/s/108342c28/podcast/rss",
            shows=[
                ShowConfig(
                    key="drugs-n-stuff",
                    name="Drugs N Stuff",
                    description=(
                        "PED education with Dave Crosland and Scott McNally. "
                        "A pull no punches, honest look inside the world of "
                        "performance enhancing drugs."
                    ),
                    # "Drugs n Stuff", "Drug n Stuff" and "DNS 123"
                    patterns=[r"drugs?\s*n\s*stuff", r"\bDNS\s+\d+"],
                    aliases=[r"drugs?\s*n\s*stuff"],
                    acronyms=["DNS"],
                    archive_file="advicesradio-drugs-n-stuff.json",
                    cloud_file="soundcloud-drugs-n-stuff.json",
                    output_file="drugs-n-stuff.rss",
                    mp3_prefix="DS",
                ),
                ShowConfig(
                    key="muscle-minds",
                    name="Muscle Minds",
                    description=(
                        "Bodybuilding science with Dr. Scott Stevenson and Scott "
                        "McNally. Deep dives into training principles, muscle "
                        "physiology, and evidence-based bodybuilding."
                    ),
                    patterns=[r"muscle\s*minds"],
                    aliases=[r"muscle\s*minds"],
                    archive_file="advicesradio-muscle-minds.json",
                    cloud_file="soundcloud-muscle-minds.json",
                    output_file="muscle-minds.rss",
                    mp3_prefix="MM",
                ),
            ],
        ),
        FeedConfig(
            name="econtalk",
            url="https://feeds.simplecast.com/wgl4xEgL",
            raw_file="econtalk-raw.rss",
            shows=[
                ShowConfig(
                    key="munger-econtalk",
                    name="EconTalk | Mike Munger episodes",
                    patterns=[r"munger"],
                    output_file="munger-econtalk.rss",
                    mode="filter",
                ),
            ],
        ),
    ]


def load_feeds_yaml(path: Path) -> List[FeedConfig]:
    """
    Load feed and show configuration from a YAML file.

    The file holds a top-level ``feeds`` list; each feed has ``name``,
    ``url``, an optional ``raw_file`` and a ``shows`` list whose entries
    mirror ``ShowConfig``.

    Args:
        path: Path to the YAML file

    Returns:
        List of validated FeedConfig objects

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not read feeds file {path}: {exc}") from exc

    raw_feeds = data.get("feeds") if isinstance(data, dict) else None
    if not isinstance(raw_feeds, list):
        raise ConfigError(f"Feeds file {path} must contain a 'feeds' list")

    try:
        return [FeedConfig.model_validate(item) for item in raw_feeds]
    except ValueError as exc:
        raise ConfigError(f"Invalid feed configuration in {path}: {exc}") from exc


def get_feeds(settings: Settings) -> List[FeedConfig]:
    """Return the configured feeds, from YAML if a file is set."""
    if settings.feeds_file is not None:
        return load_feeds_yaml(settings.feeds_file)
    return default_feeds()


def select_feed(feeds: List[FeedConfig], name: str) -> FeedConfig:
    """Look up a feed by name."""
    for feed in feeds:
        if feed.name == name:
            return feed
    available = ", ".join(feed.name for feed in feeds)
    raise ConfigError(f"Unknown feed '{name}'. Available feeds: {available}")


def get_settings() -> Settings:
    """
    Get the application settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
