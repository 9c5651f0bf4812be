"""
Episode number extraction from free-text titles.

Titles in a combined feed name their episode in a handful of ways:
"Muscle Minds 179", "Drug n Stuff, 286", "DNS286", "Episode 42". The
extractor tries one rule per style in a fixed order and returns the
first captured number.
"""

import re
from typing import Iterable, List, Optional, Pattern

from podcast_splitter.config import ShowConfig, default_feeds


class EpisodeNumberExtractor:
    """
    Ordered set of episode-number rules.

    Rules, in priority order:
        1. show-name alias followed by separators and digits
        2. acronym followed by optional whitespace and digits
        3. "episode" followed by digits

    Aliases are regex fragments and carry their own tolerance for
    plurals and spacing (e.g. ``drugs?\\s*n\\s*stuff``). Acronyms are
    literal text.

    Example:
        >>> extractor = EpisodeNumberExtractor([r"muscle\\s*minds"], ["DNS"])
        >>> extractor.extract("Muscle Minds 179")
        179
        >>> extractor.extract("DNS 286")
        286
    """

    def __init__(self, aliases: Iterable[str] = (), acronyms: Iterable[str] = ()) -> None:
        self.aliases: List[str] = list(aliases)
        self.acronyms: List[str] = list(acronyms)
        self.rules: List[Pattern[str]] = []

        if self.aliases:
            alias_group = "|".join(f"(?:{alias})" for alias in self.aliases)
            self.rules.append(
                re.compile(rf"(?:{alias_group})[,\s|]*(\d+)", re.IGNORECASE)
            )
        if self.acronyms:
            acronym_group = "|".join(re.escape(acronym) for acronym in self.acronyms)
            self.rules.append(
                re.compile(rf"\b(?:{acronym_group})\s*(\d+)", re.IGNORECASE)
            )
        self.rules.append(re.compile(r"episode\s*(\d+)", re.IGNORECASE))

    @classmethod
    def for_shows(cls, shows: Iterable[ShowConfig]) -> "EpisodeNumberExtractor":
        """Build one extractor covering every show's aliases and acronyms."""
        aliases: List[str] = []
        acronyms: List[str] = []
        for show in shows:
            aliases.extend(a for a in show.aliases if a not in aliases)
            acronyms.extend(a for a in show.acronyms if a not in acronyms)
        return cls(aliases, acronyms)

    def extract(self, title: Optional[str]) -> Optional[int]:
        """
        Return the episode number named in ``title``, or None.

        Args:
            title: Episode title text

        Returns:
            First captured number of the first matching rule
        """
        if not title:
            return None

        for rule in self.rules:
            match = rule.search(title)
            if match:
                return int(match.group(1), 10)
        return None


_default_extractor: Optional[EpisodeNumberExtractor] = None


def get_default_extractor() -> EpisodeNumberExtractor:
    """Extractor built from the built-in show configuration."""
    global _default_extractor
    if _default_extractor is None:
        shows = [show for feed in default_feeds() for show in feed.shows]
        _default_extractor = EpisodeNumberExtractor.for_shows(shows)
    return _default_extractor


def extract_episode_number(
    title: Optional[str],
    extractor: Optional[EpisodeNumberExtractor] = None,
) -> Optional[int]:
    """
    Extract an episode number from a title.

    Args:
        title: Episode title text
        extractor: Rules to use (built-in show rules if None)

    Returns:
        Episode number or None
    """
    return (extractor or get_default_extractor()).extract(title)
