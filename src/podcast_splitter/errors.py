"""Custom exceptions for the podcast splitter."""


class SplitterError(Exception):
    """Base exception for all podcast splitter errors."""

    pass


class ConfigError(SplitterError):
    """Invalid or missing feed/show configuration."""

    pass


class FeedError(SplitterError):
    """Source feed could not be obtained or decoded."""

    pass


class FeedFetchError(FeedError):
    """Download of a source feed failed."""

    pass


class FeedParseError(FeedError):
    """Source feed is not a well-formed RSS document."""

    pass
