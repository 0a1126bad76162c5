class DigestError(Exception):
    """Base class for errors raised by rss_digest."""


class FeedFetchError(DigestError):
    """Raised when an RSS/Atom feed cannot be fetched."""


class FeedParseError(DigestError):
    """Raised when a fetched feed body is not a usable RSS/Atom document."""


class ConfigError(DigestError):
    """Raised when a configuration file is malformed."""
