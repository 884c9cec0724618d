"""Custom exceptions for Tubecast."""

from typing import Any, Literal

FieldSource = Literal["feed_entry", "video_record"]


class TubecastError(Exception):
    """Base exception for all Tubecast errors."""

    pass


class ConfigError(TubecastError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class ChannelNotFoundError(ConfigError):
    """Channel not found in configuration."""

    pass


class DuplicateChannelError(ConfigError):
    """Channel already exists."""

    pass


class NormalizationError(TubecastError):
    """A feed entry or video record could not be turned into an Episode."""

    def __init__(self, message: str, field: str, source: FieldSource) -> None:
        super().__init__(message)
        self.field = field
        self.source = source


class MissingFieldError(NormalizationError):
    """A required field is absent."""

    def __init__(self, field: str, source: FieldSource, item_id: str | None = None) -> None:
        where = f" (id={item_id})" if item_id else ""
        super().__init__(f"Missing required field '{field}' in {source}{where}", field, source)
        self.item_id = item_id


class MalformedFieldError(NormalizationError):
    """A field is present but does not have the expected shape."""

    def __init__(
        self,
        field: str,
        raw_value: Any,
        source: FieldSource = "video_record",
        item_id: str | None = None,
    ) -> None:
        where = f" (id={item_id})" if item_id else ""
        super().__init__(
            f"Malformed field '{field}' in {source}{where}: {raw_value!r}", field, source
        )
        self.raw_value = raw_value
        self.item_id = item_id


class InconsistentFeedError(TubecastError):
    """The existing feed cannot be extended without guessing."""

    pass


class ExternalSourceError(TubecastError):
    """The video catalog could not be fetched."""

    pass


class RepositoryError(TubecastError):
    """Feed documents could not be loaded or saved."""

    pass


class FeedNotFoundError(RepositoryError):
    """No feed document exists under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Feed '{name}' not found")
        self.name = name


class FeedParseError(RepositoryError):
    """A stored feed document is not well-formed RSS."""

    pass
