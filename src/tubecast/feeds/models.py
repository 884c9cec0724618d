"""Data models for episodes, feed items and channel metadata."""

import html
from datetime import datetime, timezone
from email.utils import format_datetime

from pydantic import BaseModel, ConfigDict, Field

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"


def format_duration(seconds: int) -> str:
    """Render a duration as zero-padded ``HH:MM:SS``.

    Example:
        >>> format_duration(3725)
        '01:02:05'
    """
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def render_description(text: str | None) -> str:
    """Convert free text into escaped paragraph markup, one ``<p>`` per line.

    Both LF and CRLF line endings are accepted.
    """
    if not text:
        return ""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    return "".join(f"<p>{html.escape(line, quote=False)}</p>" for line in lines)


def format_pub_date(value: datetime) -> str:
    """Format a timestamp the way RSS ``pubDate`` expects (RFC 2822, ``+0000``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc))


class Episode(BaseModel):
    """Canonical representation of one podcast episode.

    Built once per run from either an existing feed entry or a fetched video
    record. The only change an episode ever sees is the assignment of its
    episode number, which returns a new instance.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    episode_number: int | None = Field(default=None, ge=1)
    title: str = Field(..., min_length=1)
    duration: int = Field(..., ge=0, description="Duration in seconds")
    author: str = Field(..., min_length=1)
    publish_date: datetime
    canonical_link: str
    description: str = ""

    @property
    def duration_display(self) -> str:
        """Duration as ``HH:MM:SS``."""
        return format_duration(self.duration)

    @property
    def pub_date_text(self) -> str:
        """Publish date in feed-native text form."""
        return format_pub_date(self.publish_date)

    def with_episode_number(self, number: int) -> "Episode":
        """Return a copy of this episode numbered ``number``."""
        if number < 1:
            raise ValueError(f"Episode numbers start at 1, got {number}")
        return self.model_copy(update={"episode_number": number})


class ExtensionElement(BaseModel):
    """A namespaced element added to an item beyond the known vocabulary."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    value: str

    @property
    def tag(self) -> str:
        """Clark-notation tag, e.g. ``{http://...}title``."""
        return f"{{{self.namespace}}}{self.name}"


class Enclosure(BaseModel):
    """Downloadable media attached to a feed item."""

    url: str | None = None
    length: str | None = None
    mime_type: str | None = None


class ITunesItem(BaseModel):
    """iTunes podcast fields carried by a feed item."""

    episode: str | None = None
    author: str | None = None
    duration: str | None = None
    block: str | None = None


class FeedItem(BaseModel):
    """One ``<item>`` of a feed, as read from or written to a document.

    Every field is optional because existing documents are loosely structured;
    validation happens when an item is normalized into an ``Episode``.
    """

    guid: str | None = None
    guid_is_permalink: bool = False
    title: str | None = None
    link: str | None = None
    description: str | None = None
    pub_date: str | None = None
    author: str | None = None
    enclosure: Enclosure | None = None
    itunes: ITunesItem = Field(default_factory=ITunesItem)
    extensions: list[ExtensionElement] = Field(default_factory=list)

    def extension(self, namespace: str, name: str) -> ExtensionElement | None:
        """Return the first extension element matching namespace and name."""
        for element in self.extensions:
            if element.namespace == namespace and element.name == name:
                return element
        return None


class ChannelMetadata(BaseModel):
    """Channel-level fields of a feed document."""

    title: str
    link: str
    description: str
    author: str | None = None
    language: str | None = None
    image_url: str | None = None
