"""Normalize feed items and video records into canonical episodes.

Both constructors either return a valid ``Episode`` or raise a
``NormalizationError`` naming the offending field. There are no silent
defaults for required fields.
"""

import math
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from tubecast.feeds.models import Episode, FeedItem, render_description
from tubecast.sources.models import VideoRecord
from tubecast.utils.errors import FieldSource, MalformedFieldError, MissingFieldError

UPLOAD_DATE_PATTERN = re.compile(r"^\d{8}$")


def _require(value: str | None, field: str, source: FieldSource, item_id: str | None) -> str:
    if value is None or not str(value).strip():
        raise MissingFieldError(field, source, item_id)
    return value


def _parse_int(raw: str, field: str, item_id: str | None, minimum: int) -> int:
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise MalformedFieldError(field, raw, "feed_entry", item_id) from e
    if value < minimum:
        raise MalformedFieldError(field, raw, "feed_entry", item_id)
    return value


def parse_duration_seconds(raw: Any, item_id: str | None = None) -> int:
    """Interpret a video record's duration as whole seconds.

    Accepts integers, floats (truncated) and digit strings.

    Raises:
        MalformedFieldError: If the value is not a non-negative number
    """
    if isinstance(raw, bool):
        raise MalformedFieldError("duration", raw, "video_record", item_id)
    if isinstance(raw, int):
        seconds = raw
    elif isinstance(raw, float):
        if not math.isfinite(raw) or raw < 0:
            raise MalformedFieldError("duration", raw, "video_record", item_id)
        seconds = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        try:
            seconds = int(raw.strip())
        except ValueError as e:
            # isdigit() also accepts digits int() cannot read, such as "²"
            raise MalformedFieldError("duration", raw, "video_record", item_id) from e
    else:
        raise MalformedFieldError("duration", raw, "video_record", item_id)

    if seconds < 0:
        raise MalformedFieldError("duration", raw, "video_record", item_id)
    return seconds


def parse_upload_date(raw: Any, item_id: str | None = None) -> datetime:
    """Parse a ``YYYYMMDD`` upload date as midnight UTC.

    Raises:
        MalformedFieldError: If the value is not a valid eight-digit date
    """
    if not isinstance(raw, str) or not UPLOAD_DATE_PATTERN.match(raw):
        raise MalformedFieldError("upload_date", raw, "video_record", item_id)
    try:
        parsed = datetime.strptime(raw, "%Y%m%d")
    except ValueError as e:
        raise MalformedFieldError("upload_date", raw, "video_record", item_id) from e
    return parsed.replace(tzinfo=timezone.utc)


def parse_pub_date(raw: str, item_id: str | None = None) -> datetime:
    """Parse an RFC 2822 ``pubDate``; naive values are taken as UTC."""
    try:
        parsed = parsedate_to_datetime(raw.strip())
    except (TypeError, ValueError, IndexError) as e:
        raise MalformedFieldError("pub_date", raw, "feed_entry", item_id) from e
    if parsed is None:
        raise MalformedFieldError("pub_date", raw, "feed_entry", item_id)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def episode_from_feed_item(item: FeedItem) -> Episode:
    """Rebuild an episode from an already published feed item.

    Args:
        item: Item parsed from the existing feed document

    Returns:
        Episode carrying the item's published number

    Raises:
        MissingFieldError: If a required field is absent
        MalformedFieldError: If a numeric or date field cannot be parsed
    """
    source: FieldSource = "feed_entry"
    item_id = _require(item.guid, "id", source, None)

    if item.enclosure is None:
        raise MissingFieldError("enclosure", source, item_id)
    source_url = _require(item.enclosure.url, "enclosure_url", source, item_id)
    length = _require(item.enclosure.length, "enclosure_length", source, item_id)
    duration = _parse_int(length, "enclosure_length", item_id, minimum=0)

    link = _require(item.link, "link", source, item_id)
    title = _require(item.title, "title", source, item_id)
    # Display duration is derived from the enclosure length; the text only has to exist.
    _require(item.itunes.duration, "itunes_duration", source, item_id)
    episode_text = _require(item.itunes.episode, "episode_number", source, item_id)
    episode_number = _parse_int(episode_text, "episode_number", item_id, minimum=1)
    author = _require(item.itunes.author or item.author, "author", source, item_id)
    pub_date = parse_pub_date(_require(item.pub_date, "pub_date", source, item_id), item_id)
    if item.description is None:
        raise MissingFieldError("description", source, item_id)

    return Episode(
        id=item_id,
        source_url=source_url,
        episode_number=episode_number,
        title=title,
        duration=duration,
        author=author,
        publish_date=pub_date,
        canonical_link=link,
        description=item.description,
    )


def episode_from_video(record: VideoRecord, media_base_url: str) -> Episode:
    """Build an unnumbered episode from a freshly fetched video record.

    Args:
        record: Video metadata from the catalog source
        media_base_url: Base location the audio files are served from

    Returns:
        Episode with ``episode_number`` unset

    Raises:
        MissingFieldError: If a required field is absent
        MalformedFieldError: If duration or upload date cannot be parsed

    Example:
        >>> record = VideoRecord(id="abc", duration=61, upload_date="20221006",
        ...                      title="T", uploader="U",
        ...                      webpage_url="https://www.youtube.com/watch?v=abc")
        >>> episode_from_video(record, "https://media.example.com").source_url
        'https://media.example.com/abc'
    """
    source: FieldSource = "video_record"
    video_id = _require(record.id, "id", source, None)

    if record.duration is None:
        raise MissingFieldError("duration", source, video_id)
    duration = parse_duration_seconds(record.duration, video_id)

    if record.upload_date is None:
        raise MissingFieldError("upload_date", source, video_id)
    publish_date = parse_upload_date(record.upload_date, video_id)

    title = _require(record.title, "title", source, video_id)
    author = _require(record.uploader, "uploader", source, video_id)
    link = _require(record.webpage_url, "webpage_url", source, video_id)

    return Episode(
        id=video_id,
        source_url=f"{media_base_url.rstrip('/')}/{video_id}",
        episode_number=None,
        title=title,
        duration=duration,
        author=author,
        publish_date=publish_date,
        canonical_link=link,
        description=render_description(record.description),
    )

