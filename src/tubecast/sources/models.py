"""Data models for records returned by video catalog sources."""

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


class VideoRecord(BaseModel):
    """Metadata for one video as reported by the catalog source.

    Fields mirror the source's info dictionary. Nothing is required here;
    presence and shape are checked when the record is normalized.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    title: str | None = None
    duration: Any = None
    upload_date: Any = None
    uploader: str | None = None
    webpage_url: str | None = None
    description: str | None = None

    @classmethod
    def from_info(cls, info: dict[str, Any]) -> "VideoRecord":
        """Build a record from a yt-dlp info dictionary."""
        return cls.model_validate(info)


class VideoSource(Protocol):
    """Anything that can list a channel's recent videos, newest first."""

    def fetch(self, channel_id: str) -> list[VideoRecord]: ...
