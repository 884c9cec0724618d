"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl

from tubecast.feeds.models import ChannelMetadata
from tubecast.feeds.serializer import AUDIO_MIME_TYPE, ItemOptions
from tubecast.utils.paths import get_default_feeds_dir

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
InvalidCandidatePolicy = Literal["skip", "abort"]


class SourceConfig(BaseModel):
    """Video catalog fetch settings."""

    max_videos: int = Field(default=20, ge=1)
    socket_timeout: int = Field(default=30, ge=1)
    max_attempts: int = Field(default=3, ge=1)


class ChannelConfig(BaseModel):
    """Configuration for one channel and the feed generated from it."""

    channel_id: str = Field(..., min_length=1)
    title: str
    link: HttpUrl
    description: str
    author: str
    media_base_url: HttpUrl  # Where the extracted audio files are served
    language: str | None = None
    image_url: HttpUrl | None = None
    block: bool = True  # Keep episodes out of podcast directories
    mime_type: str = AUDIO_MIME_TYPE

    def channel_metadata(self) -> ChannelMetadata:
        return ChannelMetadata(
            title=self.title,
            link=str(self.link),
            description=self.description,
            author=self.author,
            language=self.language,
            image_url=str(self.image_url) if self.image_url else None,
        )

    def item_options(self) -> ItemOptions:
        return ItemOptions(mime_type=self.mime_type, block=self.block)


class GlobalConfig(BaseModel):
    """Global Tubecast configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"
    feeds_dir: Path = Field(default_factory=get_default_feeds_dir)
    on_invalid_candidate: InvalidCandidatePolicy = "skip"
    source: SourceConfig = Field(default_factory=SourceConfig)


class Channels(BaseModel):
    """Collection of configured channels, keyed by feed name."""

    channels: dict[str, ChannelConfig] = Field(default_factory=dict)
