"""Shared fixtures for Tubecast tests."""

from datetime import datetime, timezone
from typing import Any

import pytest

from tubecast.config.schema import ChannelConfig
from tubecast.feeds.models import Episode
from tubecast.sources.models import VideoRecord

MEDIA_BASE_URL = "https://media.example.com"


def make_episode(
    episode_id: str,
    episode_number: int | None = None,
    day: int = 1,
    **overrides: Any,
) -> Episode:
    """Build a valid episode published on ``2022-10-<day>``."""
    fields: dict[str, Any] = {
        "id": episode_id,
        "source_url": f"{MEDIA_BASE_URL}/{episode_id}",
        "episode_number": episode_number,
        "title": f"Episode {episode_id}",
        "duration": 3725,
        "author": "Test Uploader",
        "publish_date": datetime(2022, 10, day, tzinfo=timezone.utc),
        "canonical_link": f"https://www.youtube.com/watch?v={episode_id}",
        "description": "<p>About this episode</p>",
    }
    fields.update(overrides)
    return Episode(**fields)


def make_video_info(video_id: str, upload_date: str = "20221006", **overrides: Any) -> dict[str, Any]:
    """Build a yt-dlp style info dictionary for one video."""
    info: dict[str, Any] = {
        "id": video_id,
        "title": f"Video {video_id}",
        "duration": 3725,
        "upload_date": upload_date,
        "uploader": "Test Uploader",
        "webpage_url": f"https://www.youtube.com/watch?v={video_id}",
        "description": "First line\nSecond & last line",
        "view_count": 1234,
    }
    info.update(overrides)
    return info


@pytest.fixture
def video_record() -> VideoRecord:
    """A complete video record."""
    return VideoRecord.from_info(make_video_info("abc123"))


@pytest.fixture
def channel_config() -> ChannelConfig:
    """A channel configuration with default publishing options."""
    return ChannelConfig(
        channel_id="UCNmv1Cmjm3Hk8Vc9kIgv0AQ",
        title="Test Podcast",
        link="https://example.com",  # type: ignore
        description="A test feed",
        author="Test Author",
        media_base_url=MEDIA_BASE_URL,  # type: ignore
    )


@pytest.fixture
def episode_factory():
    """Factory for episodes (see ``make_episode``)."""
    return make_episode


@pytest.fixture
def video_info_factory():
    """Factory for yt-dlp info dictionaries (see ``make_video_info``)."""
    return make_video_info
