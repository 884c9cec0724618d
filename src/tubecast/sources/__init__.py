"""Video catalog sources for Tubecast."""

from tubecast.sources.models import VideoRecord, VideoSource
from tubecast.sources.youtube import YouTubeChannelSource, channel_url

__all__ = ["VideoRecord", "VideoSource", "YouTubeChannelSource", "channel_url"]
