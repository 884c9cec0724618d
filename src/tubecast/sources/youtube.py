"""Fetch a channel's recent videos using yt-dlp."""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError, ExtractorError

from tubecast.sources.models import VideoRecord
from tubecast.utils.errors import ExternalSourceError
from tubecast.utils.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)

DEFAULT_MAX_VIDEOS = 20
DEFAULT_SOCKET_TIMEOUT = 30


def channel_url(channel_id: str) -> str:
    """Return the videos-tab URL for a channel id, ``@handle`` or URL.

    Example:
        >>> channel_url("UCNmv1Cmjm3Hk8Vc9kIgv0AQ")
        'https://www.youtube.com/channel/UCNmv1Cmjm3Hk8Vc9kIgv0AQ/videos'
    """
    channel_id = channel_id.strip()
    if channel_id.startswith(("http://", "https://")):
        return channel_id
    if channel_id.startswith("@"):
        return f"https://www.youtube.com/{channel_id}/videos"
    return f"https://www.youtube.com/channel/{channel_id}/videos"


def _flatten_entries(entries: Iterable[dict[str, Any] | None] | None) -> Iterator[dict[str, Any]]:
    """Yield video entries, descending into nested tab playlists."""
    for entry in entries or []:
        if entry is None:
            logger.warning("Skipping unavailable video in channel listing")
            continue
        if entry.get("_type") == "playlist" or "entries" in entry:
            yield from _flatten_entries(entry.get("entries"))
        else:
            yield entry


class YouTubeChannelSource:
    """Newest-first video metadata for a channel.

    Usage:
        source = YouTubeChannelSource(max_videos=20)
        records = source.fetch("UCNmv1Cmjm3Hk8Vc9kIgv0AQ")
    """

    def __init__(
        self,
        max_videos: int = DEFAULT_MAX_VIDEOS,
        socket_timeout: int = DEFAULT_SOCKET_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            max_videos: Maximum number of videos returned per fetch
            socket_timeout: yt-dlp socket timeout in seconds
            retry_config: Backoff settings for transient download errors
        """
        self.max_videos = max_videos
        self.socket_timeout = socket_timeout
        self.retry_config = retry_config or RetryConfig()

    def _ydl_opts(self) -> dict[str, Any]:
        return {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "playlistend": self.max_videos,
            "socket_timeout": self.socket_timeout,
        }

    def _extract_info(self, url: str) -> dict[str, Any]:
        with YoutubeDL(self._ydl_opts()) as ydl:
            info = ydl.extract_info(url, download=False)
            if not info:
                raise ExternalSourceError(f"No information returned for {url}")
            return info

    def fetch(self, channel_id: str) -> list[VideoRecord]:
        """Fetch the channel's most recent videos, newest first.

        Args:
            channel_id: Channel id, ``@handle`` or channel URL

        Returns:
            Up to ``max_videos`` video records

        Raises:
            ExternalSourceError: If the catalog cannot be retrieved
        """
        url = channel_url(channel_id)
        logger.info(f"Fetching up to {self.max_videos} videos from {url}")

        extract = with_retry((DownloadError,), self.retry_config)(self._extract_info)
        try:
            info = extract(url)
        except DownloadError as e:
            raise ExternalSourceError(f"Failed to fetch videos from {url}: {e}") from e
        except ExtractorError as e:
            raise ExternalSourceError(
                f"Failed to extract channel information from {url}: {e}"
            ) from e

        if "entries" in info:
            entries = list(_flatten_entries(info["entries"]))
        else:
            entries = [info]

        records = []
        for entry in entries[: self.max_videos]:
            try:
                records.append(VideoRecord.from_info(entry))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable video entry {entry.get('id')!r}: {e}")

        logger.debug(f"Fetched {len(records)} video records from {url}")
        return records
