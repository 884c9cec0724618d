"""Synchronize a channel's feed with its latest videos.

One run loads the feed, fetches the channel's recent videos, merges the new
ones in and writes the whole feed back once. Nothing is written if any step
fails, so an interrupted run leaves the previous feed intact.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field

from tubecast.config.schema import ChannelConfig, InvalidCandidatePolicy
from tubecast.feeds.document import FeedDocument
from tubecast.feeds.merge import merge_new_episodes, order_newest_first
from tubecast.feeds.models import Episode
from tubecast.feeds.normalizer import episode_from_feed_item, episode_from_video
from tubecast.feeds.repository import FeedRepository
from tubecast.feeds.serializer import append_episodes, new_document
from tubecast.sources.models import VideoSource
from tubecast.utils.errors import FeedNotFoundError, NormalizationError

logger = logging.getLogger(__name__)


class SkippedCandidate(BaseModel):
    """A fetched video that could not be turned into an episode."""

    video_id: str | None
    field: str
    reason: str


class SyncResult(BaseModel):
    """Outcome of one synchronization run."""

    model_config = ConfigDict(frozen=True)

    feed_name: str
    new_episodes: list[Episode] = Field(default_factory=list)
    skipped: list[SkippedCandidate] = Field(default_factory=list)
    created: bool = False
    saved: bool = False


class FeedSynchronizer:
    """Runs the load → fetch → merge → save cycle for one channel.

    Example:
        >>> synchronizer = FeedSynchronizer(
        ...     "my-channel", channel, YouTubeChannelSource(), FeedRepository(feeds_dir)
        ... )
        >>> result = synchronizer.run()
        >>> len(result.new_episodes)
        2
    """

    def __init__(
        self,
        feed_name: str,
        channel: ChannelConfig,
        source: VideoSource,
        repository: FeedRepository,
        on_invalid_candidate: InvalidCandidatePolicy = "skip",
    ) -> None:
        """Initialize the synchronizer.

        Args:
            feed_name: Name the feed is stored under
            channel: Channel configuration (metadata and publishing options)
            source: Video catalog to fetch candidates from
            repository: Where the feed document lives
            on_invalid_candidate: ``"skip"`` drops a video that fails
                normalization and carries on; ``"abort"`` fails the run
        """
        self.feed_name = feed_name
        self.channel = channel
        self.source = source
        self.repository = repository
        self.on_invalid_candidate = on_invalid_candidate

    def _load_document(self) -> tuple[FeedDocument, bool]:
        try:
            return self.repository.load(self.feed_name), False
        except FeedNotFoundError:
            logger.info(f"No feed named '{self.feed_name}' yet; starting a new one")
            return new_document(self.channel.channel_metadata()), True

    def _normalize_candidates(self) -> tuple[list[Episode], list[SkippedCandidate]]:
        records = self.source.fetch(self.channel.channel_id)
        media_base_url = str(self.channel.media_base_url)

        candidates: list[Episode] = []
        skipped: list[SkippedCandidate] = []
        for record in records:
            try:
                candidates.append(episode_from_video(record, media_base_url))
            except NormalizationError as e:
                if self.on_invalid_candidate == "abort":
                    raise
                logger.warning(f"Skipping video {record.id}: {e}")
                skipped.append(SkippedCandidate(video_id=record.id, field=e.field, reason=str(e)))

        return candidates, skipped

    def run(self, dry_run: bool = False) -> SyncResult:
        """Run one synchronization.

        Args:
            dry_run: Compute the new episodes without writing the feed

        Returns:
            SyncResult describing what was (or would be) added

        Raises:
            NormalizationError: If an existing entry is corrupt, or a candidate
                is invalid under the ``"abort"`` policy
            InconsistentFeedError: If the newest existing entry has no number
            ExternalSourceError: If the video catalog cannot be fetched
            RepositoryError: If the feed cannot be loaded or saved
        """
        document, created = self._load_document()

        # Existing entries must all be valid: a bad one means the feed is corrupt
        existing = [episode_from_feed_item(item) for item in document.items]
        logger.debug(f"Feed '{self.feed_name}' has {len(existing)} episodes")

        candidates, skipped = self._normalize_candidates()
        new_episodes = merge_new_episodes(existing, order_newest_first(candidates))
        logger.info(
            f"Found {len(new_episodes)} new of {len(candidates)} fetched videos "
            f"for '{self.feed_name}'"
        )

        append_episodes(document, new_episodes, self.channel.item_options())
        document.apply_metadata(self.channel.channel_metadata())

        saved = False
        if (new_episodes or created) and not dry_run:
            path = self.repository.save(self.feed_name, document)
            logger.info(f"Wrote feed '{self.feed_name}' to {path}")
            saved = True

        return SyncResult(
            feed_name=self.feed_name,
            new_episodes=new_episodes,
            skipped=skipped,
            created=created,
            saved=saved,
        )
