"""Episode normalization, merging and feed serialization for Tubecast."""

from tubecast.feeds.document import FeedDocument
from tubecast.feeds.merge import merge_new_episodes, order_newest_first
from tubecast.feeds.models import ChannelMetadata, Episode, ExtensionElement, FeedItem
from tubecast.feeds.normalizer import episode_from_feed_item, episode_from_video
from tubecast.feeds.repository import FeedRepository
from tubecast.feeds.serializer import ItemOptions, append_episodes, episode_to_item, new_document

__all__ = [
    "ChannelMetadata",
    "Episode",
    "ExtensionElement",
    "FeedDocument",
    "FeedItem",
    "FeedRepository",
    "ItemOptions",
    "append_episodes",
    "episode_from_feed_item",
    "episode_from_video",
    "episode_to_item",
    "merge_new_episodes",
    "new_document",
    "order_newest_first",
]
