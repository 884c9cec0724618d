"""Serialize episodes into RSS items and compose feed documents."""

from collections.abc import Sequence

from lxml import etree
from pydantic import BaseModel

from tubecast.feeds.document import NSMAP, FeedDocument
from tubecast.feeds.models import (
    ITUNES_NS,
    ChannelMetadata,
    Enclosure,
    Episode,
    ExtensionElement,
    FeedItem,
    ITunesItem,
)

AUDIO_MIME_TYPE = "audio/m4a"


class ItemOptions(BaseModel):
    """Publishing options applied to every serialized item."""

    mime_type: str = AUDIO_MIME_TYPE
    block: bool = True


def title_extension(title: str) -> ExtensionElement:
    """``<itunes:title>``, which some clients read instead of ``<title>``."""
    return ExtensionElement(namespace=ITUNES_NS, name="title", value=title)


def episode_to_item(episode: Episode, options: ItemOptions | None = None) -> FeedItem:
    """Map an episode onto the feed item that publishes it.

    Args:
        episode: Episode to publish
        options: Publishing options (MIME type, directory block flag)

    Returns:
        FeedItem ready to be written with ``item_to_element``
    """
    options = options or ItemOptions()
    return FeedItem(
        guid=episode.id,
        guid_is_permalink=False,
        title=episode.title,
        link=episode.canonical_link,
        description=episode.description,
        pub_date=episode.pub_date_text,
        enclosure=Enclosure(
            url=episode.source_url,
            length=str(episode.duration),
            mime_type=options.mime_type,
        ),
        itunes=ITunesItem(
            episode=str(episode.episode_number) if episode.episode_number is not None else None,
            author=episode.author,
            duration=episode.duration_display,
            block="Yes" if options.block else None,
        ),
        extensions=[title_extension(episode.title)],
    )


def _sub(parent: etree._Element, tag: str, text: str | None) -> None:
    if text is None:
        return
    etree.SubElement(parent, tag).text = text


def item_to_element(item: FeedItem) -> etree._Element:
    """Build the ``<item>`` element for a feed item."""
    element = etree.Element("item", nsmap=NSMAP)

    _sub(element, "title", item.title)
    _sub(element, "link", item.link)
    _sub(element, "description", item.description)
    _sub(element, "author", item.author)

    if item.enclosure is not None:
        enclosure = etree.SubElement(element, "enclosure")
        for attribute, value in (
            ("url", item.enclosure.url),
            ("length", item.enclosure.length),
            ("type", item.enclosure.mime_type),
        ):
            if value is not None:
                enclosure.set(attribute, value)

    if item.guid is not None:
        guid = etree.SubElement(element, "guid")
        guid.set("isPermaLink", "true" if item.guid_is_permalink else "false")
        guid.text = item.guid

    _sub(element, "pubDate", item.pub_date)

    for field in ("episode", "author", "duration", "block"):
        _sub(element, f"{{{ITUNES_NS}}}{field}", getattr(item.itunes, field))

    for extension in item.extensions:
        _sub(element, extension.tag, extension.value)

    return element


def new_document(metadata: ChannelMetadata) -> FeedDocument:
    """Create an empty feed carrying the given channel metadata."""
    document = FeedDocument.empty()
    document.apply_metadata(metadata)
    return document


def append_episodes(
    document: FeedDocument,
    episodes: Sequence[Episode],
    options: ItemOptions | None = None,
) -> list[FeedItem]:
    """Add numbered episodes to a document.

    Args:
        document: Feed to extend; existing items are left untouched
        episodes: New episodes, oldest first (as returned by the merge)
        options: Publishing options

    Returns:
        The feed items that were written
    """
    items = [episode_to_item(episode, options) for episode in episodes]
    document.insert_items(item_to_element(item) for item in items)
    return items
