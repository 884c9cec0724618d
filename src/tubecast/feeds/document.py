"""RSS feed documents backed by lxml.

A ``FeedDocument`` keeps the parsed XML tree as-is, so items that were
published by earlier runs are written back byte-for-byte equivalent. New
items are only ever inserted; nothing already in the tree is rewritten.
"""

from collections.abc import Iterable

from lxml import etree

from tubecast.feeds.models import (
    CONTENT_NS,
    ITUNES_NS,
    ChannelMetadata,
    Enclosure,
    ExtensionElement,
    FeedItem,
    ITunesItem,
)
from tubecast.utils.errors import FeedParseError

NSMAP = {"itunes": ITUNES_NS, "content": CONTENT_NS}

# iTunes item fields mapped onto ITunesItem rather than kept as extensions
_ITUNES_ITEM_FIELDS = ("episode", "author", "duration", "block")


def _itunes(name: str) -> str:
    return f"{{{ITUNES_NS}}}{name}"


def _split_tag(tag: str) -> tuple[str | None, str]:
    if tag.startswith("{"):
        namespace, _, name = tag[1:].partition("}")
        return namespace, name
    return None, tag


def element_to_item(element: etree._Element) -> FeedItem:
    """Read an ``<item>`` element into a ``FeedItem``."""
    guid_el = element.find("guid")
    guid = guid_el.text.strip() if guid_el is not None and guid_el.text else None
    is_permalink = (
        guid_el is not None and guid_el.get("isPermaLink", "true").lower() != "false"
    )

    enclosure = None
    enclosure_el = element.find("enclosure")
    if enclosure_el is not None:
        enclosure = Enclosure(
            url=enclosure_el.get("url"),
            length=enclosure_el.get("length"),
            mime_type=enclosure_el.get("type"),
        )

    itunes = ITunesItem(
        **{field: element.findtext(_itunes(field)) for field in _ITUNES_ITEM_FIELDS}
    )

    extensions = []
    for child in element:
        if not isinstance(child.tag, str):
            continue
        namespace, name = _split_tag(child.tag)
        if namespace is None:
            continue
        if namespace == ITUNES_NS and name in _ITUNES_ITEM_FIELDS:
            continue
        extensions.append(
            ExtensionElement(namespace=namespace, name=name, value=child.text or "")
        )

    return FeedItem(
        guid=guid,
        guid_is_permalink=is_permalink,
        title=element.findtext("title"),
        link=element.findtext("link"),
        description=element.findtext("description"),
        pub_date=element.findtext("pubDate"),
        author=element.findtext("author"),
        enclosure=enclosure,
        itunes=itunes,
        extensions=extensions,
    )


class FeedDocument:
    """An RSS 2.0 document with the iTunes podcast extension.

    Example:
        >>> document = FeedDocument.from_bytes(path.read_bytes())
        >>> [item.guid for item in document.items]
        ['newest-id', 'older-id']
    """

    def __init__(self, root: etree._Element) -> None:
        """Wrap an ``<rss>`` root element.

        Args:
            root: Parsed ``<rss>`` element containing a ``<channel>``

        Raises:
            FeedParseError: If the element is not an RSS document
        """
        if root.tag != "rss":
            raise FeedParseError(f"Expected <rss> root element, found <{root.tag}>")
        if root.find("channel") is None:
            raise FeedParseError("RSS document has no <channel> element")
        self.root = self._with_namespaces(root)

    @classmethod
    def from_bytes(cls, data: bytes) -> "FeedDocument":
        """Parse a serialized feed.

        Raises:
            FeedParseError: If the data is not well-formed RSS
        """
        parser = etree.XMLParser(
            remove_blank_text=True, resolve_entities=False, no_network=True
        )
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as e:
            raise FeedParseError(f"Feed is not well-formed XML: {e}") from e
        return cls(root)

    @classmethod
    def empty(cls) -> "FeedDocument":
        """Create a document with an empty channel and the podcast namespaces."""
        root = etree.Element("rss", nsmap=NSMAP)
        root.set("version", "2.0")
        etree.SubElement(root, "channel")
        return cls(root)

    @staticmethod
    def _with_namespaces(root: etree._Element) -> etree._Element:
        """Declare the podcast namespaces on the root, rebuilding it if needed."""
        missing = {
            prefix: uri for prefix, uri in NSMAP.items() if uri not in root.nsmap.values()
        }
        if not missing:
            return root

        nsmap = dict(root.nsmap)
        for prefix, uri in missing.items():
            if prefix in nsmap:
                continue
            nsmap[prefix] = uri
        new_root = etree.Element(root.tag, nsmap=nsmap)
        new_root.text = root.text
        new_root.tail = root.tail
        for key, value in root.attrib.items():
            new_root.set(key, value)
        for child in root:
            new_root.append(child)
        return new_root

    @property
    def channel(self) -> etree._Element:
        return self.root.find("channel")

    @property
    def item_elements(self) -> list[etree._Element]:
        return self.channel.findall("item")

    @property
    def items(self) -> list[FeedItem]:
        """Items in document order (newest first)."""
        return [element_to_item(element) for element in self.item_elements]

    @property
    def metadata(self) -> ChannelMetadata:
        """Channel-level metadata currently in the document."""
        channel = self.channel
        image = channel.find(_itunes("image"))
        return ChannelMetadata(
            title=channel.findtext("title") or "",
            link=channel.findtext("link") or "",
            description=channel.findtext("description") or "",
            author=channel.findtext(_itunes("author")),
            language=channel.findtext("language"),
            image_url=image.get("href") if image is not None else None,
        )

    def apply_metadata(self, metadata: ChannelMetadata) -> None:
        """Write channel-level metadata, leaving items untouched."""
        self._set_channel_text("title", metadata.title)
        self._set_channel_text("link", metadata.link)
        self._set_channel_text("description", metadata.description)
        self._set_channel_text("language", metadata.language)
        self._set_channel_text(_itunes("author"), metadata.author)

        image = self.channel.find(_itunes("image"))
        if metadata.image_url is None:
            if image is not None:
                self.channel.remove(image)
        else:
            if image is None:
                image = self._new_channel_child(_itunes("image"))
            image.set("href", metadata.image_url)

    def _set_channel_text(self, tag: str, value: str | None) -> None:
        element = self.channel.find(tag)
        if value is None:
            if element is not None:
                self.channel.remove(element)
            return
        if element is None:
            element = self._new_channel_child(tag)
        element.text = value

    def _new_channel_child(self, tag: str) -> etree._Element:
        # Channel fields go ahead of the items
        items = self.item_elements
        element = etree.SubElement(self.channel, tag)
        if items:
            self.channel.insert(self.channel.index(items[0]), element)
        return element

    def insert_items(self, elements: Iterable[etree._Element]) -> None:
        """Insert new ``<item>`` elements ahead of the existing ones.

        ``elements`` must be oldest-first; each is placed above the previous
        one so the document stays newest-first.
        """
        items = self.item_elements
        position = self.channel.index(items[0]) if items else len(self.channel)
        for element in elements:
            self.channel.insert(position, element)

    def to_bytes(self) -> bytes:
        """Serialize as pretty-printed UTF-8 XML with a declaration."""
        return etree.tostring(
            self.root, xml_declaration=True, encoding="UTF-8", pretty_print=True
        )
