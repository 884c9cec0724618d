"""Tests for FeedDocument."""

import pytest
from lxml import etree

from tubecast.feeds.document import FeedDocument, element_to_item
from tubecast.feeds.models import ITUNES_NS, ChannelMetadata
from tubecast.feeds.serializer import append_episodes
from tubecast.utils.errors import FeedParseError

EXISTING_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Old Title</title>
    <link>https://old.example.com</link>
    <description>Old description</description>
    <itunes:author>Old Author</itunes:author>
    <item>
      <title>Second</title>
      <link>https://www.youtube.com/watch?v=v2</link>
      <description>&lt;p&gt;Two&lt;/p&gt;</description>
      <enclosure url="https://media.example.com/v2" length="120" type="audio/m4a"/>
      <guid isPermaLink="false">v2</guid>
      <pubDate>Fri, 07 Oct 2022 00:00:00 +0000</pubDate>
      <itunes:episode>2</itunes:episode>
      <itunes:author>Uploader</itunes:author>
      <itunes:duration>00:02:00</itunes:duration>
      <itunes:block>Yes</itunes:block>
      <itunes:title>Second</itunes:title>
      <custom>kept</custom>
    </item>
    <item>
      <title>First</title>
      <link>https://www.youtube.com/watch?v=v1</link>
      <description>&lt;p&gt;One&lt;/p&gt;</description>
      <enclosure url="https://media.example.com/v1" length="60" type="audio/m4a"/>
      <guid isPermaLink="false">v1</guid>
      <pubDate>Thu, 06 Oct 2022 00:00:00 +0000</pubDate>
      <itunes:episode>1</itunes:episode>
      <itunes:author>Uploader</itunes:author>
      <itunes:duration>00:01:00</itunes:duration>
    </item>
  </channel>
</rss>
"""


@pytest.fixture
def document() -> FeedDocument:
    return FeedDocument.from_bytes(EXISTING_FEED)


class TestParsing:
    """Tests for reading feeds."""

    def test_items_in_document_order(self, document: FeedDocument) -> None:
        assert [item.guid for item in document.items] == ["v2", "v1"]

    def test_item_fields(self, document: FeedDocument) -> None:
        item = document.items[0]

        assert item.title == "Second"
        assert item.link == "https://www.youtube.com/watch?v=v2"
        assert item.description == "<p>Two</p>"
        assert item.pub_date == "Fri, 07 Oct 2022 00:00:00 +0000"
        assert item.guid_is_permalink is False
        assert item.enclosure is not None
        assert item.enclosure.url == "https://media.example.com/v2"
        assert item.enclosure.length == "120"
        assert item.enclosure.mime_type == "audio/m4a"
        assert item.itunes.episode == "2"
        assert item.itunes.author == "Uploader"
        assert item.itunes.duration == "00:02:00"
        assert item.itunes.block == "Yes"

    def test_unmapped_itunes_elements_become_extensions(self, document: FeedDocument) -> None:
        item = document.items[0]

        title = item.extension(ITUNES_NS, "title")
        assert title is not None
        assert title.value == "Second"
        # Only namespaced children are extensions
        assert [e.name for e in item.extensions] == ["title"]

    def test_channel_metadata(self, document: FeedDocument) -> None:
        assert document.metadata == ChannelMetadata(
            title="Old Title",
            link="https://old.example.com",
            description="Old description",
            author="Old Author",
        )

    def test_guid_without_attribute_is_permalink(self) -> None:
        element = etree.fromstring(b"<item><guid>https://example.com/1</guid></item>")
        assert element_to_item(element).guid_is_permalink is True

    def test_invalid_xml(self) -> None:
        with pytest.raises(FeedParseError, match="well-formed"):
            FeedDocument.from_bytes(b"<rss><channel>")

    def test_wrong_root(self) -> None:
        with pytest.raises(FeedParseError, match="<rss>"):
            FeedDocument.from_bytes(b"<feed xmlns='http://www.w3.org/2005/Atom'/>")

    def test_missing_channel(self) -> None:
        with pytest.raises(FeedParseError, match="channel"):
            FeedDocument.from_bytes(b"<rss version='2.0'/>")

    def test_adds_missing_namespace_declarations(self) -> None:
        data = b"<rss version='2.0'><channel><title>t</title></channel></rss>"
        document = FeedDocument.from_bytes(data)

        assert document.root.nsmap["itunes"] == ITUNES_NS
        assert document.root.get("version") == "2.0"
        assert document.channel.findtext("title") == "t"


class TestMutation:
    """Tests for extending documents."""

    def test_existing_items_unchanged(self, document: FeedDocument, episode_factory) -> None:
        before = [etree.tostring(element) for element in document.item_elements]

        append_episodes(document, [episode_factory("v3", 3), episode_factory("v4", 4)])
        reparsed = FeedDocument.from_bytes(document.to_bytes())

        after = [etree.tostring(element) for element in reparsed.item_elements]
        assert [item.guid for item in reparsed.items] == ["v4", "v3", "v2", "v1"]
        assert after[2:] == before

    def test_apply_metadata_leaves_items(self, document: FeedDocument) -> None:
        items_before = document.items

        document.apply_metadata(
            ChannelMetadata(
                title="New Title",
                link="https://new.example.com",
                description="New description",
                author="New Author",
                language="en",
                image_url="https://new.example.com/art.png",
            )
        )

        metadata = document.metadata
        assert metadata.title == "New Title"
        assert metadata.author == "New Author"
        assert metadata.language == "en"
        assert metadata.image_url == "https://new.example.com/art.png"
        assert document.items == items_before
        # Channel fields stay ahead of the items
        children = [child.tag for child in document.channel]
        assert children.index("language") < children.index("item")
        assert children.index(f"{{{ITUNES_NS}}}image") < children.index("item")

    def test_apply_metadata_removes_unset_optional_fields(self, document: FeedDocument) -> None:
        document.apply_metadata(
            ChannelMetadata(title="t", link="https://l.example.com", description="d")
        )
        assert document.metadata.author is None

    def test_empty_document(self) -> None:
        document = FeedDocument.empty()

        assert document.items == []
        assert document.root.tag == "rss"
        assert document.root.get("version") == "2.0"
