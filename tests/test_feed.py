"""
Tests for RSS/iTunes feed assembly.
"""

import unittest
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import feedparser

from folder2cast.feed import FeedAssembler, generate_feed
from folder2cast.models import (
    Episode,
    InlineAttachments,
    PodcastSource,
    ProcessOptions,
    ShownotesMode,
)
from tests.base import FeedTestBase, create_test_config

NAMESPACES = {
    "itunes": "http://www.itunes.com/dtds/podcast-1.0.dtd",
    "content": "http://purl.org/rss/1.0/modules/content/",
    "atom": "http://www.w3.org/2005/Atom",
}
OPTIONS = ProcessOptions(
    base_url="http://test.com/", default_cover="http://test.com/default.jpg"
)
NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestFeedAssembler(FeedTestBase):
    """Test FeedAssembler.generate."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        super().setUp()
        self.assembler = FeedAssembler(self.create_env(), self.paths)

    def render(
        self,
        source: PodcastSource,
        assembler: Optional[FeedAssembler] = None,
    ) -> ET.Element:
        """Generate a feed and return its parsed channel element."""
        xml = (assembler or self.assembler).generate(source, OPTIONS, NOW)
        channel = ET.fromstring(xml.encode("utf-8")).find("channel")
        assert channel is not None
        return channel

    def test_channel_metadata(self) -> None:
        """The channel carries the podcast metadata and iTunes fields."""
        source = self.create_source(
            [self.create_episode("ep1.mp3")],
            config=create_test_config(
                explicit=True, website_url="https://show.test"
            ),
        )

        channel = self.render(source)

        self.assertEqual(channel.findtext("title"), "My Show")
        self.assertEqual(channel.findtext("link"), "https://show.test")
        self.assertEqual(
            channel.findtext("description"), "A show about things"
        )
        self.assertEqual(channel.findtext("language"), "en")
        self.assertEqual(channel.findtext("generator"), "Folder2Cast")
        self.assertEqual(
            channel.findtext("copyright"),
            "All rights reserved 2024, Jane Host",
        )
        self_link = channel.find("atom:link", NAMESPACES)
        assert self_link is not None
        self.assertEqual(
            self_link.get("href"), "http://test.com/feeds/my-show.xml"
        )
        self.assertEqual(
            channel.findtext("itunes:author", namespaces=NAMESPACES),
            "Jane Host",
        )
        self.assertEqual(
            channel.findtext("itunes:explicit", namespaces=NAMESPACES), "yes"
        )
        self.assertEqual(
            channel.findtext("itunes:type", namespaces=NAMESPACES), "serial"
        )
        category = channel.find("itunes:category", NAMESPACES)
        assert category is not None
        self.assertEqual(category.get("text"), "Technology")
        self.assertEqual(
            channel.findtext(
                "itunes:owner/itunes:email", namespaces=NAMESPACES
            ),
            "jane@test.com",
        )

    def test_description_falls_back_to_title(self) -> None:
        """An empty description uses the title."""
        source = self.create_source(
            config=create_test_config(description="")
        )
        channel = self.render(source)
        self.assertEqual(channel.findtext("description"), "My Show")

    def test_copyright_without_author(self) -> None:
        """Copyright is always written, without an author part if unset."""
        source = self.create_source(config=create_test_config(author=""))

        channel = self.render(source)

        self.assertEqual(
            channel.findtext("copyright"), "All rights reserved 2024"
        )

    def test_control_characters_are_dropped(self) -> None:
        """Text XML cannot hold is removed instead of failing the feed."""
        self.write_file("ep\x07one.md", b"notes\x0cpage two\x1b[0m")
        episode = self.create_episode("ep\x07one.mp3", title="Bell\x07 one")
        source = self.create_source(
            [episode], config=create_test_config(title="My\x00 Show")
        )
        assembler = FeedAssembler(
            self.create_env(episode_inline_attachments=InlineAttachments.ALL),
            self.paths,
        )

        xml = assembler.generate(source, OPTIONS, NOW)
        channel = ET.fromstring(xml.encode("utf-8")).find("channel")
        assert channel is not None

        self.assertEqual(channel.findtext("title"), "My Show")
        item = channel.find("item")
        assert item is not None
        self.assertEqual(item.findtext("title"), "Bell one")
        content = item.findtext("content:encoded", namespaces=NAMESPACES)
        assert content is not None
        self.assertIn("<pre>notespage two[0m</pre>", content)
        self.assertIn(">epone.md</a>", content)
        self.assertIn("%07", item.findtext("link") or "")
        self.assertFalse(feedparser.parse(xml).bozo)

    def test_unknown_category_still_builds(self) -> None:
        """A category outside the iTunes taxonomy never fails the build."""
        source = self.create_source(
            [self.create_episode("ep1.mp3")],
            config=create_test_config(category="Basket Weaving"),
        )

        channel = self.render(source)

        self.assertEqual(channel.findtext("title"), "My Show")
        self.assertEqual(len(channel.findall("item")), 1)

    def test_items_keep_input_order(self) -> None:
        """Items appear in the order of the episode sequence."""
        episodes = [
            self.create_episode("b.mp3", title="Second", day=9),
            self.create_episode("a.mp3", title="First", day=2),
            self.create_episode("c.mp3", title="Third", day=5),
        ]

        channel = self.render(self.create_source(episodes))

        titles = [item.findtext("title") for item in channel.iter("item")]
        self.assertEqual(titles, ["Second", "First", "Third"])

    def test_item_fields(self) -> None:
        """Each item links to its audio file with enclosure and notes."""
        episode = self.create_episode(
            "第1集.m4a", title="Pilot", content=b"x" * 3000
        )

        channel = self.render(self.create_source([episode]))
        item = channel.find("item")
        assert item is not None

        url = "http://test.com/audio/my-show/%E7%AC%AC1%E9%9B%86.m4a"
        self.assertEqual(item.findtext("link"), url)
        guid = item.find("guid")
        assert guid is not None
        self.assertEqual(guid.text, url)
        self.assertEqual(item.findtext("description"), "Pilot (2.93 KB)")
        enclosure = item.find("enclosure")
        assert enclosure is not None
        self.assertEqual(enclosure.get("url"), url)
        self.assertEqual(enclosure.get("length"), "3000")
        self.assertEqual(enclosure.get("type"), "audio/x-m4a")
        content = item.findtext("content:encoded", namespaces=NAMESPACES)
        assert content is not None
        self.assertIn("<strong>Pilot</strong>", content)
        self.assertEqual(
            item.findtext("itunes:duration", namespaces=NAMESPACES),
            "00:00:00",
        )
        self.assertEqual(
            item.findtext("itunes:episodeType", namespaces=NAMESPACES),
            "full",
        )
        self.assertEqual(
            item.findtext("itunes:explicit", namespaces=NAMESPACES), "no"
        )
        summary = item.findtext("itunes:summary", namespaces=NAMESPACES)
        assert summary is not None
        self.assertTrue(summary.startswith("Pilot\nPodcast: My Show"))
        pub_date = parsedate_to_datetime(item.findtext("pubDate") or "")
        self.assertEqual(pub_date, episode.pub_date)

    def test_title_mode_description(self) -> None:
        """Title mode uses the bare title for description and content."""
        assembler = FeedAssembler(
            self.create_env(episode_shownotes=ShownotesMode.TITLE),
            self.paths,
        )
        episode = self.create_episode("ep1.mp3", title="A & B")

        channel = self.render(self.create_source([episode]), assembler)
        item = channel.find("item")
        assert item is not None

        self.assertEqual(item.findtext("description"), "A & B")
        self.assertEqual(
            item.findtext("content:encoded", namespaces=NAMESPACES),
            "<p>A &amp; B</p>",
        )

    def test_missing_audio_file(self) -> None:
        """A missing audio file gives an enclosure length of 0."""
        episode = Episode(
            title="Gone",
            file_name="gone.mp3",
            file_path=f"{self.podcast_dir}/gone.mp3",
            pub_date=NOW,
        )

        with self.assertLogs("folder2cast.storage", level="WARNING"):
            channel = self.render(self.create_source([episode]))

        enclosure = channel.find("item/enclosure")
        assert enclosure is not None
        self.assertEqual(enclosure.get("length"), "0")
        self.assertEqual(enclosure.get("type"), "audio/mpeg")

    def test_last_build_date(self) -> None:
        """lastBuildDate is the latest episode date, or now without any."""
        episodes = [
            self.create_episode("a.mp3", day=3),
            self.create_episode("b.mp3", day=7),
        ]
        channel = self.render(self.create_source(episodes))
        self.assertEqual(
            parsedate_to_datetime(channel.findtext("lastBuildDate") or ""),
            episodes[-1].pub_date,
        )

        channel = self.render(self.create_source([]))
        self.assertEqual(
            parsedate_to_datetime(channel.findtext("lastBuildDate") or ""),
            NOW,
        )
        self.assertIsNone(channel.find("item"))

    def test_cover_precedence(self) -> None:
        """Resolved cover, then folder cover.jpg, then default cover."""
        source = self.create_source(
            cover_url="/covers/my-show.jpg",
            cover_path=f"{self.podcast_dir}/cover.jpg",
        )
        self.assertEqual(
            self.assembler.cover_url(source, OPTIONS),
            "http://test.com/covers/my-show.jpg",
        )

        source = self.create_source(cover_url="https://cdn.test/art.png")
        self.assertEqual(
            self.assembler.cover_url(source, OPTIONS),
            "https://cdn.test/art.png",
        )

        source = self.create_source(
            cover_path=f"{self.podcast_dir}/cover.jpg"
        )
        self.assertEqual(
            self.assembler.cover_url(source, OPTIONS),
            "http://test.com/audio/my-show/cover.jpg",
        )

        self.assertEqual(
            self.assembler.cover_url(self.create_source(), OPTIONS),
            "http://test.com/default.jpg",
        )

    def test_cover_in_channel(self) -> None:
        """The cover is used for the channel and iTunes images."""
        channel = self.render(
            self.create_source(cover_url="/covers/my-show.jpg")
        )

        self.assertEqual(
            channel.findtext("image/url"),
            "http://test.com/covers/my-show.jpg",
        )
        image = channel.find("itunes:image", NAMESPACES)
        assert image is not None
        self.assertEqual(
            image.get("href"), "http://test.com/covers/my-show.jpg"
        )

    def test_webp_cover_skips_itunes_image(self) -> None:
        """A .webp cover is kept for the channel image only."""
        channel = self.render(
            self.create_source(cover_url="/covers/my-show.webp")
        )

        self.assertEqual(
            channel.findtext("image/url"),
            "http://test.com/covers/my-show.webp",
        )
        self.assertIsNone(channel.find("itunes:image", NAMESPACES))

    def test_feedparser_reads_feed(self) -> None:
        """The generated document parses cleanly as a podcast feed."""
        self.write_file("ep1.md", b"Notes for episode one")
        source = self.create_source(
            [self.create_episode("ep1.mp3", title="One")]
        )

        xml = generate_feed(source, OPTIONS, self.create_env())
        parsed = feedparser.parse(xml)

        self.assertFalse(parsed.bozo)
        self.assertEqual(parsed.feed.title, "My Show")
        self.assertEqual(len(parsed.entries), 1)
        entry = parsed.entries[0]
        self.assertEqual(entry.title, "One")
        self.assertEqual(
            entry.enclosures[0].href, "http://test.com/audio/my-show/ep1.mp3"
        )
        self.assertIn("Notes for episode one", entry.content[0].value)


if __name__ == "__main__":
    unittest.main()
