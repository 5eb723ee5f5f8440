"""
RSS/iTunes feed assembly for podcast sources.

Feeds are generated with feedgen and its podcast extension, which
declares the iTunes namespace next to the Atom and content namespaces.
"""

import logging
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Optional

from feedgen.entry import FeedEntry
from feedgen.feed import FeedGenerator

from .config import EnvConfig
from .models import (
    Episode,
    PodcastSource,
    ProcessOptions,
    Shownotes,
    ShownotesMode,
)
from .path_manager import PathManager
from .shownotes import build_shownotes, title_shownotes
from .storage import Storage
from .utils import (
    format_bytes,
    get_media_type,
    has_url_scheme,
    strip_xml_illegal,
)

GENERATOR = "Folder2Cast"
PLACEHOLDER_DURATION = "00:00:00"
ITUNES_IMAGE_EXTENSIONS = (".jpg", ".png")


def _aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _xml_safe(source: PodcastSource) -> PodcastSource:
    """Copy of source whose config and episode titles are valid XML text."""
    config = source.config
    cleaned = {
        f.name: strip_xml_illegal(getattr(config, f.name))
        for f in fields(config)
        if isinstance(getattr(config, f.name), str)
    }
    return replace(
        source,
        config=replace(config, **cleaned),
        episodes=[
            replace(e, title=strip_xml_illegal(e.title))
            for e in source.episodes
        ],
    )


class FeedAssembler:
    """Composes the RSS/iTunes document for a podcast source."""

    def __init__(
        self,
        env: EnvConfig,
        paths: Optional[PathManager] = None,
        storage: Optional[Storage] = None,
    ):
        """Initialize with configuration and path/storage services."""
        self.env = env
        self.paths = paths or PathManager(env.data_dir)
        self.storage = storage or Storage()
        self.logger = logging.getLogger(__name__)

    def cover_url(self, source: PodcastSource, options: ProcessOptions) -> str:
        """Select the feed image URL.

        Resolved cover first (made absolute against the base URL), then
        the folder's own cover.jpg, then the default cover.
        """
        if source.cover_url:
            if has_url_scheme(source.cover_url):
                return source.cover_url
            return f"{options.base_url}{source.cover_url}"
        if source.cover_path:
            return self.paths.folder_cover_url(
                options.base_url, source.dir_path
            )
        return options.default_cover

    def generate(
        self,
        source: PodcastSource,
        options: ProcessOptions,
        now: Optional[datetime] = None,
    ) -> str:
        """Generate the feed XML for source."""
        now = _aware(now or datetime.now(timezone.utc))
        source = _xml_safe(source)
        config = source.config
        base_url = options.base_url
        link = config.website_url or base_url
        title = config.title or strip_xml_illegal(source.dir_name)
        description = config.description or title
        feed_image = self.cover_url(source, options)

        latest = source.latest_episode
        updated = _aware(latest.pub_date) if latest else now

        fg = FeedGenerator()
        fg.load_extension("podcast")

        fg.id(base_url)
        fg.title(title)
        fg.description(description)
        fg.link(href=link, rel="alternate")
        feed_url = self.paths.feed_url(base_url, source.dir_name)
        fg.link(href=feed_url, rel="self")
        fg.language(config.language)
        copyright_text = f"All rights reserved {now.year}"
        if config.author:
            copyright_text = f"{copyright_text}, {config.author}"
        fg.copyright(copyright_text)
        fg.lastBuildDate(updated)
        fg.generator(GENERATOR)
        if config.author:
            fg.author(self._author(source, link))
        if feed_image:
            fg.image(url=feed_image, title=title, link=link)

        self._add_itunes_channel(fg, source, feed_image, description)

        for episode in source.episodes:
            self._add_episode(fg, source, episode, options)

        xml = fg.rss_str(pretty=True).decode("utf-8")
        self.logger.info(
            "Generated feed for %s with %d episodes",
            source.dir_name,
            len(source.episodes),
        )
        return xml

    @staticmethod
    def _author(source: PodcastSource, link: str) -> dict:
        author = {"name": source.config.author, "uri": link}
        if source.config.email:
            author["email"] = source.config.email
        return author

    def _add_itunes_channel(
        self,
        fg: FeedGenerator,
        source: PodcastSource,
        feed_image: str,
        description: str,
    ) -> None:
        config = source.config
        podcast = fg.podcast  # pylint: disable=no-member

        if feed_image.endswith(ITUNES_IMAGE_EXTENSIONS):
            podcast.itunes_image(feed_image)
        else:
            self.logger.warning(
                "Skipping itunes:image for %s: %s is not .jpg or .png",
                source.dir_name,
                feed_image,
            )
        if config.category:
            try:
                podcast.itunes_category({"cat": config.category})
            except ValueError as e:
                self.logger.warning(
                    "Skipping itunes:category for %s: %s", source.dir_name, e
                )
        if config.author:
            podcast.itunes_author(config.author)
        podcast.itunes_summary(description)
        podcast.itunes_explicit("yes" if config.explicit else "no")
        if config.author and config.email:
            podcast.itunes_owner(name=config.author, email=config.email)
        podcast.itunes_type("serial")

    def _shownotes(
        self,
        source: PodcastSource,
        episode: Episode,
        episode_url: str,
        file_size: int,
        options: ProcessOptions,
    ) -> Shownotes:
        return build_shownotes(
            source,
            episode,
            episode_url,
            file_size,
            options.base_url,
            mode=self.env.episode_shownotes,
            inline_attachments=self.env.episode_inline_attachments,
            inline_text_max_chars=self.env.inline_text_max_chars,
            storage=self.storage,
        )

    def _add_episode(
        self,
        fg: FeedGenerator,
        source: PodcastSource,
        episode: Episode,
        options: ProcessOptions,
    ) -> FeedEntry:
        config = source.config
        episode_url = self.paths.audio_url(
            options.base_url, source.dir_name, episode.file_name
        )
        file_size = self.storage.file_size(episode.file_path)
        shownotes = self._shownotes(
            source, episode, episode_url, file_size, options
        )
        html = strip_xml_illegal(shownotes.html)
        html = html or title_shownotes(episode.title).html
        plain = strip_xml_illegal(shownotes.plain)

        if self.env.episode_shownotes is ShownotesMode.TITLE:
            description = episode.title
        else:
            description = f"{episode.title} ({format_bytes(file_size)})"

        fe = fg.add_entry(order="append")
        fe.id(episode_url)
        fe.guid(episode_url, permalink=True)
        fe.title(episode.title)
        fe.link(href=episode_url)
        fe.description(description)
        fe.content(html, type="CDATA")
        fe.published(_aware(episode.pub_date))
        if config.author:
            link = config.website_url or options.base_url
            fe.author(self._author(source, link))
        fe.enclosure(
            episode_url, str(file_size), get_media_type(episode.file_name)
        )

        podcast = fe.podcast  # pylint: disable=no-member
        if config.author:
            podcast.itunes_author(config.author)
        podcast.itunes_subtitle(episode.title)
        podcast.itunes_summary(plain or episode.title)
        podcast.itunes_duration(PLACEHOLDER_DURATION)
        podcast.itunes_explicit("yes" if config.explicit else "no")
        podcast.itunes_episode_type("full")
        return fe


def generate_feed(
    source: PodcastSource,
    options: ProcessOptions,
    env: EnvConfig,
    storage: Optional[Storage] = None,
) -> str:
    """Generate the RSS/iTunes XML document for a source."""
    return FeedAssembler(env, storage=storage).generate(source, options)
