"""
Main orchestration class for feed generation.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import EnvConfig
from .cover import CoverResolver
from .feed import FeedAssembler
from .models import CoverStatus, PodcastSource, ProcessOptions
from .path_manager import PathManager
from .storage import Storage


@dataclass
class FeedBuildResult:
    """Result of building and storing one source's feed."""

    dir_name: str
    feed_url: str
    episode_count: int
    cover_status: CoverStatus
    feed_path: Optional[str] = None

    @property
    def success(self) -> bool:
        """Whether the feed was written to storage."""
        return self.feed_path is not None


@dataclass
class FeedBuildSummary:
    """Summary of multiple feed builds."""

    successful: int
    failed: int
    results: List[FeedBuildResult]

    @classmethod
    def from_results(
        cls, results: List[FeedBuildResult]
    ) -> "FeedBuildSummary":
        """Create summary from list of results."""
        successful = sum(1 for r in results if r.success)
        return cls(
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )


class FeedManager:
    """
    Orchestrates cover resolution, feed assembly and feed persistence
    using dependency injection.
    """

    def __init__(
        self,
        env: EnvConfig,
        paths: PathManager,
        storage: Storage,
        resolver: CoverResolver,
    ):
        """Initialize with dependencies."""
        self.logger = logging.getLogger(__name__)
        self.env = env
        self.paths = paths
        self.storage = storage
        self.resolver = resolver
        self.assembler = FeedAssembler(env, paths, storage)

    def build_feed(
        self, source: PodcastSource, options: ProcessOptions
    ) -> str:
        """Resolve the source's cover and render its feed XML."""
        self._apply_cover(source)
        return self.assembler.generate(source, options)

    def _apply_cover(self, source: PodcastSource) -> CoverStatus:
        cover = self.resolver.resolve(source)
        source.apply_cover(cover)
        self.logger.debug(
            "Cover for %s: %s", source.dir_name, cover.status.value
        )
        return cover.status

    def save_feed(self, source: PodcastSource, xml: str) -> Optional[str]:
        """Write rendered XML to the source's feed path.

        Returns the path, or None if it could not be written.
        """
        feed_path = self.paths.feed_storage_path(source.dir_name)
        if not self.storage.write_bytes(feed_path, xml.encode("utf-8")):
            self.logger.error("Failed to save feed for %s", source.dir_name)
            return None
        self.logger.info("Saved feed for %s to %s", source.dir_name, feed_path)
        return feed_path

    def process_source(
        self, source: PodcastSource, options: ProcessOptions
    ) -> FeedBuildResult:
        """Build and store the feed for one source.

        A feed that cannot be generated is reported in the result
        instead of raising.
        """
        cover_status = self._apply_cover(source)
        feed_path = None
        try:
            xml = self.assembler.generate(source, options)
        except Exception as e:  # pylint: disable=broad-except
            self.logger.error(
                "Failed to generate feed for %s: %s", source.dir_name, e
            )
        else:
            feed_path = self.save_feed(source, xml)

        return FeedBuildResult(
            dir_name=source.dir_name,
            feed_url=self.paths.feed_url(options.base_url, source.dir_name),
            episode_count=len(source.episodes),
            cover_status=cover_status,
            feed_path=feed_path,
        )

    def process_sources(
        self, sources: Iterable[PodcastSource], options: ProcessOptions
    ) -> FeedBuildSummary:
        """Build and store feeds for several sources."""
        results = [self.process_source(s, options) for s in sources]
        summary = FeedBuildSummary.from_results(results)
        self.logger.info(
            "Feed results: %d successful, %d failed",
            summary.successful,
            summary.failed,
        )
        return summary
