"""
Cover artwork resolution with a local file cache.

Covers are cached as <covers_dir>/<dir_name><ext>. After a successful
download the other extension variants are removed, so at most one cached
file exists per source.
"""

import logging
from typing import Optional

from .config import EnvConfig
from .downloader import download_file_to_path, search_itunes_artwork
from .models import CoverResult, CoverStatus, PodcastSource
from .path_manager import PathManager
from .storage import Storage
from .utils import guess_image_extension


class CoverResolver:
    """Finds, caches and refreshes cover artwork for podcast sources."""

    def __init__(
        self,
        env: EnvConfig,
        paths: PathManager,
        storage: Optional[Storage] = None,
    ):
        """Initialize with configuration and path/storage services."""
        self.env = env
        self.paths = paths
        self.storage = storage or Storage()
        self.logger = logging.getLogger(__name__)

    def resolve(self, source: PodcastSource) -> CoverResult:
        """Resolve a cover for source. Never raises."""
        if not self.env.remote_cover_active:
            return CoverResult.empty(CoverStatus.DISABLED)

        try:
            return self._resolve(source)
        except Exception as e:  # pylint: disable=broad-except
            self.logger.warning(
                "Cover resolution failed for %s: %s", source.dir_name, e
            )
            return CoverResult.empty(CoverStatus.FAILED)

    def _resolve(self, source: PodcastSource) -> CoverResult:
        cached = self.find_cached(source.dir_name)
        if cached:
            return cached

        artwork_url = self.find_artwork_url(source)
        if not artwork_url:
            self.logger.info("No cover artwork found for %s", source.dir_name)
            return CoverResult.empty(CoverStatus.NOT_FOUND)

        ext = guess_image_extension(artwork_url)
        cache_path = self.paths.cover_cache_path(source.dir_name, ext)
        downloaded = download_file_to_path(
            artwork_url, cache_path, self.env.remote_cover_timeout_ms
        )
        if not downloaded:
            return CoverResult.empty(CoverStatus.FAILED)

        self._cleanup_old_variants(source.dir_name, ext)
        self.logger.info(
            "Cached cover for %s at %s", source.dir_name, cache_path
        )
        return CoverResult(
            status=CoverStatus.DOWNLOADED,
            cover_url=self.paths.cover_route(f"{source.dir_name}{ext}"),
            cover_cache_path=cache_path,
        )

    def find_cached(self, dir_name: str) -> Optional[CoverResult]:
        """Return the first fresh cached cover, probing extensions in order."""
        for ext in self.paths.COVER_EXTENSIONS:
            path = self.paths.cover_cache_path(dir_name, ext)
            if self.storage.file_exists(path) and self.storage.is_fresh(
                path, self.env.remote_cover_ttl_days
            ):
                self.logger.debug("Using cached cover %s", path)
                return CoverResult(
                    status=CoverStatus.CACHED,
                    cover_url=self.paths.cover_route(f"{dir_name}{ext}"),
                    cover_cache_path=path,
                )
        return None

    def find_artwork_url(self, source: PodcastSource) -> Optional[str]:
        """Pick the configured cover URL, or search for one."""
        direct_url = (source.config.cover_image_url or "").strip()
        if direct_url:
            return direct_url

        term = self.search_term(source)
        if not term:
            return None
        return search_itunes_artwork(
            term,
            self.env.remote_cover_country,
            self.env.remote_cover_timeout_ms,
        )

    @staticmethod
    def search_term(source: PodcastSource) -> str:
        """First non-empty of search term, title and folder name."""
        for candidate in (
            source.config.cover_search_term,
            source.config.title,
            source.dir_name,
        ):
            term = (candidate or "").strip()
            if term:
                return term
        return ""

    def _cleanup_old_variants(self, dir_name: str, keep_ext: str) -> None:
        for ext in self.paths.COVER_EXTENSIONS:
            if ext == keep_ext:
                continue
            path = self.paths.cover_cache_path(dir_name, ext)
            self.storage.remove_file(path)


def resolve_cover(
    source: PodcastSource,
    env: EnvConfig,
    paths: Optional[PathManager] = None,
) -> CoverResult:
    """Resolve a cover for source with default path/storage services."""
    resolver = CoverResolver(env, paths or PathManager(env.data_dir))
    return resolver.resolve(source)
