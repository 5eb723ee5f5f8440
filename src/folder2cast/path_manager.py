"""
Centralized authority for cache/feed paths and public URLs.
"""

import logging
import os
from typing import List, Optional

from .models import PodcastFiles
from .utils import encode_segment


class PathManager:
    """Centralized authority for all file paths and served routes."""

    COVERS_DIR = ".covers"
    FEEDS_DIR = ".feeds"
    COVER_EXTENSIONS: List[str] = [".jpg", ".png", ".webp"]

    COVERS_ROUTE = "/covers"
    FEEDS_ROUTE = "/feeds"
    AUDIO_ROUTE = "/audio"

    def __init__(self, data_dir: Optional[str] = None):
        """Initialize with optional data directory (defaults to cwd)."""
        self.data_dir = data_dir or os.getcwd()
        self.logger = logging.getLogger(__name__)

    @property
    def covers_dir(self) -> str:
        """Directory holding cached cover images."""
        return os.path.join(self.data_dir, self.COVERS_DIR)

    @property
    def feeds_dir(self) -> str:
        """Directory holding rendered feed documents."""
        return os.path.join(self.data_dir, self.FEEDS_DIR)

    def cover_cache_path(self, dir_name: str, ext: str) -> str:
        """Path of the cached cover for a source and extension."""
        return os.path.join(self.covers_dir, f"{dir_name}{ext}")

    def cover_route(self, file_name: str) -> str:
        """Served route for a cached cover file name (with extension)."""
        return f"{self.COVERS_ROUTE}/{encode_segment(file_name)}"

    def feed_storage_path(self, dir_name: str) -> str:
        """Path the rendered feed for a source is written to."""
        return os.path.join(self.feeds_dir, f"{dir_name}.xml")

    def feed_url(self, base_url: str, dir_name: str) -> str:
        """Public URL of a source's feed."""
        return f"{base_url}{self.FEEDS_ROUTE}/{encode_segment(dir_name)}.xml"

    def audio_url(self, base_url: str, dir_name: str, file_name: str) -> str:
        """Public URL of a file inside a source folder."""
        return (
            f"{base_url}{self.AUDIO_ROUTE}/"
            f"{encode_segment(dir_name)}/{encode_segment(file_name)}"
        )

    def folder_cover_url(self, base_url: str, dir_path: str) -> str:
        """Public URL of the cover.jpg stored inside a source folder."""
        folder = os.path.basename(os.path.normpath(dir_path))
        return self.audio_url(base_url, folder, PodcastFiles.COVER)
