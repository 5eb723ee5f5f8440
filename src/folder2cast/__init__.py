"""
Folder2Cast package - Turns folders of audio files into podcast feeds.

This package resolves cover artwork (cached locally, from an explicit URL
or from the iTunes search API), builds per-episode show notes from sidecar
files and assembles RSS/iTunes feed documents.
"""

from .config import EnvConfig
from .cover import CoverResolver, resolve_cover
from .factory import create_feed_manager, create_process_options
from .feed import FeedAssembler, generate_feed
from .manager import FeedManager
from .models import (
    Attachment,
    CoverResult,
    CoverStatus,
    Episode,
    PodcastConfig,
    PodcastSource,
    ProcessOptions,
)
from .shownotes import build_shownotes

__all__ = [
    "Attachment",
    "build_shownotes",
    "CoverResolver",
    "CoverResult",
    "CoverStatus",
    "create_feed_manager",
    "create_process_options",
    "EnvConfig",
    "Episode",
    "FeedAssembler",
    "FeedManager",
    "generate_feed",
    "PodcastConfig",
    "PodcastSource",
    "ProcessOptions",
    "resolve_cover",
]
