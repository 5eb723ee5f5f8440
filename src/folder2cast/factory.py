"""
Factory functions for creating FeedManager instances.

This module provides simple factory functions that wire up dependencies
clearly.
"""

import logging
from typing import Optional

from .config import EnvConfig
from .cover import CoverResolver
from .manager import FeedManager
from .models import ProcessOptions
from .path_manager import PathManager
from .storage import Storage


def create_feed_manager(
    env: Optional[EnvConfig] = None, data_dir: Optional[str] = None
) -> FeedManager:
    """Create a FeedManager with its dependencies.

    Args:
        env: Configuration, read from the environment when omitted
        data_dir: Directory holding .covers and .feeds (env.data_dir by
            default)
    """
    env = env or EnvConfig.from_env()
    paths = PathManager(data_dir or env.data_dir)
    storage = Storage()
    resolver = CoverResolver(env, paths, storage)

    logging.getLogger(__name__).debug(
        "Created FeedManager with data directory %s", paths.data_dir
    )
    return FeedManager(env, paths, storage, resolver)


def create_process_options(
    env: EnvConfig,
    base_url: Optional[str] = None,
    default_cover: Optional[str] = None,
) -> ProcessOptions:
    """Create ProcessOptions, filling gaps from the configuration."""
    base_url = (base_url or env.base_url).rstrip("/")
    return ProcessOptions(
        base_url=base_url,
        default_cover=(
            default_cover
            or env.default_cover_url
            or f"{base_url}/default-cover.jpg"
        ),
    )
