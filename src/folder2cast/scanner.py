"""
Folder scanning: builds PodcastSource objects from audio folders.

Each podcast lives in its own folder under the audio directory, with a
podcast.json configuration and the audio files next to it.
"""

import logging
import os
import re
from datetime import datetime, timezone
from typing import List, Optional

from .config import EnvConfig
from .models import Episode, PodcastConfig, PodcastFiles, PodcastSource
from .storage import Storage

AUDIO_EXTENSIONS = (".mp3", ".m4a", ".wav", ".flac", ".aac", ".ogg")

_LEADING_NUMBER = re.compile(r"^\s*\d+\s*[-_.\s]+\s*")


def episode_title(file_name: str, title_format: str = "full") -> str:
    """Derive an episode title from its file name.

    "full" keeps the file name without extension. "clean" also drops a
    leading track number and turns underscores into spaces.
    """
    title = os.path.splitext(file_name)[0]
    if title_format != "clean":
        return title

    cleaned = _LEADING_NUMBER.sub("", title).replace("_", " ").strip()
    return re.sub(r"\s+", " ", cleaned) or title


def scan_source(
    dir_path: str, env: EnvConfig, storage: Optional[Storage] = None
) -> Optional[PodcastSource]:
    """Build a PodcastSource from a folder, or None without a valid config."""
    logger = logging.getLogger(__name__)
    storage = storage or Storage()

    config_path = os.path.join(dir_path, PodcastFiles.CONFIG)
    data = storage.read_json(config_path)
    if data is None:
        logger.warning("No valid %s in %s", PodcastFiles.CONFIG, dir_path)
        return None
    try:
        config = PodcastConfig.from_dict(data)
    except ValueError as e:
        logger.warning("Invalid podcast config in %s: %s", dir_path, e)
        return None

    audio_files = [
        name
        for name in storage.list_files(dir_path)
        if os.path.splitext(name)[1].lower() in AUDIO_EXTENSIONS
    ]
    mtimes = {
        name: storage.modified_time(os.path.join(dir_path, name))
        for name in audio_files
    }
    audio_files.sort(key=lambda name: (mtimes[name], name))

    episodes = [
        Episode(
            title=episode_title(name, env.title_format),
            file_name=name,
            file_path=os.path.join(dir_path, name),
            pub_date=datetime.fromtimestamp(mtimes[name], tz=timezone.utc),
        )
        for name in audio_files
    ]

    cover_path = os.path.join(dir_path, PodcastFiles.COVER)
    source = PodcastSource(
        dir_name=os.path.basename(os.path.normpath(dir_path)),
        dir_path=os.path.abspath(dir_path),
        config=config,
        episodes=episodes,
        cover_path=cover_path if storage.file_exists(cover_path) else None,
    )
    logger.debug(
        "Scanned %s: %d episodes", source.dir_name, len(source.episodes)
    )
    return source


def scan_sources(
    audio_dir: str, env: EnvConfig, storage: Optional[Storage] = None
) -> List[PodcastSource]:
    """Scan every podcast folder under audio_dir, sorted by folder name."""
    storage = storage or Storage()
    sources: List[PodcastSource] = []
    for name in sorted(storage.list_directories(audio_dir)):
        if name.startswith("."):
            continue
        source = scan_source(os.path.join(audio_dir, name), env, storage)
        if source:
            sources.append(source)
    return sources
