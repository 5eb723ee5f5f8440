"""
Data models for podcast sources, episodes, attachments and covers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class PodcastFiles:
    """Standard podcast folder file names."""

    CONFIG = "podcast.json"
    COVER = "cover.jpg"


class AttachmentKind(Enum):
    """Classification of sidecar files."""

    IMAGE = "image"
    TEXT = "text"
    PDF = "pdf"
    DOC = "doc"
    OTHER = "other"

    @classmethod
    def from_extension(cls, ext: str) -> "AttachmentKind":
        """Get the kind for a file extension (with or without dot)."""
        ext = ext.lower().lstrip(".")
        return {
            "jpg": cls.IMAGE,
            "jpeg": cls.IMAGE,
            "png": cls.IMAGE,
            "webp": cls.IMAGE,
            "md": cls.TEXT,
            "txt": cls.TEXT,
            "pdf": cls.PDF,
            "doc": cls.DOC,
            "docx": cls.DOC,
        }.get(ext, cls.OTHER)


class ShownotesMode(Enum):
    """Episode shownotes verbosity."""

    TITLE = "title"
    FULL = "full"


class InlineAttachments(Enum):
    """Which sidecar kinds are inlined into the shownotes HTML."""

    NONE = "none"
    IMAGES = "images"
    ALL = "all"


class CoverProvider(Enum):
    """Remote artwork search provider."""

    NONE = "none"
    ITUNES = "itunes"


class CoverStatus(Enum):
    """Outcome of a cover resolution."""

    CACHED = "cached"
    DOWNLOADED = "downloaded"
    DISABLED = "disabled"
    NOT_FOUND = "not_found"
    FAILED = "failed"


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class PodcastConfig:  # pylint: disable=too-many-instance-attributes
    """Per-folder podcast configuration, as read from podcast.json."""

    title: str
    description: str = ""
    author: str = ""
    email: str = ""
    language: str = "zh-cn"
    category: str = "Technology"
    explicit: bool = False
    website_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    cover_search_term: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PodcastConfig":
        """Create config from a podcast.json dictionary.

        Accepts the camelCase keys used by podcast.json as well as the
        snake_case field names.
        """
        title = _pick(data, "title")
        if not title:
            raise ValueError("podcast config requires a title")

        explicit = _pick(data, "explicit")
        if isinstance(explicit, str):
            explicit = explicit.strip().lower() in ("yes", "true", "1")

        return cls(
            title=str(title),
            description=str(_pick(data, "description") or ""),
            author=str(_pick(data, "author") or ""),
            email=str(_pick(data, "email") or ""),
            language=str(_pick(data, "language") or "zh-cn"),
            category=str(_pick(data, "category") or "Technology"),
            explicit=bool(explicit),
            website_url=_pick(data, "websiteUrl", "website_url"),
            cover_image_url=_pick(data, "coverImageUrl", "cover_image_url"),
            cover_search_term=_pick(
                data, "coverSearchTerm", "cover_search_term"
            ),
        )


@dataclass(frozen=True)
class Episode:
    """A single audio file published as a feed item."""

    title: str
    file_name: str
    file_path: str
    pub_date: datetime


@dataclass
class PodcastSource:
    """One podcast folder with its configuration and episodes.

    Built by the folder scanner. The engine only reads it, apart from
    recording a resolved cover via apply_cover().
    """

    dir_name: str
    dir_path: str
    config: PodcastConfig
    episodes: list[Episode] = field(default_factory=list)
    cover_path: Optional[str] = None
    cover_url: Optional[str] = None

    @property
    def latest_episode(self) -> Optional[Episode]:
        """Last episode in sequence, or None for an empty source."""
        return self.episodes[-1] if self.episodes else None

    def apply_cover(self, result: "CoverResult") -> None:
        """Record a resolved cover on this source."""
        if result.found:
            self.cover_url = result.cover_url


@dataclass(frozen=True)
class ProcessOptions:
    """Serving options supplied by the caller."""

    base_url: str
    default_cover: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


@dataclass(frozen=True)
class Attachment:
    """A sidecar file found next to an episode's audio file."""

    file_name: str
    url: str
    kind: AttachmentKind
    inline_text: Optional[str] = None


@dataclass(frozen=True)
class Shownotes:
    """Plain-text and HTML show notes for one episode."""

    plain: str
    html: str


@dataclass(frozen=True)
class CoverResult:
    """Result of a cover resolution.

    cover_url and cover_cache_path are only set when a cover was found
    (status CACHED or DOWNLOADED).
    """

    status: CoverStatus
    cover_url: Optional[str] = None
    cover_cache_path: Optional[str] = None

    @property
    def found(self) -> bool:
        """Whether a usable cover is available."""
        return self.status in (CoverStatus.CACHED, CoverStatus.DOWNLOADED)

    @classmethod
    def empty(cls, status: CoverStatus) -> "CoverResult":
        """Create a result without a cover."""
        return cls(status=status)
