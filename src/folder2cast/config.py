"""
Environment configuration.

The configuration is read once into an immutable EnvConfig and passed
explicitly to every component that needs it.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Type, TypeVar

from .models import CoverProvider, InlineAttachments, ShownotesMode

E = TypeVar("E", bound=Enum)

DEFAULT_PORT = 3000
DEFAULT_INLINE_TEXT_MAX_CHARS = 8000
DEFAULT_COVER_TTL_DAYS = 30
DEFAULT_COVER_TIMEOUT_MS = 8000
DEFAULT_COVER_COUNTRY = "cn"

TITLE_FORMATS = ("clean", "full")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logging.getLogger(__name__).warning(
            "Invalid integer for %s: %r, using %d", name, raw, default
        )
        return default


def _get_enum(
    env: Mapping[str, str], name: str, enum_cls: Type[E], default: E
) -> E:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        logging.getLogger(__name__).warning(
            "Invalid value for %s: %r, using %s", name, raw, default.value
        )
        return default


@dataclass(frozen=True)
class EnvConfig:  # pylint: disable=too-many-instance-attributes
    """Typed, read-only configuration snapshot."""

    audio_dir: str = os.path.join(".", "audio")
    data_dir: str = "."
    port: int = DEFAULT_PORT
    title_format: str = "full"
    base_url: str = f"http://localhost:{DEFAULT_PORT}"
    default_cover_url: str = ""
    episode_shownotes: ShownotesMode = ShownotesMode.FULL
    episode_inline_attachments: InlineAttachments = InlineAttachments.ALL
    episode_inline_text_max_chars: int = DEFAULT_INLINE_TEXT_MAX_CHARS
    remote_cover_enabled: bool = True
    remote_cover_provider: CoverProvider = CoverProvider.ITUNES
    remote_cover_country: str = DEFAULT_COVER_COUNTRY
    remote_cover_ttl_days: int = DEFAULT_COVER_TTL_DAYS
    remote_cover_timeout_ms: int = DEFAULT_COVER_TIMEOUT_MS

    @property
    def inline_text_max_chars(self) -> int:
        """Effective inline text limit (non-positive means default)."""
        if self.episode_inline_text_max_chars > 0:
            return self.episode_inline_text_max_chars
        return DEFAULT_INLINE_TEXT_MAX_CHARS

    @property
    def remote_cover_active(self) -> bool:
        """Whether remote cover resolution should run at all."""
        return (
            self.remote_cover_enabled
            and self.remote_cover_provider is not CoverProvider.NONE
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "EnvConfig":
        """Build a configuration from environment variables."""
        if env is None:
            env = os.environ

        cwd = os.getcwd()
        port = _get_int(env, "PORT", DEFAULT_PORT)
        base_url = env.get("BASE_URL") or f"http://localhost:{port}"
        base_url = base_url.rstrip("/")

        title_format = (env.get("TITLE_FORMAT") or "full").strip().lower()
        if title_format not in TITLE_FORMATS:
            title_format = "full"

        return cls(
            audio_dir=env.get("AUDIO_DIR") or os.path.join(cwd, "audio"),
            data_dir=env.get("FOLDER2CAST_DATA_DIR") or cwd,
            port=port,
            title_format=title_format,
            base_url=base_url,
            default_cover_url=env.get("DEFAULT_COVER_URL") or "",
            episode_shownotes=_get_enum(
                env, "EPISODE_SHOWNOTES", ShownotesMode, ShownotesMode.FULL
            ),
            episode_inline_attachments=_get_enum(
                env,
                "EPISODE_INLINE_ATTACHMENTS",
                InlineAttachments,
                InlineAttachments.ALL,
            ),
            episode_inline_text_max_chars=_get_int(
                env,
                "EPISODE_INLINE_TEXT_MAX_CHARS",
                DEFAULT_INLINE_TEXT_MAX_CHARS,
            ),
            remote_cover_enabled=(
                (env.get("REMOTE_COVER_ENABLED") or "true").strip().lower()
                == "true"
            ),
            remote_cover_provider=_get_enum(
                env,
                "REMOTE_COVER_PROVIDER",
                CoverProvider,
                CoverProvider.ITUNES,
            ),
            remote_cover_country=(
                env.get("REMOTE_COVER_COUNTRY") or DEFAULT_COVER_COUNTRY
            ),
            remote_cover_ttl_days=_get_int(
                env, "REMOTE_COVER_TTL_DAYS", DEFAULT_COVER_TTL_DAYS
            ),
            remote_cover_timeout_ms=_get_int(
                env, "REMOTE_COVER_TIMEOUT_MS", DEFAULT_COVER_TIMEOUT_MS
            ),
        )
