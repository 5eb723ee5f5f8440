"""
Small formatting and URL helpers shared across the package.
"""

import math
import os
import re
from datetime import datetime, timezone
from typing import Union
from urllib.parse import quote, urlsplit

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

MEDIA_TYPES = {
    ".mp3": "audio/mpeg",
    ".m4a": "audio/x-m4a",
    ".wav": "audio/wav",
}
DEFAULT_MEDIA_TYPE = "audio/mpeg"

# Characters XML 1.0 does not allow, even inside CDATA
_XML_ILLEGAL = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def escape_html(text: str) -> str:
    """Escape text for use in HTML element content and attributes."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def format_bytes(size: Union[int, float]) -> str:
    """Format a byte count as a human-readable string.

    1024 -> "1.00 KB", 10240 -> "10.0 KB", 0 or negative -> "0 B".
    """
    if not isinstance(size, (int, float)) or not math.isfinite(size):
        return "0 B"
    if size <= 0:
        return "0 B"

    value = float(size)
    unit_index = 0
    while value >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1

    if unit_index == 0:
        decimals = 0
    elif value >= 10:
        decimals = 1
    else:
        decimals = 2
    return f"{value:.{decimals}f} {SIZE_UNITS[unit_index]}"


def format_date(value: datetime) -> str:
    """Render a datetime as "YYYY-MM-DD HH:MM:SS.mmm UTC".

    Naive datetimes are taken as UTC. Falls back to str(value).
    """
    try:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        utc = value.astimezone(timezone.utc)
        iso = utc.strftime("%Y-%m-%dT%H:%M:%S")
        iso = f"{iso}.{utc.microsecond // 1000:03d}Z"
        return iso.replace("T", " ").replace("Z", " UTC")
    except (AttributeError, TypeError, ValueError, OverflowError):
        return str(value)


def encode_segment(segment: str) -> str:
    """Percent-encode a single URL path segment (slashes included).

    Leaves the same characters unescaped as encodeURIComponent.
    """
    return quote(segment, safe="!'()*-._~")


def strip_xml_illegal(text: str) -> str:
    """Remove characters that cannot appear in an XML document."""
    return _XML_ILLEGAL.sub("", text)


def guess_image_extension(url: str) -> str:
    """Infer a cover file extension from an artwork URL.

    Only the path is considered; anything unrecognised is ".jpg".
    """
    path = urlsplit(url.strip()).path.lower()
    if path.endswith(".png"):
        return ".png"
    if path.endswith(".webp"):
        return ".webp"
    return ".jpg"


def get_media_type(file_name: str) -> str:
    """MIME type for an audio file name."""
    ext = os.path.splitext(file_name)[1].lower()
    return MEDIA_TYPES.get(ext, DEFAULT_MEDIA_TYPE)


def has_url_scheme(url: str) -> bool:
    """Whether url is absolute http(s)."""
    return url.startswith("http://") or url.startswith("https://")
