"""
Pure storage layer for file operations.

This module provides low-level, best-effort file operations without any
business logic. I/O errors are converted into degraded return values.
"""

import json
import logging
import os
import time
from typing import Any, Dict, List, Optional

MS_PER_DAY = 24 * 60 * 60 * 1000


class Storage:
    """Pure file operations without business logic."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(__name__)

    def ensure_directory(self, path: str) -> None:
        """Create directory if it doesn't exist."""
        os.makedirs(path, exist_ok=True)

    def file_exists(self, path: str) -> bool:
        """Check if file exists."""
        return os.path.exists(path)

    def is_fresh(
        self, path: str, ttl_days: int, now: Optional[float] = None
    ) -> bool:
        """Check whether a file's age is within [0, ttl_days).

        A modification time in the future counts as not fresh.
        """
        try:
            mtime = os.stat(path).st_mtime
        except OSError:
            return False

        current = time.time() if now is None else now
        age_ms = (current - mtime) * 1000
        return 0 <= age_ms < ttl_days * MS_PER_DAY

    def file_size(self, path: str) -> int:
        """Size of a file in bytes, 0 if it cannot be read."""
        try:
            return os.stat(path).st_size
        except OSError as e:
            self.logger.warning("Failed to get file size for %s: %s", path, e)
            return 0

    def read_json(self, path: str) -> Optional[Dict[str, Any]]:
        """Read JSON object, None if missing, invalid or not an object."""
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                return data if isinstance(data, dict) else None
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            return None

    def read_text_truncated(self, path: str, max_chars: int) -> str:
        """Read at most max_chars characters from a UTF-8 text file.

        Reads max(1024, max_chars * 4) bytes at most. Returns "" when the
        path is not a regular file or cannot be read.
        """
        try:
            if not os.path.isfile(path):
                return ""
            max_bytes = max(1024, max_chars * 4)
            with open(path, "rb") as f:
                data = f.read(max_bytes)
        except OSError as e:
            self.logger.debug("Failed to read %s: %s", path, e)
            return ""

        text = data.decode("utf-8", errors="replace")
        return text[:max_chars] if len(text) > max_chars else text

    def write_bytes(self, path: str, data: bytes) -> bool:
        """Write bytes to file, return success status."""
        try:
            # Ensure directory exists
            directory = os.path.dirname(path)
            if directory:
                self.ensure_directory(directory)

            with open(path, "wb") as f:
                f.write(data)
            return True
        except OSError as e:
            self.logger.error("Failed to write %s: %s", path, e)
            return False

    def remove_file(self, path: str) -> bool:
        """Remove a file if present. Returns False only on failure."""
        try:
            if os.path.exists(path):
                os.remove(path)
            return True
        except OSError as e:
            self.logger.debug("Failed to remove %s: %s", path, e)
            return False

    def list_directories(self, path: str) -> List[str]:
        """List subdirectories in given path."""
        if not os.path.exists(path):
            return []

        try:
            return [item for item in os.listdir(path)
                    if os.path.isdir(os.path.join(path, item))]
        except OSError:
            return []

    def list_files(self, path: str) -> List[str]:
        """List regular files in given path."""
        try:
            return [item for item in os.listdir(path)
                    if os.path.isfile(os.path.join(path, item))]
        except OSError:
            return []

    def modified_time(self, path: str) -> float:
        """Modification time as epoch seconds, 0.0 if unavailable."""
        try:
            return os.stat(path).st_mtime
        except OSError:
            return 0.0
