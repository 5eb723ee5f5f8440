"""
HTTP functionality for artwork search and cover downloads.

Every request runs against a hard deadline. A timer armed when the
response arrives shuts the connection down once the deadline passes,
which cancels a transfer even while a read is blocked.
"""

import json
import logging
import os
import socket
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple

import requests

from .exceptions import CoverDownloadError, CoverDownloadTimeout

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
ITUNES_SEARCH_LIMIT = 3
ARTWORK_FIELDS = ("artworkUrl600", "artworkUrl512", "artworkUrl100")
CHUNK_SIZE = 8192


class Deadline:
    """Total time budget for one streamed request."""

    def __init__(self, url: str, timeout_ms: int):
        self.url = url
        self.seconds = max(timeout_ms, 1) / 1000
        self.expires_at = time.monotonic() + self.seconds
        self.expired = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self.logger = logging.getLogger(__name__)

    def arm(self, response: requests.Response) -> None:
        """Abort response once the deadline passes."""
        remaining = max(self.expires_at - time.monotonic(), 0.0)
        self._timer = threading.Timer(
            remaining, self._abort, args=(response,)
        )
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        """Stop the abort timer."""
        if self._timer is not None:
            self._timer.cancel()

    def check(self) -> None:
        """Raise CoverDownloadTimeout if the deadline has passed."""
        if self.expired.is_set() or time.monotonic() > self.expires_at:
            raise CoverDownloadTimeout(f"Request to {self.url} timed out")

    def _abort(self, response: requests.Response) -> None:
        self.expired.set()
        self.logger.debug("Deadline passed, aborting %s", self.url)
        connection = getattr(response.raw, "connection", None)
        sock = getattr(connection, "sock", None)
        try:
            if sock is not None:
                # Unblocks a read waiting on this socket
                sock.shutdown(socket.SHUT_RDWR)
            else:
                response.close()
        except OSError as e:
            self.logger.debug("Could not abort %s: %s", self.url, e)


@contextmanager
def _stream(
    url: str,
    timeout_ms: int,
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Iterator[Tuple[requests.Response, Deadline]]:
    """Open a streamed GET whose transfer is aborted at the deadline."""
    deadline = Deadline(url, timeout_ms)
    with requests.get(
        url,
        params=params,
        headers=headers,
        stream=True,
        timeout=deadline.seconds,
    ) as response:
        deadline.arm(response)
        try:
            yield response, deadline
        except Exception as e:
            if deadline.expired.is_set() and not isinstance(
                e, CoverDownloadTimeout
            ):
                raise CoverDownloadTimeout(
                    f"Request to {url} timed out"
                ) from e
            raise
        finally:
            deadline.cancel()


def _read_chunks(
    response: requests.Response, deadline: Deadline
) -> Iterator[bytes]:
    """Yield body chunks, failing if the deadline passed at any point."""
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        deadline.check()
        if chunk:  # Filter out keep-alive chunks
            yield chunk
    # An aborted response can end early without an error
    deadline.check()


def fetch_bytes(
    url: str,
    timeout_ms: int,
    params: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    """Fetch a URL body within timeout_ms.

    Raises:
        CoverDownloadTimeout: If the deadline passed.
        CoverDownloadError: On network errors or non-2xx responses.
    """
    try:
        with _stream(url, timeout_ms, params, headers) as (
            response,
            deadline,
        ):
            response.raise_for_status()
            return b"".join(_read_chunks(response, deadline))
    except requests.exceptions.Timeout as e:
        raise CoverDownloadTimeout(f"Request to {url} timed out") from e
    except requests.exceptions.RequestException as e:
        raise CoverDownloadError(f"Request to {url} failed: {e}") from e


def search_itunes_artwork(
    term: str, country: str, timeout_ms: int
) -> Optional[str]:
    """Look up a podcast by term and return its largest artwork URL.

    Returns None when the search fails or yields no artwork.
    """
    logger = logging.getLogger(__name__)
    logger.debug("Searching iTunes artwork for %r (%s)", term, country)

    params = {
        "term": term,
        "entity": "podcast",
        "limit": str(ITUNES_SEARCH_LIMIT),
        "country": country,
    }
    try:
        content = fetch_bytes(
            ITUNES_SEARCH_URL,
            timeout_ms,
            params=params,
            headers={"Accept": "application/json"},
        )
        payload: Any = json.loads(content)
    except CoverDownloadError as e:
        logger.warning("Artwork search failed for %r: %s", term, e)
        return None
    except ValueError as e:
        logger.warning("Artwork search returned invalid JSON: %s", e)
        return None

    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list) or not results:
        logger.info("No artwork search results for %r", term)
        return None

    first = results[0] if isinstance(results[0], dict) else {}
    for field_name in ARTWORK_FIELDS:
        value = first.get(field_name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def download_file_to_path(
    file_url: str, output_path: str, timeout_ms: int
) -> Optional[str]:
    """Download file from URL to a specific path within timeout_ms.

    Returns the output path, or None if the download or write failed.
    The body is written to a ".part" file first and moved into place
    once complete, so an existing file is only replaced on success.
    """
    logger = logging.getLogger(__name__)
    output_filename = os.path.basename(output_path)
    logger.info("Downloading %s from %s", output_filename, file_url)

    tmp_path = f"{output_path}.part"
    try:
        with _stream(file_url, timeout_ms) as (response, deadline):
            response.raise_for_status()

            directory = os.path.dirname(output_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(tmp_path, "wb") as output_file:
                for chunk in _read_chunks(response, deadline):
                    output_file.write(chunk)

        os.replace(tmp_path, output_path)
        logger.info("Download complete: %s", output_filename)
        return output_path
    except (
        requests.exceptions.RequestException,
        CoverDownloadError,
        OSError,
    ) as e:
        logger.warning("Download failed for %s: %s", output_filename, e)
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)  # Clean up partial file
                logger.debug("Cleaned up partial file: %s", tmp_path)
            except OSError:
                logger.debug("Could not remove partial file: %s", tmp_path)
        return None
