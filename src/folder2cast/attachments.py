"""
Sidecar attachment discovery.

A sidecar shares the audio file's base name with a different extension,
e.g. "ep1.mp3" -> "ep1.pdf", "ep1.md", "ep1.jpg".
"""

import logging
import os
from typing import List, Optional

from .models import Attachment, AttachmentKind
from .path_manager import PathManager
from .storage import Storage
from .utils import strip_xml_illegal

SIDECAR_EXTENSIONS = [
    "pdf",
    "doc",
    "docx",
    "epub",
    "mobi",
    "azw3",
    "txt",
    "md",
    "jpg",
    "jpeg",
    "png",
    "webp",
]


def find_attachments(  # pylint: disable=too-many-arguments
    dir_path: str,
    audio_file_name: str,
    base_url: str,
    dir_name: str,
    max_text_chars: int,
    storage: Optional[Storage] = None,
) -> List[Attachment]:
    """Find sidecar files for an episode.

    Args:
        dir_path: Folder containing the audio file
        audio_file_name: Audio file name (with extension)
        base_url: Serving base URL
        dir_name: Source folder name used in public URLs
        max_text_chars: Characters of text sidecars to inline
        storage: Storage instance for file operations

    Returns:
        Attachments in SIDECAR_EXTENSIONS order. Only text attachments
        carry inline_text.
    """
    logger = logging.getLogger(__name__)
    storage = storage or Storage()
    paths = PathManager()
    stem = os.path.splitext(audio_file_name)[0]

    attachments: List[Attachment] = []
    for ext in SIDECAR_EXTENSIONS:
        candidate = f"{stem}.{ext}"
        full_path = os.path.join(dir_path, candidate)
        if not storage.file_exists(full_path):
            continue

        kind = AttachmentKind.from_extension(ext)
        inline_text = None
        if kind is AttachmentKind.TEXT:
            inline_text = strip_xml_illegal(
                storage.read_text_truncated(full_path, max_text_chars)
            )

        attachments.append(
            Attachment(
                file_name=candidate,
                url=paths.audio_url(base_url, dir_name, candidate),
                kind=kind,
                inline_text=inline_text,
            )
        )

    if attachments:
        logger.debug(
            "Found %d attachments for %s", len(attachments), audio_file_name
        )
    return attachments
