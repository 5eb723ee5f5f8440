"""
Episode show notes in plain text and HTML.
"""

from typing import List, Optional

from .attachments import find_attachments
from .models import (
    Attachment,
    AttachmentKind,
    Episode,
    InlineAttachments,
    PodcastSource,
    Shownotes,
    ShownotesMode,
)
from .storage import Storage
from .utils import escape_html, format_bytes, format_date

IMAGE_STYLE = "max-width:100%;height:auto;"


def title_shownotes(title: str) -> Shownotes:
    """Show notes consisting of the bare episode title."""
    return Shownotes(plain=title, html=f"<p>{escape_html(title)}</p>")


def _link(url: str, text: str) -> str:
    return f'<a href="{escape_html(url)}">{escape_html(text)}</a>'


def _plain_lines(
    source: PodcastSource,
    episode: Episode,
    episode_url: str,
    size_text: str,
    attachments: List[Attachment],
) -> List[str]:
    lines = [
        episode.title,
        f"Podcast: {source.config.title}",
        f"Published: {format_date(episode.pub_date)}",
        f"File: {episode.file_name}",
        f"Size: {size_text}",
        f"Audio: {episode_url}",
    ]
    if attachments:
        names = ", ".join(a.file_name for a in attachments)
        lines.append(f"Attachments: {names}")
    return lines


def _html_parts(
    source: PodcastSource,
    episode: Episode,
    episode_url: str,
    size_text: str,
    attachments: List[Attachment],
) -> List[str]:
    fields = [
        ("Podcast", escape_html(source.config.title)),
        ("Published", escape_html(format_date(episode.pub_date))),
        ("File", escape_html(episode.file_name)),
        ("Size", escape_html(size_text)),
        ("Audio", _link(episode_url, episode_url)),
    ]

    parts = [f"<p><strong>{escape_html(episode.title)}</strong></p>", "<ul>"]
    for label, value in fields:
        parts.append(f"<li><strong>{label}</strong>: {value}</li>")
    if attachments:
        parts.append("<li><strong>Attachments</strong>:<ul>")
        for attachment in attachments:
            link = _link(attachment.url, attachment.file_name)
            parts.append(f"<li>{link}</li>")
        parts.append("</ul></li>")
    parts.append("</ul>")
    return parts


def _inline_parts(
    attachments: List[Attachment], inline: InlineAttachments
) -> List[str]:
    if inline is InlineAttachments.NONE:
        return []

    parts: List[str] = []
    images = [a for a in attachments if a.kind is AttachmentKind.IMAGE]
    if images:
        parts.append("<hr/><p><strong>Images</strong></p>")
        for image in images:
            url = escape_html(image.url)
            parts.append(
                f'<p><a href="{url}"><img src="{url}" '
                f'alt="{escape_html(image.file_name)}" '
                f'style="{IMAGE_STYLE}"/></a></p>'
            )

    texts = [a for a in attachments if a.kind is AttachmentKind.TEXT]
    if texts and inline is InlineAttachments.ALL:
        parts.append("<hr/><p><strong>Notes</strong></p>")
        for text in texts:
            parts.append(f"<p>{_link(text.url, text.file_name)}</p>")
            body = (text.inline_text or "").strip()
            if body:
                parts.append(f"<pre>{escape_html(body)}</pre>")
    return parts


def build_shownotes(  # pylint: disable=too-many-arguments
    source: PodcastSource,
    episode: Episode,
    episode_url: str,
    file_size_bytes: int,
    base_url: str,
    mode: ShownotesMode = ShownotesMode.FULL,
    inline_attachments: InlineAttachments = InlineAttachments.ALL,
    inline_text_max_chars: int = 8000,
    storage: Optional[Storage] = None,
) -> Shownotes:
    """Build plain-text and HTML show notes for an episode.

    In TITLE mode the notes are just the title and no sidecar lookup is
    done. In FULL mode they list podcast, date, file, size, audio URL and
    sidecar attachments, inlining images and/or text per
    inline_attachments.
    """
    if mode is ShownotesMode.TITLE:
        return title_shownotes(episode.title)

    attachments = find_attachments(
        source.dir_path,
        episode.file_name,
        base_url,
        source.dir_name,
        inline_text_max_chars,
        storage=storage,
    )
    size_text = format_bytes(file_size_bytes)

    lines = _plain_lines(source, episode, episode_url, size_text, attachments)
    html_parts = _html_parts(
        source, episode, episode_url, size_text, attachments
    )
    html_parts.extend(_inline_parts(attachments, inline_attachments))

    return Shownotes(plain="\n".join(lines), html="".join(html_parts))
