"""Plain-text helpers shared by the note and profile renderers."""

from __future__ import annotations

import re


UNTITLED_NOTE = "Untitled Note"
MAX_TITLE_LENGTH = 100

_CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
_URL_RE = re.compile(r"https?://\S+")
_HASHTAG_RE = re.compile(r"#(\w+)")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_SENTENCE_RE = re.compile(r"^[^.!?]+[.!?](?:\s|$)")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|#^\[\]]')


def clean_content(content: str) -> str:
    """Normalize line endings, cap blank runs at one empty line, and trim."""
    content = content.replace("\r\n", "\n")
    return _EXCESS_NEWLINES_RE.sub("\n\n", content).strip()


def single_line(text: str) -> str:
    """Collapse every whitespace run (newlines included) into one space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_hashtags(content: str) -> list[str]:
    """Return lowercase hashtags found in *content*, first occurrence order.

    Fenced code blocks and URLs are ignored. A hashtag is ``#`` followed by
    a run of letters, digits, or underscores.
    """
    stripped = _URL_RE.sub("", _CODE_BLOCK_RE.sub("", content))
    seen: dict[str, None] = {}
    for match in _HASHTAG_RE.finditer(stripped):
        seen.setdefault(match.group(1).lower(), None)
    return list(seen)


def _shorten(text: str) -> str:
    if len(text) > MAX_TITLE_LENGTH:
        return text[:MAX_TITLE_LENGTH] + "..."
    return text


def extract_title(text: str) -> str:
    """First sentence of the first non-empty line, else the line itself.

    Long titles are cut at 100 characters followed by ``...``.
    """
    for line in clean_content(text).split("\n"):
        line = line.strip()
        if not line:
            continue
        match = _SENTENCE_RE.match(line)
        return _shorten(match.group(0).strip() if match else line)
    return UNTITLED_NOTE


def sanitize_filename(title: str) -> str:
    """Make *title* safe to use as a file name and as a wiki-link target."""
    cleaned = single_line(_UNSAFE_FILENAME_RE.sub("", title))
    cleaned = cleaned.strip(". ")[:MAX_TITLE_LENGTH].strip()
    return cleaned or UNTITLED_NOTE
