"""Document synthesis layer: frontmatter codec, reference classification, rendering.

Depends on ``notebrotr.models`` and ``notebrotr.core``. Renderers receive a
title lookup collaborator and a codec; they never touch storage.

Attributes:
    FrontmatterCodec: Error-contained parse/stringify/merge of the
        ``---`` block. See [FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec].
    NoteRenderer: Renders text notes with references and backlinks.
    ProfileRenderer: Renders kind 0 profiles.
    classify_tags: Raw tags to [TagReference][notebrotr.models.reference.TagReference].
    group_references: Partition references by type, order preserved.
"""

from .frontmatter import EMPTY_BLOCK, FrontmatterCodec
from .note import NoteRenderer, TitleResolver, split_heading
from .profile import ProfileRenderer
from .references import (
    classify_tag,
    classify_tags,
    derive_topic_tags,
    first_of,
    group_references,
    is_reply,
)
from .text import (
    UNTITLED_NOTE,
    clean_content,
    extract_hashtags,
    extract_title,
    sanitize_filename,
    single_line,
)


__all__ = [
    "EMPTY_BLOCK",
    "UNTITLED_NOTE",
    "FrontmatterCodec",
    "NoteRenderer",
    "ProfileRenderer",
    "TitleResolver",
    "classify_tag",
    "classify_tags",
    "clean_content",
    "derive_topic_tags",
    "extract_hashtags",
    "extract_title",
    "first_of",
    "group_references",
    "is_reply",
    "sanitize_filename",
    "single_line",
    "split_heading",
]
