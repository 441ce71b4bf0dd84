"""
Note document rendering.

[NoteRenderer][notebrotr.documents.note.NoteRenderer] turns a
[NoteFile][notebrotr.models.document.NoteFile] into Markdown. Sections are
separated by a blank line and omitted when empty:

```text
# <title>

---
id: ...
pubkey: ...
...
---

<cleaned content>

## Chronological Links
Previous: [[...]]
Next: [[...]]

## References
### Thread Root
### Replying To
### Mentions
### Topics

## Referenced By
### Replies
### Mentioned In
```

When the previous version of the document is supplied, its frontmatter is
parsed and the freshly computed keys are merged on top, so keys the user
added by hand survive regeneration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from notebrotr.models import TagType

from .frontmatter import FrontmatterCodec
from .references import derive_topic_tags, first_of, group_references
from .text import clean_content, single_line


if TYPE_CHECKING:
    from collections.abc import Sequence

    from notebrotr.models import NoteFile, TagReference


class TitleResolver(Protocol):
    """Looks up the display title of a note or profile by id or pubkey."""

    async def get_title_by_id(self, id: str) -> str | None: ...


_OUTGOING_SECTIONS: tuple[tuple[TagType, str], ...] = (
    (TagType.ROOT, "Thread Root"),
    (TagType.REPLY, "Replying To"),
    (TagType.MENTION, "Mentions"),
    (TagType.TOPIC, "Topics"),
)
_INCOMING_SECTIONS: tuple[tuple[TagType, str], ...] = (
    (TagType.REPLY, "Replies"),
    (TagType.MENTION, "Mentioned In"),
)


def split_heading(text: str) -> str:
    """Drop a leading ``# heading`` line so the frontmatter block is first."""
    if text.startswith("# "):
        _, _, rest = text.partition("\n")
        return rest.lstrip("\n")
    return text


class NoteRenderer:
    """Render notes with resolved cross-reference titles.

    Args:
        resolver: Title lookup for referenced notes and profiles. A missing
            title falls back to the raw id.
        codec: Frontmatter codec; a default one is created when omitted.
    """

    def __init__(self, resolver: TitleResolver, codec: FrontmatterCodec | None = None) -> None:
        self._resolver = resolver
        self._codec = codec or FrontmatterCodec()

    async def render(self, note: NoteFile, existing: str | None = None) -> str:
        """Render *note*, preserving hand-added frontmatter keys from *existing*."""
        required = await self.build_frontmatter(note)
        previous: dict[str, Any] = {}
        if existing:
            previous = self._codec.parse(split_heading(existing)).frontmatter

        sections = [
            f"# {note.title}",
            self._codec.stringify(self._codec.merge(previous, required)),
            clean_content(note.content),
        ]
        if note.previous_note or note.next_note:
            sections.append(await self._format_chronological_links(note))
        if note.references:
            sections.append(
                await self._format_grouped("References", note.references, _OUTGOING_SECTIONS)
            )
        if note.referenced_by:
            sections.append(
                await self._format_grouped("Referenced By", note.referenced_by, _INCOMING_SECTIONS)
            )
        return "\n\n".join(section for section in sections if section)

    async def build_frontmatter(self, note: NoteFile) -> dict[str, Any]:
        """Compute the keys this renderer owns for *note*.

        ``root`` and ``reply_to`` come from the first root/reply reference
        by position and hold the resolved title; ``mentions`` and
        ``topics`` hold raw target ids in reference order.
        """
        frontmatter: dict[str, Any] = {
            "id": note.id,
            "pubkey": note.pubkey,
        }
        if note.author_name:
            frontmatter["author"] = single_line(note.author_name)
        frontmatter["created"] = note.created_at
        frontmatter["kind"] = note.kind
        frontmatter["nostr_tags"] = [list(tag) for tag in note.tags]
        frontmatter["tags"] = derive_topic_tags(note.tags, note.content)

        root = first_of(note.references, TagType.ROOT)
        if root is not None:
            frontmatter["root"] = await self._resolve(root.target_id)
        reply = first_of(note.references, TagType.REPLY)
        if reply is not None:
            frontmatter["reply_to"] = await self._resolve(reply.target_id)

        grouped = group_references(note.references)
        if grouped.get(TagType.MENTION):
            frontmatter["mentions"] = [ref.target_id for ref in grouped[TagType.MENTION]]
        if grouped.get(TagType.TOPIC):
            frontmatter["topics"] = [ref.target_id for ref in grouped[TagType.TOPIC]]
        return frontmatter

    async def _resolve(self, target_id: str) -> str:
        title = await self._resolver.get_title_by_id(target_id)
        return single_line(title) if title else target_id

    async def _link(self, target_id: str) -> str:
        return f"[[{await self._resolve(target_id)}]]"

    async def _format_chronological_links(self, note: NoteFile) -> str:
        lines = ["## Chronological Links"]
        if note.previous_note:
            lines.append(f"Previous: {await self._link(note.previous_note)}")
        if note.next_note:
            lines.append(f"Next: {await self._link(note.next_note)}")
        return "\n".join(lines)

    async def _format_grouped(
        self,
        heading: str,
        references: Sequence[TagReference],
        layout: tuple[tuple[TagType, str], ...],
    ) -> str:
        grouped = group_references(references)
        lines: list[str] = []
        for tag_type, title in layout:
            group = grouped.get(tag_type)
            if not group:
                continue
            lines.append(f"### {title}")
            for ref in group:
                if tag_type == TagType.TOPIC:
                    lines.append(f"- #{ref.target_id}")
                else:
                    lines.append(f"- {await self._link(ref.target_id)}")
        if not lines:
            return ""
        return "\n".join([f"## {heading}", *lines])
