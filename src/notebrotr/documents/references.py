"""
Classification of raw event tags into typed cross-references.

Tag positional semantics follow NIP-01/NIP-10:

```text
["e", <event-id>, <relay-hint>, <marker>]   -> root if marker == "root", else reply
["p", <pubkey>, <relay-hint>]               -> mention
["t", <topic>]                              -> topic (lowercased)
```

Tags without a target, and tags with any other discriminator, produce no
reference.

See Also:
    [TagReference][notebrotr.models.reference.TagReference]: The produced type.
    [NoteRenderer][notebrotr.documents.note.NoteRenderer]: Renders grouped
        references.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notebrotr.models import TagMarker, TagName, TagReference, TagType

from .text import extract_hashtags


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def _element(tag: Sequence[str], index: int) -> str | None:
    """Return ``tag[index]`` or None when absent or empty."""
    if len(tag) > index and tag[index]:
        return tag[index]
    return None


def classify_tag(tag: Sequence[str], position: int | None = None) -> TagReference | None:
    """Classify a single raw tag, or return None if it carries no reference."""
    if not tag:
        return None
    name, target = tag[0], _element(tag, 1)
    if target is None:
        return None

    if name == TagName.EVENT:
        marker = _element(tag, 3)
        return TagReference(
            type=TagType.ROOT if marker == TagMarker.ROOT else TagType.REPLY,
            target_id=target,
            marker=marker,
            relay_hint=_element(tag, 2),
            position=position,
        )
    if name == TagName.PUBKEY:
        return TagReference(
            type=TagType.MENTION,
            target_id=target,
            relay_hint=_element(tag, 2),
            position=position,
        )
    if name == TagName.TOPIC:
        return TagReference(type=TagType.TOPIC, target_id=target.lower(), position=position)
    return None


def classify_tags(tags: Iterable[Sequence[str]]) -> list[TagReference]:
    """Classify every tag of an event, keeping tag order."""
    references = []
    for position, tag in enumerate(tags):
        reference = classify_tag(tag, position)
        if reference is not None:
            references.append(reference)
    return references


def group_references(references: Iterable[TagReference]) -> dict[TagType, list[TagReference]]:
    """Partition *references* by type, preserving order inside each group.

    Only types that occur are present in the result.
    """
    grouped: dict[TagType, list[TagReference]] = {}
    for reference in references:
        grouped.setdefault(reference.type, []).append(reference)
    return grouped


def first_of(references: Iterable[TagReference], tag_type: TagType) -> TagReference | None:
    """First reference of *tag_type* by list position."""
    return next((ref for ref in references if ref.type == tag_type), None)


def derive_topic_tags(tags: Iterable[Sequence[str]], content: str) -> list[str]:
    """Union of ``t`` tag topics and content hashtags, lowercased and deduplicated.

    Tag topics come first, then hashtags not already present.
    """
    topics: dict[str, None] = {}
    for tag in tags:
        if tag and tag[0] == TagName.TOPIC:
            topic = _element(tag, 1)
            if topic is not None:
                topics.setdefault(topic.lower(), None)
    for hashtag in extract_hashtags(content):
        topics.setdefault(hashtag, None)
    return list(topics)


def is_reply(tags: Iterable[Sequence[str]]) -> bool:
    """Whether any ``e`` tag is not marked ``root``."""
    return any(
        tag and tag[0] == TagName.EVENT and _element(tag, 3) != TagMarker.ROOT for tag in tags
    )
