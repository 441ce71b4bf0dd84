"""
Typed cross-reference extracted from a raw event tag.

References are derived data: they are computed from an event's tags by
[classify_tags()][notebrotr.documents.references.classify_tags], kept in the
[ReferenceStore][notebrotr.services.stores.ReferenceStore], and rendered into
documents. They are never persisted on their own.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ._validation import validate_instance
from .constants import TagType


@dataclass(frozen=True, slots=True)
class TagReference:
    """A single typed link from one note to another note, key, or topic.

    Attributes:
        type: [TagType][notebrotr.models.constants.TagType] of the link.
        target_id: Event id, public key, or lowercase topic.
        marker: NIP-10 marker keyword from the raw tag, if any.
        relay_hint: Relay URL hint from the raw tag, if any.
        position: Index of the source tag in the event's tag list.
    """

    type: TagType
    target_id: str
    marker: str | None = None
    relay_hint: str | None = None
    position: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", TagType(self.type))
        validate_instance(self.target_id, str, "target_id")

    def flipped(self, source_id: str) -> TagReference:
        """Return the incoming view of this reference, pointing back at *source_id*."""
        return replace(self, target_id=source_id)
