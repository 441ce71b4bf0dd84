"""Pure dataclasses for Nostr events, references, and document records.

The models layer is the foundation of the package. It depends only on the
standard library and ``nostr_sdk`` (for optional signature verification).
Every immutable model uses ``@dataclass(frozen=True, slots=True)`` and
validates in ``__post_init__`` so invalid instances never escape the
constructor.

Attributes:
    Event: Immutable NIP-01 event envelope with positional tag preservation.
    TagReference: Typed link (root, reply, mention, topic) derived from a tag.
    ParsedDocument: Frontmatter mapping plus body of a persisted document.
    NoteFile: Render input for a text note.
    ProfileData: Decoded kind 0 profile metadata.
    EventKind: Event kinds with dedicated handlers.
    HandlerPriority: Delivery order of those kinds.
    TagType: Reference classification.
"""

from .constants import (
    EVENT_KIND_MAX,
    EventKind,
    HandlerPriority,
    TagMarker,
    TagName,
    TagType,
)
from .document import NoteFile, ParsedDocument, ProfileData
from .event import Event
from .reference import TagReference


__all__ = [
    "EVENT_KIND_MAX",
    "Event",
    "EventKind",
    "HandlerPriority",
    "NoteFile",
    "ParsedDocument",
    "ProfileData",
    "TagMarker",
    "TagName",
    "TagReference",
    "TagType",
]
