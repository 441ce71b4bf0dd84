"""
Document-level records consumed by the renderers.

[ParsedDocument][notebrotr.models.document.ParsedDocument] is what the
frontmatter codec returns for previously persisted text;
[NoteFile][notebrotr.models.document.NoteFile] and
[ProfileData][notebrotr.models.document.ProfileData] are the domain records
handlers build from events before rendering.

See Also:
    [FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec]:
        Produces ``ParsedDocument`` instances.
    [NoteRenderer][notebrotr.documents.note.NoteRenderer],
    [ProfileRenderer][notebrotr.documents.profile.ProfileRenderer]:
        Consume ``NoteFile`` and ``ProfileData``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .constants import EventKind
from .event import Event
from .reference import TagReference


@dataclass(slots=True)
class ParsedDocument:
    """Frontmatter mapping plus free-text body of a document.

    The frontmatter dict preserves insertion order, including keys the user
    added by hand.
    """

    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""


@dataclass(frozen=True, slots=True)
class NoteFile:
    """Everything needed to render one text note.

    Attributes:
        id: Event id of the note.
        pubkey: Author public key.
        created_at: Unix timestamp of the note.
        kind: Event kind (normally 1).
        tags: Raw event tags, verbatim.
        content: Raw note content.
        title: Display title (first sentence of the content).
        author_name: Author alias resolved from the profile, if known.
        previous_note: Id of the author's preceding note, if any.
        next_note: Id of the author's following note, if any.
        references: Outgoing references, in tag order.
        referenced_by: Incoming references (backlinks).
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[tuple[str, ...], ...]
    content: str
    title: str
    author_name: str | None = None
    previous_note: str | None = None
    next_note: str | None = None
    references: tuple[TagReference, ...] = ()
    referenced_by: tuple[TagReference, ...] = ()


@dataclass(frozen=True, slots=True)
class ProfileData:
    """Profile metadata published in a kind 0 event.

    Attributes:
        pubkey: Public key the profile belongs to.
        name: Legal/handle name (``name``).
        display_name: Preferred display name (``display_name``).
        about: Free-text biography.
        picture: Avatar URL.
        nip05: NIP-05 internet identifier.
    """

    pubkey: str
    name: str | None = None
    display_name: str | None = None
    about: str | None = None
    picture: str | None = None
    nip05: str | None = None

    @property
    def title(self) -> str:
        """Display name, falling back to name, then to a pubkey-derived label."""
        return self.display_name or self.name or f"Nostr User {self.pubkey[:8]}"

    @classmethod
    def from_event(cls, event: Event) -> ProfileData:
        """Decode the JSON metadata carried by a kind 0 event.

        Non-string optional fields are dropped.

        Raises:
            ValueError: If the event is not kind 0 or its content is not a
                JSON object.
        """
        if event.kind != EventKind.SET_METADATA:
            raise ValueError(f"expected a kind 0 event, got kind {event.kind}")
        try:
            metadata = json.loads(event.content)
        except json.JSONDecodeError as e:
            raise ValueError(f"profile content is not valid JSON: {e}") from e
        if not isinstance(metadata, dict):
            raise ValueError("profile content must be a JSON object")

        def _text(*keys: str) -> str | None:
            for key in keys:
                value = metadata.get(key)
                if isinstance(value, str) and value:
                    return value
            return None

        return cls(
            pubkey=event.pubkey,
            name=_text("name"),
            display_name=_text("display_name", "displayName"),
            about=_text("about"),
            picture=_text("picture"),
            nip05=_text("nip05"),
        )
