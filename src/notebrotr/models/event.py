"""
Immutable Nostr event envelope.

Holds the seven NIP-01 wire fields in a frozen dataclass. Structural types
are checked at construction time so that a malformed envelope never leaves
the constructor; semantic checks (hex lengths, signatures) are exposed as
predicates because handlers treat them as silent skips rather than errors.

See Also:
    [EventHandler.validate()][notebrotr.core.handler.EventHandler.validate]:
        Default handler validation built on
        [is_well_formed()][notebrotr.models.event.Event.is_well_formed].
    [classify_tags()][notebrotr.documents.references.classify_tags]: Reads
        the positional tag structure preserved by this model.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from nostr_sdk import Event as NostrEvent
from nostr_sdk import NostrSdkError

from ._validation import freeze_tags, is_hex, validate_instance, validate_int
from .constants import EVENT_KIND_MAX, HEX_KEY_LENGTH, HEX_SIG_LENGTH


_WIRE_FIELDS: tuple[str, ...] = ("id", "pubkey", "created_at", "kind", "tags", "content", "sig")


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable Nostr event as received from a relay.

    ``tags`` is stored as a tuple of string tuples; the order of tags and the
    position of every element inside a tag are preserved exactly.

    Args:
        id: Event id, 64 hex characters.
        pubkey: Author public key, 64 hex characters.
        created_at: Unix timestamp in seconds.
        kind: Integer event kind (0..65535).
        tags: Ordered list of ordered string lists.
        content: Raw content string.
        sig: Schnorr signature, 128 hex characters.

    Raises:
        TypeError: If a field has the wrong Python type.
        ValueError: If ``created_at`` is negative or ``kind`` is out of range.

    Examples:
        ```python
        event = Event.from_json(raw_line)
        event.kind                  # 1
        event.tag_values("t")       # [("t", "nostr")]
        ```
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: tuple[tuple[str, ...], ...]
    content: str
    sig: str

    def __post_init__(self) -> None:
        validate_instance(self.id, str, "id")
        validate_instance(self.pubkey, str, "pubkey")
        validate_int(self.created_at, "created_at")
        validate_int(self.kind, "kind", maximum=EVENT_KIND_MAX)
        validate_instance(self.content, str, "content")
        validate_instance(self.sig, str, "sig")
        object.__setattr__(self, "tags", freeze_tags(self.tags, "tags"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an [Event][notebrotr.models.event.Event] from a wire-shaped mapping.

        Raises:
            ValueError: If any of the seven wire fields is missing.
            TypeError: If a field has the wrong type.
        """
        missing = [name for name in _WIRE_FIELDS if name not in data]
        if missing:
            raise ValueError(f"event is missing fields: {', '.join(missing)}")
        return cls(**{name: data[name] for name in _WIRE_FIELDS})

    @classmethod
    def from_json(cls, raw: str) -> Event:
        """Parse a single JSON-encoded event object."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError(f"event JSON must be an object, got {type(data).__name__}")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation with tags as lists."""
        return {
            "id": self.id,
            "pubkey": self.pubkey,
            "created_at": self.created_at,
            "kind": self.kind,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
            "sig": self.sig,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def tag_values(self, name: str) -> list[tuple[str, ...]]:
        """Return every tag whose discriminator equals *name*, in order."""
        return [tag for tag in self.tags if tag and tag[0] == name]

    def is_well_formed(self) -> bool:
        """Whether id, pubkey, and sig have the hex lengths NIP-01 requires."""
        return (
            is_hex(self.id, HEX_KEY_LENGTH)
            and is_hex(self.pubkey, HEX_KEY_LENGTH)
            and is_hex(self.sig, HEX_SIG_LENGTH)
        )

    def verify_signature(self) -> bool:
        """Verify the event id and Schnorr signature with ``nostr_sdk``.

        Returns:
            True if both the id hash and the signature check out. False if
            the SDK rejects the event or cannot parse it.
        """
        try:
            return bool(NostrEvent.from_json(self.to_json()).verify())
        except NostrSdkError:
            return False
