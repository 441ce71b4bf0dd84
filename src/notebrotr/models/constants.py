"""Shared constants for the models layer.

Defines the enumerations used across models, handlers, and renderers.
Placing them here keeps the lower layers free of imports from
``notebrotr.services``.

See Also:
    [Event][notebrotr.models.event.Event]: Carries an
        [EventKind][notebrotr.models.constants.EventKind] value.
    [TagReference][notebrotr.models.reference.TagReference]: Typed by
        [TagType][notebrotr.models.constants.TagType].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EventKind(IntEnum):
    """Nostr event kinds the archive knows how to handle.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        TEXT_NOTE: Kind 1 -- short text note (NIP-01).
        CONTACTS: Kind 3 -- contact list (NIP-02).
        REACTION: Kind 7 -- reaction to a note (NIP-25).
        ZAP_RECEIPT: Kind 9735 -- lightning zap receipt (NIP-57).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1
    CONTACTS = 3
    REACTION = 7
    ZAP_RECEIPT = 9735


class HandlerPriority(IntEnum):
    """Delivery priority per event kind; lower values are delivered first.

    Contacts come first so the follow graph is known, then profiles so
    author names resolve, then notes, and reactions and zaps last so the
    notes they target are already written.
    """

    CONTACTS = 0
    PROFILE = 1
    NOTE = 2
    REACTION = 3
    ZAP = 3


class TagType(StrEnum):
    """Classification of a raw event tag as a typed cross-reference.

    Attributes:
        ROOT: ``e`` tag marked ``root`` -- the thread root.
        REPLY: Any other ``e`` tag -- the note being replied to.
        MENTION: ``p`` tag -- a mentioned public key.
        TOPIC: ``t`` tag -- a hashtag topic.
    """

    ROOT = "root"
    REPLY = "reply"
    MENTION = "mention"
    TOPIC = "topic"


class TagName(StrEnum):
    """First element (discriminator) of the raw tags this project reads."""

    EVENT = "e"
    PUBKEY = "p"
    TOPIC = "t"


class TagMarker(StrEnum):
    """NIP-10 marker keywords found in the fourth position of ``e`` tags."""

    ROOT = "root"
    REPLY = "reply"
    MENTION = "mention"


EVENT_KIND_MAX = 65_535
HEX_KEY_LENGTH = 64
HEX_SIG_LENGTH = 128
