"""Semantic validation of kind-specific event payloads.

These predicates never raise: handlers call them from
[validate()][notebrotr.core.handler.EventHandler.validate] and treat a
False result as a silent skip.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any

from notebrotr.models import EventKind, TagName
from notebrotr.models._validation import is_hex
from notebrotr.models.constants import HEX_KEY_LENGTH


if TYPE_CHECKING:
    from notebrotr.models import Event


_OPTIONAL_PROFILE_FIELDS: tuple[str, ...] = ("about", "picture", "nip05")


def parse_profile_content(content: str) -> dict[str, Any] | None:
    """Decode profile JSON, returning None unless it is an object."""
    try:
        metadata = json.loads(content)
    except json.JSONDecodeError:
        return None
    return metadata if isinstance(metadata, dict) else None


def is_valid_profile_event(event: Event) -> bool:
    """Kind 0 with a JSON object naming the user.

    Requires a string ``name`` or ``display_name``; ``about``, ``picture``
    and ``nip05`` must be strings when present.
    """
    if event.kind != EventKind.SET_METADATA or not event.is_well_formed():
        return False
    metadata = parse_profile_content(event.content)
    if metadata is None:
        return False
    if not any(isinstance(metadata.get(key), str) for key in ("name", "display_name")):
        return False
    return all(
        metadata.get(key) is None or isinstance(metadata[key], str)
        for key in _OPTIONAL_PROFILE_FIELDS
    )


def is_valid_contact_event(event: Event) -> bool:
    """Kind 3 whose ``p`` tags all carry a hex public key."""
    if event.kind != EventKind.CONTACTS or not event.is_well_formed():
        return False
    return all(
        len(tag) > 1 and is_hex(tag[1], HEX_KEY_LENGTH) for tag in event.tag_values(TagName.PUBKEY)
    )


def is_valid_note_event(event: Event) -> bool:
    return event.kind == EventKind.TEXT_NOTE and event.is_well_formed()


def reaction_target(event: Event) -> str | None:
    """Id of the note a reaction or zap receipt points at (first ``e`` tag)."""
    for tag in event.tag_values(TagName.EVENT):
        return tag[1] if len(tag) > 1 and tag[1] else None
    return None


def _has_hex_target(event: Event) -> bool:
    target = reaction_target(event)
    return target is not None and is_hex(target, HEX_KEY_LENGTH)


def is_valid_reaction_event(event: Event) -> bool:
    """Kind 7 whose first ``e`` tag names a note id."""
    return event.kind == EventKind.REACTION and event.is_well_formed() and _has_hex_target(event)


def is_valid_zap_receipt(event: Event) -> bool:
    """Kind 9735 whose first ``e`` tag names a note id."""
    return (
        event.kind == EventKind.ZAP_RECEIPT and event.is_well_formed() and _has_hex_target(event)
    )


def parse_zap_amount(content: str) -> int:
    """Positive ``amount`` of a zap receipt's JSON content, else 0.

    Numeric strings are accepted; fractions are truncated.
    """
    data = parse_profile_content(content)
    if data is None:
        return 0
    amount = data.get("amount")
    if isinstance(amount, bool):
        return 0
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return 0
    return int(value) if math.isfinite(value) and value > 0 else 0
