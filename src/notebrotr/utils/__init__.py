"""Event payload parsing and kind-specific validation.

The utils layer depends only on [notebrotr.models][notebrotr.models]; it
has no imports from ``notebrotr.core`` or ``notebrotr.services``.

Attributes:
    parsing: Tolerant conversion of raw JSON payloads into
        [Event][notebrotr.models.event.Event] objects.
    validation: Predicates for profile, contact list, note, reaction and
        zap receipt payloads.
"""

from .parsing import events_from_dicts, models_from_dict, split_event_payload
from .validation import (
    is_valid_contact_event,
    is_valid_note_event,
    is_valid_profile_event,
    is_valid_reaction_event,
    is_valid_zap_receipt,
    parse_profile_content,
    parse_zap_amount,
    reaction_target,
)


__all__ = [
    "events_from_dicts",
    "is_valid_contact_event",
    "is_valid_note_event",
    "is_valid_profile_event",
    "is_valid_reaction_event",
    "is_valid_zap_receipt",
    "models_from_dict",
    "parse_profile_content",
    "parse_zap_amount",
    "reaction_target",
    "split_event_payload",
]
