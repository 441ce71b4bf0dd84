"""
Unit tests for utils.validation module.

Tests:
- parse_profile_content decoding
- Profile, contact and note payload predicates
- Reaction and zap receipt predicates, target and amount extraction
"""

import json

import pytest

from notebrotr.models import Event
from notebrotr.utils.validation import (
    is_valid_contact_event,
    is_valid_note_event,
    is_valid_profile_event,
    is_valid_reaction_event,
    is_valid_zap_receipt,
    parse_profile_content,
    parse_zap_amount,
    reaction_target,
)

from factories import BOB, hex_id, make_event


class TestParseProfileContent:
    def test_object(self) -> None:
        assert parse_profile_content('{"name": "a"}') == {"name": "a"}

    @pytest.mark.parametrize("content", ["", "nope", "[1, 2]", '"text"', "null"])
    def test_not_an_object(self, content: str) -> None:
        assert parse_profile_content(content) is None


class TestProfileEvents:
    @pytest.mark.parametrize(
        "metadata",
        [
            {"name": "alice"},
            {"display_name": "Alice"},
            {"name": "alice", "about": "x", "picture": "http://p", "nip05": "a@b"},
            {"name": "alice", "about": None},
            {"name": "alice", "website": 5},
        ],
    )
    def test_valid(self, metadata: dict) -> None:
        assert is_valid_profile_event(make_event(0, json.dumps(metadata)))

    @pytest.mark.parametrize(
        "metadata",
        [
            {},
            {"name": 1},
            {"about": "only about"},
            {"name": "alice", "about": 3},
            {"name": "alice", "nip05": ["x"]},
        ],
    )
    def test_invalid_metadata(self, metadata: dict) -> None:
        assert not is_valid_profile_event(make_event(0, json.dumps(metadata)))

    def test_wrong_kind(self) -> None:
        assert not is_valid_profile_event(make_event(1, '{"name": "a"}'))

    def test_malformed_event(self) -> None:
        assert not is_valid_profile_event(make_event(0, '{"name": "a"}', event_id="xyz"))


class TestContactEvents:
    def test_valid(self, contact_event: Event) -> None:
        assert is_valid_contact_event(contact_event)

    def test_empty_list_valid(self) -> None:
        assert is_valid_contact_event(make_event(3))

    def test_other_tags_ignored(self) -> None:
        assert is_valid_contact_event(make_event(3, tags=[["p", BOB], ["t", "not-a-key"]]))

    @pytest.mark.parametrize("tag", [["p"], ["p", ""], ["p", "b" * 63], ["p", "z" * 64]])
    def test_invalid_pubkey_tag(self, tag: list[str]) -> None:
        assert not is_valid_contact_event(make_event(3, tags=[["p", BOB], tag]))

    def test_wrong_kind(self) -> None:
        assert not is_valid_contact_event(make_event(1, tags=[["p", BOB]]))


class TestNoteEvents:
    def test_valid(self, note_event: Event) -> None:
        assert is_valid_note_event(note_event)

    def test_empty_content_valid(self) -> None:
        assert is_valid_note_event(make_event(1, ""))

    def test_wrong_kind_or_malformed(self) -> None:
        assert not is_valid_note_event(make_event(0, ""))
        assert not is_valid_note_event(make_event(1, "", pubkey="bad"))


class TestReactionEvents:
    def test_target_is_first_event_tag(self) -> None:
        event = make_event(7, "+", [["p", BOB], ["e", hex_id(5)], ["e", hex_id(6)]])
        assert reaction_target(event) == hex_id(5)

    def test_no_target(self) -> None:
        assert reaction_target(make_event(7, "+", [["p", BOB]])) is None
        assert reaction_target(make_event(7, "+", [["e"]])) is None

    def test_valid(self) -> None:
        assert is_valid_reaction_event(make_event(7, "+", [["e", hex_id(5)]]))
        assert is_valid_reaction_event(make_event(7, "-", [["e", hex_id(5)]]))

    @pytest.mark.parametrize("tags", [[], [["e", "not-hex"]], [["p", BOB]]])
    def test_invalid_target(self, tags: list[list[str]]) -> None:
        assert not is_valid_reaction_event(make_event(7, "+", tags))

    def test_wrong_kind(self) -> None:
        assert not is_valid_reaction_event(make_event(1, "+", [["e", hex_id(5)]]))
        assert not is_valid_zap_receipt(make_event(7, "{}", [["e", hex_id(5)]]))

    def test_zap_receipt_valid(self) -> None:
        assert is_valid_zap_receipt(make_event(9735, "{}", [["e", hex_id(5)]]))
        assert not is_valid_zap_receipt(make_event(9735, "{}", [["p", BOB]]))


class TestParseZapAmount:
    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ('{"amount": 21000}', 21000),
            ('{"amount": "500"}', 500),
            ('{"amount": 12.9}', 12),
        ],
    )
    def test_amount(self, content: str, expected: int) -> None:
        assert parse_zap_amount(content) == expected

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[1]",
            "{}",
            '{"amount": 0}',
            '{"amount": -5}',
            '{"amount": true}',
            '{"amount": "lots"}',
            '{"amount": null}',
        ],
    )
    def test_no_amount(self, content: str) -> None:
        assert parse_zap_amount(content) == 0
