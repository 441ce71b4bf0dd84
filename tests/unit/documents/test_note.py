"""
Unit tests for documents.note module.

Tests:
- Required frontmatter keys and title resolution with raw-id fallback
- Full section layout and omission of empty sections
- Merge with an existing document keeps user-added keys
"""

import pytest

from notebrotr.core.reporting import CollectingReporter
from notebrotr.documents.frontmatter import FrontmatterCodec
from notebrotr.documents.note import NoteRenderer, split_heading
from notebrotr.documents.references import classify_tags
from notebrotr.models import NoteFile, TagReference, TagType


class DictResolver:
    def __init__(self, titles: dict[str, str]) -> None:
        self.titles = titles
        self.calls: list[str] = []

    async def get_title_by_id(self, id: str) -> str | None:
        self.calls.append(id)
        return self.titles.get(id)


def make_note(**overrides: object) -> NoteFile:
    tags = (("e", "X"), ("p", "Y"), ("t", "bitcoin"))
    fields: dict[str, object] = {
        "id": "n1",
        "pubkey": "pk",
        "created_at": 100,
        "kind": 1,
        "tags": tags,
        "content": "Hello\r\n\r\n\r\nworld #Nostr",
        "title": "Hello",
        "references": tuple(classify_tags(tags)),
    }
    fields.update(overrides)
    return NoteFile(**fields)  # type: ignore[arg-type]


@pytest.fixture
def resolver() -> DictResolver:
    return DictResolver({"X": "Parent", "Y": "Bob", "P": "Earlier", "R": "A reply"})


@pytest.fixture
def renderer(resolver: DictResolver, reporter: CollectingReporter) -> NoteRenderer:
    return NoteRenderer(resolver, FrontmatterCodec(reporter))


class TestSplitHeading:
    def test_drops_heading_and_blank_lines(self) -> None:
        assert split_heading("# Title\n\n---\na: b\n---\n") == "---\na: b\n---\n"

    def test_leaves_other_text(self) -> None:
        assert split_heading("---\na: b\n---\n") == "---\na: b\n---\n"
        assert split_heading("#tag text") == "#tag text"


# =============================================================================
# Frontmatter
# =============================================================================


class TestBuildFrontmatter:
    async def test_required_keys(self, renderer: NoteRenderer) -> None:
        frontmatter = await renderer.build_frontmatter(make_note(author_name="Alice"))
        assert frontmatter == {
            "id": "n1",
            "pubkey": "pk",
            "author": "Alice",
            "created": 100,
            "kind": 1,
            "nostr_tags": [["e", "X"], ["p", "Y"], ["t", "bitcoin"]],
            "tags": ["bitcoin", "nostr"],
            "reply_to": "Parent",
            "mentions": ["Y"],
            "topics": ["bitcoin"],
        }

    async def test_unknown_reply_target_falls_back_to_id(self) -> None:
        renderer = NoteRenderer(DictResolver({}))
        frontmatter = await renderer.build_frontmatter(make_note())
        assert frontmatter["reply_to"] == "X"

    async def test_root_and_reply_use_first_by_position(self, resolver: DictResolver) -> None:
        tags = (("e", "R", "", "root"), ("e", "X", "", "reply"), ("e", "P", "", "reply"))
        note = make_note(tags=tags, references=tuple(classify_tags(tags)))
        frontmatter = await NoteRenderer(resolver).build_frontmatter(note)
        assert frontmatter["root"] == "A reply"
        assert frontmatter["reply_to"] == "Parent"
        assert "mentions" not in frontmatter

    async def test_optional_keys_absent(self, renderer: NoteRenderer) -> None:
        note = make_note(tags=(), references=(), content="plain")
        frontmatter = await renderer.build_frontmatter(note)
        assert set(frontmatter) == {"id", "pubkey", "created", "kind", "nostr_tags", "tags"}
        assert frontmatter["tags"] == []


# =============================================================================
# Rendering
# =============================================================================


class TestRender:
    async def test_full_layout(self, renderer: NoteRenderer) -> None:
        note = make_note(
            author_name="Alice",
            previous_note="P",
            referenced_by=(TagReference(TagType.REPLY, "R"),),
        )
        text = await renderer.render(note)
        assert text == "\n".join(
            [
                "# Hello",
                "",
                "---",
                "id: n1",
                "pubkey: pk",
                "author: Alice",
                "created: 100",
                "kind: 1",
                "nostr_tags:",
                '  - ["e", "X"]',
                '  - ["p", "Y"]',
                '  - ["t", "bitcoin"]',
                "tags:",
                "  - bitcoin",
                "  - nostr",
                "reply_to: Parent",
                "mentions:",
                "  - Y",
                "topics:",
                "  - bitcoin",
                "---",
                "",
                "Hello",
                "",
                "world #Nostr",
                "",
                "## Chronological Links",
                "Previous: [[Earlier]]",
                "",
                "## References",
                "### Replying To",
                "- [[Parent]]",
                "### Mentions",
                "- [[Bob]]",
                "### Topics",
                "- #bitcoin",
                "",
                "## Referenced By",
                "### Replies",
                "- [[A reply]]",
            ]
        )

    async def test_empty_sections_omitted(self, renderer: NoteRenderer) -> None:
        text = await renderer.render(make_note(tags=(), references=(), content="Just this."))
        assert "## Chronological Links" not in text
        assert "## References" not in text
        assert "## Referenced By" not in text
        assert text.endswith("---\n\nJust this.")

    async def test_next_link_only(self, renderer: NoteRenderer) -> None:
        text = await renderer.render(make_note(next_note="unknown"))
        assert "## Chronological Links\nNext: [[unknown]]" in text
        assert "Previous:" not in text

    async def test_incoming_mentions(self, renderer: NoteRenderer) -> None:
        note = make_note(referenced_by=(TagReference(TagType.MENTION, "R"),))
        text = await renderer.render(note)
        assert "## Referenced By\n### Mentioned In\n- [[A reply]]" in text

    async def test_incoming_roots_not_listed(self, renderer: NoteRenderer) -> None:
        note = make_note(referenced_by=(TagReference(TagType.ROOT, "R"),))
        assert "## Referenced By" not in await renderer.render(note)


class TestRenderMerge:
    async def test_user_keys_survive(self, renderer: NoteRenderer) -> None:
        first = await renderer.render(make_note(author_name="Old"))
        edited = first.replace("---\n\nHello", "rating: 5\n---\n\nHello", 1)
        second = await renderer.render(make_note(author_name="Alice"), edited)
        assert "rating: 5" in second
        assert "author: Alice" in second
        assert "author: Old" not in second

    async def test_rerender_is_stable(self, renderer: NoteRenderer) -> None:
        note = make_note(author_name="Alice", previous_note="P")
        first = await renderer.render(note)
        assert await renderer.render(note, first) == first

    async def test_plain_existing_text(
        self, renderer: NoteRenderer, reporter: CollectingReporter
    ) -> None:
        text = await renderer.render(make_note(), "some unrelated text")
        assert text.startswith("# Hello\n\n---\nid: n1")
        assert reporter.messages == []
