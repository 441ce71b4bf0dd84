"""
Concrete event handlers.

| Handler          | Kind | Priority | Effect                                    |
|------------------|------|----------|-------------------------------------------|
| ContactHandler   | 3    | 0        | Updates the contact graph                 |
| ProfileHandler   | 0    | 1        | Writes a profile document                 |
| NoteHandler      | 1    | 2        | Writes a note document, links neighbours  |
| ReactionHandler  | 7    | 3        | Counts `+` reactions on the target note   |
| ZapHandler       | 9735 | 3        | Adds zap receipts to the target note      |

Within one dispatch call contacts are handled before profiles and profiles
before notes, so a note rendered in the same chunk as its author's profile
already sees the author's display name. Reaction and zap totals are merged
into the frontmatter of notes already on disk, so they run last.

See Also:
    [Archiver][notebrotr.services.archiver.Archiver]: Wires these handlers
        to the shared stores and the vault.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notebrotr.core.handler import EventHandler
from notebrotr.documents.frontmatter import FrontmatterCodec
from notebrotr.documents.note import NoteRenderer, split_heading
from notebrotr.documents.profile import ProfileRenderer
from notebrotr.documents.references import classify_tags, is_reply
from notebrotr.documents.text import extract_title, sanitize_filename
from notebrotr.models import EventKind, HandlerPriority, NoteFile, ProfileData, TagType
from notebrotr.utils.validation import (
    is_valid_contact_event,
    is_valid_note_event,
    is_valid_profile_event,
    is_valid_reaction_event,
    is_valid_zap_receipt,
    parse_zap_amount,
    reaction_target,
)


if TYPE_CHECKING:
    from notebrotr.models import Event

    from .config import DirectoriesConfig
    from .stores import ChronologicalIndex, ContactGraph, ReactionStore, ReferenceStore, TitleIndex
    from .vault import Vault


class SignatureCheckedHandler(EventHandler):
    """Handler base that optionally rejects events with a bad signature."""

    def __init__(self, *, verify_signatures: bool = False, priority: int | None = None) -> None:
        super().__init__(priority=priority)
        self._verify_signatures = verify_signatures

    def validate(self, event: Event) -> bool:
        if not super().validate(event):
            return False
        if self._verify_signatures and not event.verify_signature():
            self._logger.warning("signature_invalid", event_id=event.id)
            return False
        return True


async def read_existing(vault: Vault, path: str) -> str | None:
    if await vault.exists(path):
        return await vault.read(path)
    return None


# =============================================================================
# Contacts
# =============================================================================


class ContactHandler(SignatureCheckedHandler):
    """Record kind 3 follow lists in the [ContactGraph][notebrotr.services.stores.ContactGraph]."""

    KIND = EventKind.CONTACTS
    PRIORITY = HandlerPriority.CONTACTS

    def __init__(
        self,
        contacts: ContactGraph,
        *,
        verify_signatures: bool = False,
        priority: int | None = None,
    ) -> None:
        super().__init__(verify_signatures=verify_signatures, priority=priority)
        self._contacts = contacts

    def validate(self, event: Event) -> bool:
        return is_valid_contact_event(event) and super().validate(event)

    async def process(self, event: Event) -> None:
        if self._contacts.update(event):
            self._logger.debug(
                "contacts_updated",
                pubkey=event.pubkey,
                follows=len(self._contacts.follows(event.pubkey)),
            )
        else:
            self._logger.debug("contacts_stale", pubkey=event.pubkey, event_id=event.id)

    async def cleanup(self) -> None:
        self._logger.info("contacts_indexed", authors=len(self._contacts))


# =============================================================================
# Profiles
# =============================================================================


class ProfileHandler(SignatureCheckedHandler):
    """Write one document per profile, keyed by display name.

    Only the newest profile event per pubkey is rendered; older ones that
    arrive later are ignored.
    """

    KIND = EventKind.SET_METADATA
    PRIORITY = HandlerPriority.PROFILE

    def __init__(
        self,
        vault: Vault,
        titles: TitleIndex,
        directories: DirectoriesConfig,
        *,
        codec: FrontmatterCodec | None = None,
        include_references: bool = False,
        verify_signatures: bool = False,
        priority: int | None = None,
    ) -> None:
        super().__init__(verify_signatures=verify_signatures, priority=priority)
        self._vault = vault
        self._titles = titles
        self._directories = directories
        self._renderer = ProfileRenderer(codec)
        self._include_references = include_references
        self._latest: dict[str, int] = {}

    def validate(self, event: Event) -> bool:
        return is_valid_profile_event(event) and super().validate(event)

    def profile_path(self, profile: ProfileData) -> str:
        return f"{self._directories.profiles}/{self._renderer.file_name(profile)}"

    async def process(self, event: Event) -> None:
        if self._latest.get(event.pubkey, -1) > event.created_at:
            self._logger.debug("profile_stale", pubkey=event.pubkey, event_id=event.id)
            return
        self._latest[event.pubkey] = event.created_at

        profile = ProfileData.from_event(event)
        path = self.profile_path(profile)
        existing = await read_existing(self._vault, path)
        content = self._renderer.render(
            profile, existing, include_references=self._include_references
        )
        await self._vault.write(path, content)
        self._titles.remember(profile.pubkey, self._renderer.file_stem(profile), path)
        self._logger.info("profile_written", pubkey=profile.pubkey, path=path)


# =============================================================================
# Notes
# =============================================================================


class NoteHandler(SignatureCheckedHandler):
    """Write one document per text note.

    Each note is rendered with its outgoing references, the backlinks known
    so far, and its chronological neighbours. Notes already written whose
    links changed because of a later event (a new neighbour, a new reply or
    mention) are re-rendered once in
    [cleanup()][notebrotr.services.handlers.NoteHandler.cleanup].
    """

    KIND = EventKind.TEXT_NOTE
    PRIORITY = HandlerPriority.NOTE

    def __init__(
        self,
        vault: Vault,
        titles: TitleIndex,
        references: ReferenceStore,
        chronology: ChronologicalIndex,
        directories: DirectoriesConfig,
        *,
        codec: FrontmatterCodec | None = None,
        verify_signatures: bool = False,
        priority: int | None = None,
    ) -> None:
        super().__init__(verify_signatures=verify_signatures, priority=priority)
        self._vault = vault
        self._titles = titles
        self._references = references
        self._chronology = chronology
        self._directories = directories
        self._renderer = NoteRenderer(titles, codec)
        self._written: dict[str, tuple[Event, str, str]] = {}
        self._stale: dict[str, None] = {}

    def validate(self, event: Event) -> bool:
        return is_valid_note_event(event) and super().validate(event)

    def note_path(self, event: Event, title: str) -> str:
        """Replies go to the replies directory when one is configured."""
        directory = self._directories.notes
        if self._directories.replies and is_reply(event.tags):
            directory = self._directories.replies
        return f"{directory}/{title}.md"

    async def process(self, event: Event) -> None:
        references = classify_tags(event.tags)
        self._references.add_references(event.id, references)
        self._chronology.add(event)

        title = sanitize_filename(extract_title(event.content))
        path = self.note_path(event, title)
        self._titles.remember(event.id, title, path)
        self._written[event.id] = (event, title, path)
        self._stale.pop(event.id, None)

        await self._write(event.id)

        linked = [*self._chronology.neighbours(event.id)]
        linked.extend(ref.target_id for ref in references if ref.type != TagType.TOPIC)
        for note_id in linked:
            if note_id is not None and note_id in self._written and note_id != event.id:
                self._stale.setdefault(note_id, None)

    async def cleanup(self) -> None:
        """Re-render notes whose links changed after they were written.

        A title learned after a note was written (its parent, a mentioned
        note, or its author's profile) also marks that note stale.
        """
        for key in self._titles.drain_changed():
            linked = [*self._chronology.notes_by(key)]
            linked.extend(ref.target_id for ref in self._references.get_incoming(key))
            for note_id in linked:
                if note_id in self._written and note_id != key:
                    self._stale.setdefault(note_id, None)

        stale = list(self._stale)
        self._stale.clear()
        rewritten = 0
        for note_id in stale:
            rewritten += await self._write(note_id)
        self._logger.info(
            "notes_relinked", count=len(stale), rewritten=rewritten, total=len(self._written)
        )

    async def _write(self, note_id: str) -> bool:
        event, title, path = self._written[note_id]
        previous_note, next_note = self._chronology.neighbours(note_id)
        note = NoteFile(
            id=event.id,
            pubkey=event.pubkey,
            created_at=event.created_at,
            kind=event.kind,
            tags=event.tags,
            content=event.content,
            title=title,
            author_name=await self._titles.get_title_by_id(event.pubkey),
            previous_note=previous_note,
            next_note=next_note,
            references=tuple(self._references.get_outgoing(note_id)),
            referenced_by=tuple(self._references.get_incoming(note_id)),
        )
        existing = await read_existing(self._vault, path)
        content = await self._renderer.render(note, existing)
        if content == existing:
            self._logger.debug("note_unchanged", event_id=event.id, path=path)
            return False
        await self._vault.write(path, content)
        self._logger.debug("note_written", event_id=event.id, path=path)
        return True


# =============================================================================
# Reactions and zaps
# =============================================================================


class ReactionHandler(SignatureCheckedHandler):
    """Count kind 7 ``+`` reactions against the note named by their first ``e`` tag.

    Totals are kept in a shared
    [ReactionStore][notebrotr.services.stores.ReactionStore] and merged into
    the target note's frontmatter as ``likes``, ``zaps`` and ``zap_amount``
    during [cleanup()][notebrotr.services.handlers.ReactionHandler.cleanup].
    Targets with no document in the vault are skipped.
    """

    KIND = EventKind.REACTION
    PRIORITY = HandlerPriority.REACTION
    LIKE = "+"

    def __init__(
        self,
        vault: Vault,
        titles: TitleIndex,
        reactions: ReactionStore,
        *,
        codec: FrontmatterCodec | None = None,
        verify_signatures: bool = False,
        priority: int | None = None,
    ) -> None:
        super().__init__(verify_signatures=verify_signatures, priority=priority)
        self._vault = vault
        self._titles = titles
        self._reactions = reactions
        self._codec = codec or FrontmatterCodec()

    def validate(self, event: Event) -> bool:
        return self._accepts(event) and super().validate(event)

    def _accepts(self, event: Event) -> bool:
        return is_valid_reaction_event(event)

    async def process(self, event: Event) -> None:
        target = reaction_target(event)
        if target is None or event.content != self.LIKE:
            self._logger.debug("reaction_ignored", event_id=event.id)
            return
        if self._reactions.add_like(event.id, target):
            self._logger.debug("like_counted", event_id=event.id, target=target)

    async def cleanup(self) -> None:
        """Write pending totals into their target notes."""
        updated = 0
        for target in self._reactions.drain_dirty():
            updated += await self._apply(target)
        self._logger.info("reactions_applied", count=updated, targets=len(self._reactions))

    async def _apply(self, target: str) -> bool:
        path = await self._titles.locate(target)
        if path is None:
            self._logger.debug("reaction_target_missing", target=target)
            return False

        existing = await self._vault.read(path)
        heading = existing.partition("\n")[0] if existing.startswith("# ") else ""
        parsed = self._codec.parse(split_heading(existing))
        if not parsed.frontmatter:
            self._logger.warning("reaction_target_unparsed", target=target, path=path)
            return False

        counts = self._reactions.get_counts(target).as_frontmatter()
        block = self._codec.stringify(self._codec.merge(parsed.frontmatter, counts))
        content = "\n\n".join(section for section in (heading, block, parsed.body) if section)
        if content == existing:
            return False
        await self._vault.write(path, content)
        self._logger.debug("reactions_written", target=target, path=path, **counts)
        return True


class ZapHandler(ReactionHandler):
    """Add kind 9735 zap receipts to the totals of the note they target.

    The receipt's JSON content carries the ``amount``; receipts without a
    positive amount are ignored.
    """

    KIND = EventKind.ZAP_RECEIPT
    PRIORITY = HandlerPriority.ZAP

    def _accepts(self, event: Event) -> bool:
        return is_valid_zap_receipt(event)

    async def process(self, event: Event) -> None:
        target = reaction_target(event)
        amount = parse_zap_amount(event.content)
        if target is None or amount <= 0:
            self._logger.debug("zap_ignored", event_id=event.id)
            return
        if self._reactions.add_zap(event.id, target, amount):
            self._logger.debug("zap_counted", event_id=event.id, target=target, amount=amount)
