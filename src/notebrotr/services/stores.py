"""
In-memory indexes shared by the handlers of one archiver run.

* [ReferenceStore][notebrotr.services.stores.ReferenceStore]: outgoing
  references per note and the flipped incoming backlinks.
* [ChronologicalIndex][notebrotr.services.stores.ChronologicalIndex]:
  previous/next note of the same author by ``created_at``.
* [ContactGraph][notebrotr.services.stores.ContactGraph]: latest follow list
  per author.
* [ReactionStore][notebrotr.services.stores.ReactionStore]: likes and zap
  totals per note.
* [TitleIndex][notebrotr.services.stores.TitleIndex]: id/pubkey to document
  title and path, implementing the
  [TitleResolver][notebrotr.documents.note.TitleResolver] protocol.

All stores are single-task structures with no locking; the dispatcher
guarantees sequential access.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, replace
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from notebrotr.core.exceptions import StorageError
from notebrotr.core.logger import Logger
from notebrotr.documents.frontmatter import FrontmatterCodec
from notebrotr.documents.note import split_heading
from notebrotr.models import TagName, TagType


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from notebrotr.models import Event, TagReference

    from .vault import Vault


_BACKLINK_TYPES = frozenset({TagType.ROOT, TagType.REPLY, TagType.MENTION})


# =============================================================================
# References
# =============================================================================


class ReferenceStore:
    """Outgoing references per source note and their flipped backlinks.

    Re-adding the references of a source replaces its previous set; the
    backlinks it contributed are withdrawn first. Topic references have no
    backlink.
    """

    def __init__(self) -> None:
        self._outgoing: dict[str, list[TagReference]] = {}
        self._incoming: dict[str, list[TagReference]] = {}

    def add_references(self, source_id: str, references: Iterable[TagReference]) -> None:
        self._withdraw(source_id)
        refs = list(references)
        self._outgoing[source_id] = refs
        for ref in refs:
            if ref.type in _BACKLINK_TYPES:
                self._incoming.setdefault(ref.target_id, []).append(ref.flipped(source_id))

    def _withdraw(self, source_id: str) -> None:
        for ref in self._outgoing.pop(source_id, []):
            backlinks = self._incoming.get(ref.target_id)
            if backlinks:
                self._incoming[ref.target_id] = [b for b in backlinks if b.target_id != source_id]

    def get_outgoing(self, note_id: str) -> list[TagReference]:
        return list(self._outgoing.get(note_id, ()))

    def get_incoming(self, note_id: str) -> list[TagReference]:
        """Backlinks to *note_id*; ``target_id`` of each holds the source note."""
        return list(self._incoming.get(note_id, ()))

    def mentioned_pubkeys(self) -> list[str]:
        """Every pubkey mentioned by any stored note, first occurrence order."""
        seen: dict[str, None] = {}
        for refs in self._outgoing.values():
            for ref in refs:
                if ref.type == TagType.MENTION:
                    seen.setdefault(ref.target_id, None)
        return list(seen)

    def clear(self) -> None:
        self._outgoing.clear()
        self._incoming.clear()


# =============================================================================
# Chronology
# =============================================================================


class ChronologicalIndex:
    """Per-author timeline of notes ordered by ``(created_at, id)``."""

    def __init__(self) -> None:
        self._timelines: dict[str, list[tuple[int, str]]] = {}
        self._keys: dict[str, tuple[str, int]] = {}

    def add(self, event: Event) -> bool:
        """Insert *event*; returns False if its id is already indexed."""
        if event.id in self._keys:
            return False
        bisect.insort(self._timelines.setdefault(event.pubkey, []), (event.created_at, event.id))
        self._keys[event.id] = (event.pubkey, event.created_at)
        return True

    def neighbours(self, note_id: str) -> tuple[str | None, str | None]:
        """``(previous, next)`` note ids of the same author, None at the ends."""
        key = self._keys.get(note_id)
        if key is None:
            return None, None
        pubkey, created_at = key
        timeline = self._timelines[pubkey]
        index = bisect.bisect_left(timeline, (created_at, note_id))
        previous = timeline[index - 1][1] if index > 0 else None
        following = timeline[index + 1][1] if index + 1 < len(timeline) else None
        return previous, following

    def notes_by(self, pubkey: str) -> list[str]:
        return [note_id for _, note_id in self._timelines.get(pubkey, ())]

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._keys

    def clear(self) -> None:
        self._timelines.clear()
        self._keys.clear()


# =============================================================================
# Contacts
# =============================================================================


class ContactGraph:
    """Follow lists per author. A newer kind 3 event replaces an older one."""

    def __init__(self) -> None:
        self._follows: dict[str, list[str]] = {}
        self._updated_at: dict[str, int] = {}

    def update(self, event: Event) -> bool:
        """Store the ``p`` tags of *event*; returns False if a newer list is known."""
        if self._updated_at.get(event.pubkey, -1) > event.created_at:
            return False
        follows: dict[str, None] = {}
        for tag in event.tag_values(TagName.PUBKEY):
            if len(tag) > 1 and tag[1]:
                follows.setdefault(tag[1], None)
        self._follows[event.pubkey] = list(follows)
        self._updated_at[event.pubkey] = event.created_at
        return True

    def follows(self, pubkey: str) -> list[str]:
        return list(self._follows.get(pubkey, ()))

    def followers(self, pubkey: str) -> list[str]:
        return [author for author, follows in self._follows.items() if pubkey in follows]

    def follows_of_follows(self, pubkey: str) -> list[str]:
        """Second-degree follows, excluding *pubkey* and its direct follows."""
        direct = self._follows.get(pubkey, [])
        excluded = {pubkey, *direct}
        seen: dict[str, None] = {}
        for follow in direct:
            for candidate in self._follows.get(follow, ()):
                if candidate not in excluded:
                    seen.setdefault(candidate, None)
        return list(seen)

    def __len__(self) -> int:
        return len(self._follows)

    def clear(self) -> None:
        self._follows.clear()
        self._updated_at.clear()


# =============================================================================
# Reactions
# =============================================================================


@dataclass(slots=True)
class ReactionCounts:
    """Engagement totals for one note."""

    likes: int = 0
    zaps: int = 0
    zap_amount: int = 0

    def as_frontmatter(self) -> dict[str, int]:
        return {"likes": self.likes, "zaps": self.zaps, "zap_amount": self.zap_amount}


class ReactionStore:
    """Likes and zap totals per target note, counted once per event id.

    Targets whose totals changed since the last
    [drain_dirty()][notebrotr.services.stores.ReactionStore.drain_dirty] are
    tracked so their documents can be updated in one write.
    """

    def __init__(self) -> None:
        self._counts: dict[str, ReactionCounts] = {}
        self._seen: set[str] = set()
        self._dirty: dict[str, None] = {}

    def add_like(self, event_id: str, target_id: str) -> bool:
        if event_id in self._seen:
            return False
        self._seen.add(event_id)
        self._counts.setdefault(target_id, ReactionCounts()).likes += 1
        self._dirty.setdefault(target_id, None)
        return True

    def add_zap(self, event_id: str, target_id: str, amount: int) -> bool:
        if event_id in self._seen:
            return False
        self._seen.add(event_id)
        counts = self._counts.setdefault(target_id, ReactionCounts())
        counts.zaps += 1
        counts.zap_amount += amount
        self._dirty.setdefault(target_id, None)
        return True

    def get_counts(self, target_id: str) -> ReactionCounts:
        counts = self._counts.get(target_id)
        return replace(counts) if counts is not None else ReactionCounts()

    def drain_dirty(self) -> list[str]:
        dirty = list(self._dirty)
        self._dirty.clear()
        return dirty

    def __len__(self) -> int:
        return len(self._counts)

    def clear(self) -> None:
        self._counts.clear()
        self._seen.clear()
        self._dirty.clear()


# =============================================================================
# Titles
# =============================================================================


class TitleIndex:
    """Resolve note ids and profile pubkeys to document titles and paths.

    Titles written during the run are remembered directly. A miss falls back
    to scanning *directories* in the vault: a profile matches when its
    ``aliases`` list contains the key, a note when its ``id`` equals it. The
    title is the file stem, which is also the wiki-link target. Documents
    that cannot be read are logged and skipped.

    Keys whose remembered title differs from the one known before are
    collected until
    [drain_changed()][notebrotr.services.stores.TitleIndex.drain_changed],
    so documents linking to them can be re-rendered.

    Args:
        vault: Document store to scan.
        directories: Vault-relative directories searched on a miss.
        codec: Codec used to read frontmatter of scanned documents.
    """

    def __init__(
        self,
        vault: Vault,
        directories: Sequence[str],
        codec: FrontmatterCodec | None = None,
    ) -> None:
        self._vault = vault
        self._directories = tuple(dict.fromkeys(directories))
        self._codec = codec or FrontmatterCodec()
        self._titles: dict[str, str] = {}
        self._paths: dict[str, str] = {}
        self._misses: set[str] = set()
        self._changed: dict[str, None] = {}
        self._logger = Logger("titles")

    def remember(self, key: str, title: str, path: str | None = None) -> None:
        if self._titles.get(key) != title:
            self._changed.setdefault(key, None)
        self._titles[key] = title
        if path is not None:
            self._paths[key] = path
        self._misses.discard(key)

    def forget(self, key: str) -> None:
        self._titles.pop(key, None)
        self._paths.pop(key, None)

    def drain_changed(self) -> list[str]:
        changed = list(self._changed)
        self._changed.clear()
        return changed

    async def get_title_by_id(self, id: str) -> str | None:
        if id in self._titles:
            return self._titles[id]
        await self.locate(id)
        return self._titles.get(id)

    async def locate(self, id: str) -> str | None:
        """Vault path of the document for *id*, or None when there is none."""
        if id in self._paths:
            return self._paths[id]
        if id in self._misses:
            return None
        path = await self._scan(id)
        if path is None:
            self._misses.add(id)
            return None
        self._paths[id] = path
        self._titles.setdefault(id, PurePosixPath(path).stem)
        return path

    async def _scan(self, key: str) -> str | None:
        for directory in self._directories:
            for path in await self._vault.list(directory):
                try:
                    text = split_heading(await self._vault.read(path))
                except StorageError as e:
                    self._logger.warning("title_scan_skipped", path=path, error=str(e))
                    continue
                frontmatter = self._codec.parse(text).frontmatter
                aliases = frontmatter.get("aliases")
                if frontmatter.get("id") == key or (isinstance(aliases, list) and key in aliases):
                    self._logger.debug("title_found", key=key, path=path)
                    return path
        return None

    def clear(self) -> None:
        self._titles.clear()
        self._paths.clear()
        self._misses.clear()
        self._changed.clear()
