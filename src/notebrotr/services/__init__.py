"""Pipeline assembly: handlers, stores, storage, configuration.

Attributes:
    Archiver: Runs an event stream into the vault.
        See [Archiver][notebrotr.services.archiver.Archiver].
    ArchiverConfig: Pydantic configuration of the archiver.
    ContactHandler, ProfileHandler, NoteHandler, ReactionHandler, ZapHandler:
        Per-kind handlers.
    ReferenceStore, ChronologicalIndex, ContactGraph, ReactionStore, TitleIndex:
        In-memory indexes shared by the handlers.
    Vault, DirectoryVault: Document storage protocol and local adapter.
    load_events: Read a JSON array or JSONL file of events.
"""

from .archiver import Archiver
from .config import ArchiverConfig, BatchConfig, DirectoriesConfig, RenderConfig
from .handlers import (
    ContactHandler,
    NoteHandler,
    ProfileHandler,
    ReactionHandler,
    SignatureCheckedHandler,
    ZapHandler,
)
from .ingest import load_events
from .stores import (
    ChronologicalIndex,
    ContactGraph,
    ReactionCounts,
    ReactionStore,
    ReferenceStore,
    TitleIndex,
)
from .vault import DirectoryVault, Vault


__all__ = [
    "Archiver",
    "ArchiverConfig",
    "BatchConfig",
    "ChronologicalIndex",
    "ContactGraph",
    "ContactHandler",
    "DirectoriesConfig",
    "DirectoryVault",
    "NoteHandler",
    "ProfileHandler",
    "ReactionCounts",
    "ReactionHandler",
    "ReactionStore",
    "ReferenceStore",
    "RenderConfig",
    "SignatureCheckedHandler",
    "TitleIndex",
    "Vault",
    "ZapHandler",
    "load_events",
]
