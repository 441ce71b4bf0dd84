"""
Archiver: end-to-end pipeline from an event stream to vault documents.

Composes the shared stores, the three handlers, and the
[EventDispatcher][notebrotr.core.dispatcher.EventDispatcher]. A run pushes
the events through
[process_batch()][notebrotr.core.dispatcher.EventDispatcher.process_batch]
and then signals end of stream with
[handle_eose()][notebrotr.core.dispatcher.EventDispatcher.handle_eose].

Failures are logged and re-raised; the archiver never continues past a
handler error.

Examples:
    ```python
    vault = DirectoryVault("~/Notes")
    archiver = Archiver.from_yaml("config/archiver.yaml", vault=vault)
    progress = await archiver.run(load_events("events.jsonl"))
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from notebrotr.core.dispatcher import EventDispatcher
from notebrotr.core.logger import Logger
from notebrotr.core.yaml import load_yaml
from notebrotr.documents.frontmatter import FrontmatterCodec

from .config import ArchiverConfig
from .handlers import ContactHandler, NoteHandler, ProfileHandler, ReactionHandler, ZapHandler
from .stores import (
    ChronologicalIndex,
    ContactGraph,
    ReactionStore,
    ReferenceStore,
    TitleIndex,
)


if TYPE_CHECKING:
    import asyncio
    from collections.abc import Sequence
    from pathlib import Path

    from notebrotr.core.dispatcher import DispatchProgress
    from notebrotr.core.reporting import Reporter
    from notebrotr.models import Event

    from .vault import Vault


class Archiver:
    """Turn Nostr events into cross-linked Markdown documents.

    Args:
        vault: Destination document store.
        config: Archiver settings; defaults to ``ArchiverConfig()``.
        reporter: Receives codec notices; defaults to logging them.

    Attributes:
        CONFIG_CLASS: Pydantic model parsed by the factory methods.
    """

    SERVICE_NAME: ClassVar[str] = "archiver"
    CONFIG_CLASS: ClassVar[type[ArchiverConfig]] = ArchiverConfig

    def __init__(
        self,
        vault: Vault,
        config: ArchiverConfig | None = None,
        *,
        reporter: Reporter | None = None,
    ) -> None:
        self._vault = vault
        self._config = config if config is not None else self.CONFIG_CLASS()
        self._logger = Logger(self.SERVICE_NAME)

        dirs = self._config.directories
        codec = FrontmatterCodec(reporter)
        self.references = ReferenceStore()
        self.chronology = ChronologicalIndex()
        self.contacts = ContactGraph()
        self.reactions = ReactionStore()
        self.titles = TitleIndex(
            vault,
            [d for d in (dirs.profiles, dirs.notes, dirs.replies) if d],
            codec,
        )

        verify = self._config.verify_signatures
        self.dispatcher = EventDispatcher()
        self.dispatcher.register_handler(
            ContactHandler(self.contacts, verify_signatures=verify), replace=False
        )
        self.dispatcher.register_handler(
            ProfileHandler(
                vault,
                self.titles,
                dirs,
                codec=codec,
                include_references=self._config.render.include_profile_references,
                verify_signatures=verify,
            ),
            replace=False,
        )
        self.dispatcher.register_handler(
            NoteHandler(
                vault,
                self.titles,
                self.references,
                self.chronology,
                dirs,
                codec=codec,
                verify_signatures=verify,
            ),
            replace=False,
        )
        for handler_class in (ReactionHandler, ZapHandler):
            self.dispatcher.register_handler(
                handler_class(
                    vault, self.titles, self.reactions, codec=codec, verify_signatures=verify
                ),
                replace=False,
            )

    @property
    def config(self) -> ArchiverConfig:
        """The typed archiver configuration (read-only)."""
        return self._config

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, config_path: str | Path, vault: Vault, **kwargs: Any) -> Self:
        """Create an archiver from a YAML configuration file.

        Delegates to [load_yaml()][notebrotr.core.yaml.load_yaml] and then to
        [from_dict()][notebrotr.services.archiver.Archiver.from_dict].
        """
        return cls.from_dict(load_yaml(config_path), vault=vault, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any], vault: Vault, **kwargs: Any) -> Self:
        """Create an archiver from a configuration dictionary.

        Raises:
            pydantic.ValidationError: If *data* does not match ``CONFIG_CLASS``.
        """
        return cls(vault, config=cls.CONFIG_CLASS(**data), **kwargs)

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    async def run(
        self,
        events: Sequence[Event],
        *,
        stop_event: asyncio.Event | None = None,
    ) -> DispatchProgress:
        """Dispatch *events* in configured chunks, then run end-of-stream cleanup.

        Cleanup also runs when *stop_event* ended the batch early, so
        documents written so far get their final links.

        Raises:
            Exception: Any handler or storage failure, after logging it.
        """
        batch = self._config.batch
        self._logger.info("archive_started", events=len(events), batch_size=batch.size)
        try:
            progress = await self.dispatcher.process_batch(
                events, batch.size, batch.delay_ms, stop_event=stop_event
            )
            await self.dispatcher.handle_eose()
        except Exception as e:
            self._logger.error("archive_failed", error=str(e), error_type=type(e).__name__)
            raise

        self._logger.info(
            "archive_completed",
            processed=progress.processed,
            skipped=progress.skipped,
            chunks=progress.chunks,
            stopped=progress.stopped,
        )
        return progress
