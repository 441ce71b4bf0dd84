"""
Ordered, batched delivery of events to per-kind handlers.

[EventDispatcher][notebrotr.core.dispatcher.EventDispatcher] keeps a registry
of one [EventHandler][notebrotr.core.handler.EventHandler] per kind and
delivers events strictly one at a time: each ``process()`` call is awaited
before the next starts, so a handler may rely on every higher-priority event
of the same call having been fully processed.

Ordering rules:

* Within one ``process_events()`` call events are sorted by the priority of
  their handler (ascending). Events of unregistered kinds go last. Ties keep
  their input order.
* The priority order is a snapshot taken when the call starts; handlers
  registered during the call do not reorder it.
* ``process_batch()`` sorts each chunk independently. There is no global
  sort across chunks.

Failures are not transactional: a handler exception propagates immediately
and events processed before it stay processed.

Examples:
    ```python
    dispatcher = EventDispatcher()
    dispatcher.register_handler(ProfileHandler(...))
    dispatcher.register_handler(NoteHandler(...))

    progress = await dispatcher.process_batch(events, batch_size=50, delay_ms=250)
    await dispatcher.handle_eose()
    ```
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import DuplicateHandlerError
from .logger import Logger


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from notebrotr.models import Event

    from .handler import EventHandler


@dataclass(slots=True)
class DispatchProgress:
    """Counters for one ``process_batch()`` call.

    Attributes:
        total: Events received.
        processed: Events delivered to a handler.
        skipped: Events without a handler or rejected by ``validate()``.
        chunks: Chunks completed.
        stopped: Whether the stop event ended the batch early.
    """

    total: int = 0
    processed: int = 0
    skipped: int = 0
    chunks: int = 0
    stopped: bool = False
    _monotonic_start: float = field(default_factory=time.monotonic, repr=False)

    @property
    def remaining(self) -> int:
        return self.total - self.processed - self.skipped

    @property
    def elapsed(self) -> float:
        """Seconds since the batch started, rounded to 1 decimal."""
        return round(time.monotonic() - self._monotonic_start, 1)


class EventDispatcher:
    """Registry and sequential delivery loop for event handlers.

    All state is owned by the single task driving the pipeline; no locking
    is performed.
    """

    def __init__(self) -> None:
        self._handlers: dict[int, EventHandler] = {}
        self._logger = Logger("dispatcher")

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def register_handler(self, handler: EventHandler, *, replace: bool = True) -> None:
        """Register *handler* for its kind.

        Args:
            handler: Handler to register.
            replace: When True (default), an existing handler for the same
                kind is replaced. When False, registering an already-known
                kind raises.

        Raises:
            DuplicateHandlerError: If ``replace`` is False and the kind is
                already registered.
        """
        existing = self._handlers.get(handler.kind)
        if existing is not None:
            if not replace:
                raise DuplicateHandlerError(handler.kind)
            self._logger.warning(
                "handler_replaced",
                kind=handler.kind,
                previous=type(existing).__name__,
                handler=type(handler).__name__,
            )
        self._handlers[handler.kind] = handler
        self._logger.debug(
            "handler_registered",
            kind=handler.kind,
            priority=handler.priority,
            handler=type(handler).__name__,
        )

    def has_handler(self, kind: int) -> bool:
        return kind in self._handlers

    def get_handler(self, kind: int) -> EventHandler | None:
        return self._handlers.get(kind)

    def get_ordered_handlers(self) -> list[EventHandler]:
        """Handlers by ascending priority; equal priorities keep registration order."""
        return sorted(self._handlers.values(), key=lambda h: h.priority)

    def reset(self) -> None:
        """Remove every registered handler."""
        self._handlers.clear()
        self._logger.debug("handlers_reset")

    # -------------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------------

    async def process_event(self, event: Event) -> bool:
        """Deliver one event to its handler.

        Missing handlers and failed validation are silent skips.

        Returns:
            True if the event was handed to ``process()``, False if skipped.
        """
        handler = self._handlers.get(event.kind)
        if handler is None or not handler.validate(event):
            self._logger.debug("event_skipped", id=event.id, kind=event.kind)
            return False
        await handler.process(event)
        return True

    async def process_events(self, events: Iterable[Event]) -> int:
        """Sort *events* by handler priority and deliver them one at a time.

        Returns:
            Number of events handed to a handler.
        """
        ordered = self._sort_by_priority(list(events), self._priority_snapshot())
        processed = 0
        for event in ordered:
            if await self.process_event(event):
                processed += 1
        return processed

    async def process_batch(
        self,
        events: Sequence[Event],
        batch_size: int,
        delay_ms: float | None = None,
        *,
        stop_event: asyncio.Event | None = None,
    ) -> DispatchProgress:
        """Deliver *events* in fixed-size chunks, each ordered independently.

        Args:
            events: Events in arrival order.
            batch_size: Maximum events per chunk.
            delay_ms: Pause after each chunk, in milliseconds. Used to pace
                an upstream rate-limited collaborator.
            stop_event: Optional signal that interrupts the pause and
                prevents further chunks from starting.

        Returns:
            [DispatchProgress][notebrotr.core.dispatcher.DispatchProgress]
            counters for the call.

        Raises:
            ValueError: If ``batch_size`` is less than 1.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        progress = DispatchProgress(total=len(events))
        for chunk in self._create_chunks(events, batch_size):
            delivered = await self.process_events(chunk)
            progress.processed += delivered
            progress.skipped += len(chunk) - delivered
            progress.chunks += 1
            self._logger.debug(
                "chunk_processed",
                chunk=progress.chunks,
                events=len(chunk),
                delivered=delivered,
                remaining=progress.remaining,
            )

            if delay_ms:
                await self._pause(delay_ms / 1000, stop_event)
            if stop_event is not None and stop_event.is_set():
                progress.stopped = progress.remaining > 0
                break

        self._logger.info(
            "batch_completed",
            total=progress.total,
            processed=progress.processed,
            skipped=progress.skipped,
            chunks=progress.chunks,
            stopped=progress.stopped,
            elapsed_s=progress.elapsed,
        )
        return progress

    async def handle_eose(self) -> None:
        """Run ``cleanup()`` on every registered handler, one at a time."""
        for handler in list(self._handlers.values()):
            await handler.cleanup()
        self._logger.debug("eose_handled", handlers=len(self._handlers))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _priority_snapshot(self) -> dict[int, int]:
        """Map each registered kind to its current handler priority."""
        return {kind: handler.priority for kind, handler in self._handlers.items()}

    @staticmethod
    def _sort_by_priority(events: list[Event], ranks: dict[int, int]) -> list[Event]:
        unmatched = max(ranks.values(), default=0) + 1
        return sorted(events, key=lambda e: ranks.get(e.kind, unmatched))

    @staticmethod
    def _create_chunks(events: Sequence[Event], size: int) -> list[Sequence[Event]]:
        return [events[i : i + size] for i in range(0, len(events), size)]

    @staticmethod
    async def _pause(seconds: float, stop_event: asyncio.Event | None) -> None:
        if stop_event is None:
            await asyncio.sleep(seconds)
            return
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=seconds)
        except TimeoutError:
            pass
