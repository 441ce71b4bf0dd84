"""
Abstract base class for per-kind event handlers.

A handler owns exactly one event kind. The
[EventDispatcher][notebrotr.core.dispatcher.EventDispatcher] calls
[validate()][notebrotr.core.handler.EventHandler.validate] before every
[process()][notebrotr.core.handler.EventHandler.process] call and
[cleanup()][notebrotr.core.handler.EventHandler.cleanup] once at end of
stream.

See Also:
    [NoteHandler][notebrotr.services.handlers.NoteHandler],
    [ProfileHandler][notebrotr.services.handlers.ProfileHandler],
    [ContactHandler][notebrotr.services.handlers.ContactHandler]:
        Concrete handlers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from .logger import Logger


if TYPE_CHECKING:
    from notebrotr.models import Event


class EventHandler(ABC):
    """Validate and process events of a single kind.

    Subclasses set ``KIND`` and ``PRIORITY`` and implement
    [process()][notebrotr.core.handler.EventHandler.process]. Lower
    priorities are delivered first within a dispatch call.

    Attributes:
        KIND: Event kind this handler accepts.
        PRIORITY: Default delivery priority, overridable per instance.
        HANDLER_NAME: Logger name; defaults to ``handler.<kind>``.

    Note:
        ``validate()`` must not raise. A ``False`` result makes the
        dispatcher skip the event silently.
    """

    KIND: ClassVar[int]
    PRIORITY: ClassVar[int]
    HANDLER_NAME: ClassVar[str | None] = None

    def __init__(self, *, priority: int | None = None) -> None:
        self._priority = self.PRIORITY if priority is None else priority
        self._logger = Logger(self.HANDLER_NAME or f"handler.{self.KIND}")

    @property
    def kind(self) -> int:
        return int(self.KIND)

    @property
    def priority(self) -> int:
        return int(self._priority)

    def validate(self, event: Event) -> bool:
        """Accept well-formed events of this handler's kind.

        Subclasses extend this with kind-specific checks and should call
        ``super().validate(event)`` first.
        """
        return event.kind == self.kind and event.is_well_formed()

    @abstractmethod
    async def process(self, event: Event) -> None:
        """Handle one validated event. Exceptions propagate to the caller."""
        ...

    async def cleanup(self) -> None:  # noqa: B027
        """Called once when the upstream stream signals end of stored events."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind}, priority={self.priority})"
