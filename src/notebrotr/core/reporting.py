"""User-visible notice channel.

The document layer reports contained failures (for example a frontmatter
block it could not parse) through an injected
[Reporter][notebrotr.core.reporting.Reporter] instead of a global side
channel. A reporter is fire-and-forget: ``notice()`` returns nothing and
must not raise.

See Also:
    [FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec]:
        The only component that emits notices.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .logger import Logger


@runtime_checkable
class Reporter(Protocol):
    """Capability for surfacing a short message to the user."""

    def notice(self, message: str) -> None: ...


class LoggingReporter:
    """Reporter that writes notices to the structured log at warning level."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger or Logger("notice")

    def notice(self, message: str) -> None:
        self._logger.warning("notice", message=message)


class CollectingReporter:
    """Reporter that keeps every notice in memory, in emission order."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notice(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()
