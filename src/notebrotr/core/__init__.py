"""Core layer: dispatch pipeline and shared infrastructure.

Depends only on ``notebrotr.models`` and is used by ``notebrotr.documents``
and ``notebrotr.services``.

Attributes:
    EventDispatcher: Handler registry with ordered, batched, sequential
        delivery. See [EventDispatcher][notebrotr.core.dispatcher.EventDispatcher].
    EventHandler: Abstract per-kind handler capability.
        See [EventHandler][notebrotr.core.handler.EventHandler].
    Logger: Structured logger supporting key=value and JSON output.
    Reporter: Injected notice channel for user-visible messages.
    load_yaml: Safe YAML configuration loading.
"""

from .dispatcher import DispatchProgress, EventDispatcher
from .exceptions import (
    ConfigurationError,
    DispatchError,
    DocumentError,
    DuplicateHandlerError,
    FrontmatterError,
    NotebrotrError,
    ProtocolError,
    StorageError,
)
from .handler import EventHandler
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .reporting import CollectingReporter, LoggingReporter, Reporter
from .yaml import load_yaml


__all__ = [
    "CollectingReporter",
    "ConfigurationError",
    "DispatchError",
    "DispatchProgress",
    "DocumentError",
    "DuplicateHandlerError",
    "EventDispatcher",
    "EventHandler",
    "FrontmatterError",
    "Logger",
    "LoggingReporter",
    "NotebrotrError",
    "ProtocolError",
    "Reporter",
    "StorageError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
]
