"""notebrotr exception hierarchy.

Exception hierarchy:

```text
NotebrotrError (base -- never raised directly)
├── ConfigurationError       -- config validation, missing file, bad YAML
├── DispatchError            -- handler registry misuse
│   └── DuplicateHandlerError -- strict registration of an already-registered kind
├── DocumentError            -- document synthesis failures
│   └── FrontmatterError      -- frontmatter grammar violation (codec-internal)
├── ProtocolError            -- malformed event JSON at ingestion
└── StorageError             -- vault read/write failures
```

Handler exceptions are never wrapped: they propagate out of the
[EventDispatcher][notebrotr.core.dispatcher.EventDispatcher] unchanged.

See Also:
    [FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec]:
        Catches [FrontmatterError][notebrotr.core.exceptions.FrontmatterError]
        at its boundary and answers with a fallback.
"""

from __future__ import annotations


class NotebrotrError(Exception):
    """Base exception for all notebrotr errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(NotebrotrError):
    """Invalid or missing configuration (YAML file, CLI flags)."""


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class DispatchError(NotebrotrError):
    """Base for handler registry errors."""


class DuplicateHandlerError(DispatchError):
    """A handler for this kind is already registered and replacement was refused.

    Attributes:
        kind: The event kind that was registered twice.
    """

    def __init__(self, kind: int) -> None:
        super().__init__(f"a handler for kind {kind} is already registered")
        self.kind = kind


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class DocumentError(NotebrotrError):
    """Base for document synthesis errors."""


class FrontmatterError(DocumentError):
    """Frontmatter text or data that the codec grammar cannot handle.

    Raised only inside the codec; callers of
    [FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec]
    never observe it.
    """


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(NotebrotrError):
    """Event input that does not follow the NIP-01 wire shape."""


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class StorageError(NotebrotrError):
    """Failed to read or write a document in the vault."""
