r"""notebrotr -- Turn Nostr event streams into cross-linked Markdown notes.

Signed events are dispatched in priority order to per-kind handlers, which
render notes and profiles into a vault of Markdown documents with
frontmatter, thread links, backlinks, and chronological navigation.
Re-running over the same vault keeps keys users added by hand.

Imports flow strictly downward:

```text
              services         Handlers, stores, vault, archiver
             /   |    \
          core documents utils Dispatch, codec and rendering, parsing
             \   |    /
              models           Frozen dataclasses
```

Attributes:
    models: Event, TagReference, document records, constants.
    core: Dispatcher, handler base, exceptions, logging, reporting, YAML.
    documents: Frontmatter codec, tag classification, note/profile renderers.
    utils: Event payload parsing and validation predicates.
    services: Concrete handlers, stores, vault adapter, archiver.

Note:
    Top-level imports (``from notebrotr import Archiver``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("notebrotr")

__all__ = [
    "Archiver",
    "ArchiverConfig",
    "DirectoryVault",
    "Event",
    "EventDispatcher",
    "EventHandler",
    "FrontmatterCodec",
    "Logger",
    "NoteRenderer",
    "ProfileRenderer",
    "TagReference",
    "TagType",
    "classify_tags",
    "load_events",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "EventDispatcher": ("notebrotr.core", "EventDispatcher"),
    "EventHandler": ("notebrotr.core", "EventHandler"),
    "Logger": ("notebrotr.core", "Logger"),
    "Event": ("notebrotr.models", "Event"),
    "TagReference": ("notebrotr.models", "TagReference"),
    "TagType": ("notebrotr.models", "TagType"),
    "FrontmatterCodec": ("notebrotr.documents", "FrontmatterCodec"),
    "NoteRenderer": ("notebrotr.documents", "NoteRenderer"),
    "ProfileRenderer": ("notebrotr.documents", "ProfileRenderer"),
    "classify_tags": ("notebrotr.documents", "classify_tags"),
    "Archiver": ("notebrotr.services", "Archiver"),
    "ArchiverConfig": ("notebrotr.services", "ArchiverConfig"),
    "DirectoryVault": ("notebrotr.services", "DirectoryVault"),
    "load_events": ("notebrotr.services", "load_events"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'notebrotr' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
