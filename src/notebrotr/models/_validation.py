"""Shared validation helpers for frozen dataclass models.

Private module -- not part of the public API. Used by ``__post_init__``
methods in sibling model modules to enforce runtime type constraints.
"""

from __future__ import annotations

import re
from typing import Any


_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_int(value: Any, name: str, *, minimum: int = 0, maximum: int | None = None) -> None:
    """Raise if *value* is not an ``int`` (``bool`` excluded) inside the given bounds."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be <= {maximum}")


def freeze_tags(value: Any, name: str) -> tuple[tuple[str, ...], ...]:
    """Convert a list of string lists into a tuple of string tuples.

    Raises:
        TypeError: If *value* is not a sequence of sequences of ``str``.
    """
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise TypeError(f"{name} must be a list of lists, got {type(value).__name__}")
    frozen: list[tuple[str, ...]] = []
    for index, tag in enumerate(value):
        if isinstance(tag, (str, bytes)) or not isinstance(tag, (list, tuple)):
            raise TypeError(f"{name}[{index}] must be a list, got {type(tag).__name__}")
        for item in tag:
            if not isinstance(item, str):
                raise TypeError(f"{name}[{index}] must contain only str values")
        frozen.append(tuple(tag))
    return tuple(frozen)


def is_hex(value: Any, length: int) -> bool:
    """Return True if *value* is a hex string of exactly *length* characters."""
    return isinstance(value, str) and len(value) == length and bool(_HEX_RE.match(value))
