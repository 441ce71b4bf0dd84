"""Tolerant parsing of raw event payloads into validated models.

Iterates over raw data, calls a factory for each element, and keeps only
the successfully parsed results. Invalid entries are logged at WARNING
level and skipped.

The module depends only on :mod:`notebrotr.models` and the standard
library.

Examples:
    ```python
    from notebrotr.utils.parsing import events_from_dicts, split_event_payload

    events = events_from_dicts(split_event_payload(path.read_text()))
    ```
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from notebrotr.models import Event


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def models_from_dict(
    rows: Iterable[Any],
    factory: Callable[[dict[str, Any]], _T],
) -> list[_T]:
    """Parse dictionaries into model instances, skipping invalid entries.

    Calls ``factory(row)`` for each dictionary. Non-dict rows and items that
    raise ``ValueError`` or ``TypeError`` are logged and discarded.
    """
    results: list[_T] = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("parse_failed index=%d reason=not_an_object", index)
            continue
        try:
            results.append(factory(row))
        except (ValueError, TypeError) as e:
            logger.warning("parse_failed index=%d id=%s error=%s", index, row.get("id"), e)
    return results


def events_from_dicts(rows: Iterable[Any]) -> list[Event]:
    """Build [Event][notebrotr.models.event.Event] objects, skipping malformed rows."""
    return models_from_dict(rows, Event.from_dict)


def split_event_payload(text: str) -> list[Any]:
    """Decode a JSON array of events, or one JSON value per line.

    Lines that are not valid JSON are logged and skipped. Blank lines are
    ignored.

    Raises:
        ValueError: If *text* starts as a JSON array but does not decode, or
            decodes to something other than a list.
    """
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        payload = json.loads(stripped)
        if not isinstance(payload, list):
            raise ValueError("expected a JSON array of events")
        return payload

    rows: list[Any] = []
    for lineno, line in enumerate(stripped.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as e:
            logger.warning("json_decode_failed line=%d error=%s", lineno, e)
    return rows


__all__ = [
    "events_from_dicts",
    "models_from_dict",
    "split_event_payload",
]
