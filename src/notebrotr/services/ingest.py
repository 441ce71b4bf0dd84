"""Loading event streams from files.

Accepts either a JSON array of wire-shaped events or one JSON object per
line (JSONL). Malformed entries are logged and skipped; only an unreadable
file or an undecodable array aborts the load.
"""

from __future__ import annotations

import json
from pathlib import Path

from notebrotr.core.exceptions import ProtocolError
from notebrotr.core.logger import Logger
from notebrotr.models import Event
from notebrotr.utils.parsing import events_from_dicts, split_event_payload


_logger = Logger("ingest")


def load_events(path: str | Path) -> list[Event]:
    """Read and parse every well-formed event in *path*, in file order.

    Raises:
        ProtocolError: If the file cannot be read, or holds a JSON array
            that does not decode.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as e:
        raise ProtocolError(f"cannot read events from {source}: {e}") from e

    try:
        rows = split_event_payload(text)
    except (json.JSONDecodeError, ValueError) as e:
        raise ProtocolError(f"invalid event payload in {source}: {e}") from e

    events = events_from_dicts(rows)
    _logger.info("events_loaded", path=str(source), rows=len(rows), events=len(events))
    return events
