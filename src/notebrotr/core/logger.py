"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module. Every message is a short
snake_case event name followed by keyword fields:

```text
info dispatcher chunk_processed chunk=2 events=50 skipped=3
```

[StructuredFormatter][notebrotr.core.logger.StructuredFormatter] is installed
on the root handler by the CLI so that plain ``logging.getLogger()`` calls in
the models and documents layers share the same output shape.

Examples:
    ```python
    from notebrotr.core.logger import Logger

    logger = Logger("archiver")
    logger.info("run_started", events=120, batch_size=50)

    json_logger = Logger("archiver", json_output=True)
    json_logger.info("run_started", events=120)
    # {"timestamp": "...", "level": "info", "service": "archiver", ...}
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


_QUOTE_TRIGGERS = frozenset(" =\"'")


def _clip(value: Any, limit: int | None) -> str:
    text = str(value)
    if not limit or len(text) <= limit:
        return text
    return f"{text[:limit]}...<truncated {len(text) - limit} chars>"


def _render_value(text: str) -> str:
    if text and not _QUOTE_TRIGGERS.intersection(text):
        return text
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Render *kwargs* as ``key=value`` fields separated by spaces.

    Empty values and values holding a space, ``=`` or a quote are wrapped
    in double quotes. Each value is clipped to *max_value_length*
    characters; None disables clipping. *prefix* is prepended only when
    there is at least one field.
    """
    if not kwargs:
        return ""
    fields = (
        f"{key}={_render_value(_clip(value, max_value_length))}" for key, value in kwargs.items()
    )
    return prefix + " ".join(fields)


class StructuredFormatter(logging.Formatter):
    """Render every record as ``level name message key=value ...``.

    Reads the ``structured_kv`` extra attached by
    [Logger][notebrotr.core.logger.Logger]; records without it are emitted
    with the same prefix and no fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            base += format_kv_pairs(extra)
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


class Logger:
    """Structured logger that appends keyword arguments as fields.

    Mirrors the standard logging methods, each taking an event name and
    ``**kwargs``. In JSON mode the whole record is serialized into the
    message; otherwise fields travel in the ``structured_kv`` extra and are
    rendered by [StructuredFormatter][notebrotr.core.logger.StructuredFormatter].
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Logger name, passed to ``logging.getLogger``.
            json_output: Emit JSON objects instead of key=value pairs.
            max_value_length: Per-value truncation limit. Defaults to 1000.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def _format_json(self, msg: str, level: str, kwargs: dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "service": self._logger.name,
            "message": msg,
            **kwargs,
        }
        return json.dumps(record, default=str)

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        limit = self._max_value_length
        fields = {k: _clip(v, limit) if len(str(v)) > limit else v for k, v in kwargs.items()}
        return {"structured_kv": fields}

    def _log(
        self,
        level: int,
        msg: str,
        kwargs: dict[str, Any],
        *,
        exc_info: bool = False,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            label = "error" if exc_info else logging.getLevelName(level).lower()
            self._logger.log(level, self._format_json(msg, label, kwargs), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)
