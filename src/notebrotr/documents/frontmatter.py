"""
Frontmatter parser, serializer, and merger.

Documents have the shape::

    ---
    <block>
    ---
    <body>

The block uses a small line-oriented grammar, not full YAML:

* ``key: value`` -- a top-level scalar, stored as the **raw string**
  (never coerced).
* ``key: [a, "b", 3]`` -- a flow list; elements are coerced and unquoted
  ``[...]`` elements become nested lists.
* ``key:`` followed by ``- value`` lines -- a block list; elements are
  coerced. ``- [a, b]`` appends a nested list.
* Indentation is not significant when parsing.

Coercion of list elements: a double-quoted value becomes ``str`` (with
``\\"``, ``\\\\`` and ``\\n`` unescaped), ``true``/``false`` become ``bool``,
``null`` becomes ``None``, JSON-style numbers become ``int``/``float``, and
everything else stays ``str``. The asymmetry between top-level scalars and
list elements is part of the format: previously written documents depend
on it.

[FrontmatterCodec][notebrotr.documents.frontmatter.FrontmatterCodec] wraps
the grammar functions in an error boundary: failures are logged, reported
once through the injected [Reporter][notebrotr.core.reporting.Reporter], and
answered with a fallback value. The codec never raises.

Examples:
    ```python
    codec = FrontmatterCodec(reporter)
    parsed = codec.parse(existing_text)
    merged = codec.merge(parsed.frontmatter, {"id": event.id, "kind": 1})
    block = codec.stringify(merged)
    ```
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from notebrotr.core.exceptions import FrontmatterError
from notebrotr.core.logger import Logger
from notebrotr.core.reporting import LoggingReporter, Reporter
from notebrotr.models import ParsedDocument


DELIMITER = "---"
EMPTY_BLOCK = f"{DELIMITER}\n{DELIMITER}"

_DOCUMENT_RE = re.compile(r"^---\n(?:([\s\S]*?)\n)?---\n?([\s\S]*)$")
_KEY_VALUE_RE = re.compile(r"^([^:]+):\s*(.*)$")
_NUMBER_RE = re.compile(r"^-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?$")
_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "null": None}

_INDENT = "  "
_MAX_FLOW_DEPTH = 2


# =============================================================================
# Parsing
# =============================================================================


def _unquote(value: str) -> str:
    out: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            escaped = next(chars, "")
            out.append({"n": "\n", '"': '"', "\\": "\\"}.get(escaped, "\\" + escaped))
        else:
            out.append(char)
    return "".join(out)


def coerce_scalar(value: str) -> Any:
    """Coerce one list-element scalar to its Python value."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return _unquote(value[1:-1])
    if value in _KEYWORDS:
        return _KEYWORDS[value]
    if _NUMBER_RE.match(value):
        if "." not in value and "e" not in value and "E" not in value:
            return int(value)
        number = float(value)
        if math.isfinite(number):
            return number
    return value


def parse_flow_list(content: str) -> list[Any]:
    """Parse the inside of a ``[...]`` flow list.

    Splits on commas outside double quotes and outside nested brackets.
    Unquoted bracketed elements are parsed as nested lists; every other
    element is coerced.
    """
    items: list[Any] = []
    current: list[str] = []
    in_quotes = False
    depth = 0
    previous = ""

    for char in content:
        if char == '"' and previous != "\\":
            in_quotes = not in_quotes
        elif not in_quotes:
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
            elif char == "," and depth == 0:
                items.append(_parse_element("".join(current).strip()))
                current = []
                previous = char
                continue
        current.append(char)
        # an escaped backslash must not escape the following quote
        previous = "" if previous == "\\" and char == "\\" else char

    last = "".join(current).strip()
    if last:
        items.append(_parse_element(last))
    return items


def _parse_element(value: str) -> Any:
    if _is_flow(value):
        return parse_flow_list(value[1:-1])
    return coerce_scalar(value)


def _is_flow(value: str) -> bool:
    return value.startswith("[") and value.endswith("]")


def parse_block(block: str) -> dict[str, Any]:
    """Parse the text between the delimiters into an ordered mapping."""
    result: dict[str, Any] = {}
    current_key: str | None = None

    for line in block.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        if trimmed.startswith("- "):
            if current_key is None:
                continue
            value = trimmed[2:].strip()
            items = result.get(current_key)
            if not isinstance(items, list):
                items = result[current_key] = []
            items.append(_parse_element(value))
            continue

        match = _KEY_VALUE_RE.match(trimmed)
        if match is None:
            continue
        current_key = match.group(1).strip()
        value = match.group(2).strip()
        if not value:
            result[current_key] = []
        elif _is_flow(value):
            result[current_key] = parse_flow_list(value[1:-1])
        else:
            result[current_key] = value

    return result


# =============================================================================
# Serialization
# =============================================================================


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        raise FrontmatterError(f"cannot serialize non-finite number {value!r}")
    return str(value)


def _format_atom(value: Any) -> str | None:
    """Bare text for bool/None/number values, or None for anything else."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    return None


def _format_flow_item(value: Any, depth: int) -> str:
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (list, tuple)):
        if depth >= _MAX_FLOW_DEPTH:
            raise FrontmatterError("lists nested more than two levels are not supported")
        return "[" + ", ".join(_format_flow_item(v, depth + 1) for v in value) + "]"
    atom = _format_atom(value)
    if atom is None:
        raise FrontmatterError(f"unsupported list element type {type(value).__name__}")
    return atom


def _format_block_item(value: Any) -> str:
    if isinstance(value, str):
        if "\n" in value or value != value.strip() or coerce_scalar(value) != value:
            return _quote(value)
        if not value or _is_flow(value) or value.startswith('"'):
            return _quote(value)
        return value
    atom = _format_atom(value)
    if atom is None:
        raise FrontmatterError(f"unsupported list element type {type(value).__name__}")
    return atom


def _validate_key(key: Any) -> str:
    if not isinstance(key, str) or not key.strip():
        raise FrontmatterError(f"frontmatter keys must be non-empty strings, got {key!r}")
    if ":" in key or "\n" in key or key.lstrip().startswith("- "):
        raise FrontmatterError(f"frontmatter key {key!r} cannot be represented")
    return key


def _render_entry(key: Any, value: Any, level: int) -> list[str]:
    spaces = _INDENT * level
    key = _validate_key(key)

    if value is None:
        return [f"{spaces}{key}:"]

    if isinstance(value, str):
        if "\n" in value:
            raise FrontmatterError(f"value of {key!r} spans multiple lines")
        return [f"{spaces}{key}: {value}"]

    if isinstance(value, (list, tuple)):
        if not value:
            return [f"{spaces}{key}: []"]
        lines = [f"{spaces}{key}:"]
        for item in value:
            if isinstance(item, (list, tuple)):
                lines.append(f"{spaces}{_INDENT}- {_format_flow_item(item, 0)}")
            else:
                lines.append(f"{spaces}{_INDENT}- {_format_block_item(item)}")
        return lines

    if isinstance(value, Mapping):
        lines = [f"{spaces}{key}:"]
        for sub_key, sub_value in value.items():
            lines.extend(_render_entry(sub_key, sub_value, level + 1))
        return lines

    atom = _format_atom(value)
    if atom is None:
        raise FrontmatterError(f"unsupported value type {type(value).__name__} for {key!r}")
    return [f"{spaces}{key}: {atom}"]


def render_block(frontmatter: Mapping[str, Any]) -> str:
    """Serialize *frontmatter* between ``---`` delimiters.

    Top-level keys whose value is None or a blank string are skipped.

    Raises:
        FrontmatterError: If a key or value cannot be represented.
    """
    lines: list[str] = [DELIMITER]
    for key, value in frontmatter.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        lines.extend(_render_entry(key, value, 0))
    lines.append(DELIMITER)
    return "\n".join(lines)


# =============================================================================
# Codec
# =============================================================================


class FrontmatterCodec:
    """Error-contained parse/stringify/merge of document frontmatter.

    Args:
        reporter: Receives one user-visible notice per contained failure.
            Defaults to a [LoggingReporter][notebrotr.core.reporting.LoggingReporter].
    """

    PARSE_FAILED_NOTICE = "Error parsing note frontmatter"
    STRINGIFY_FAILED_NOTICE = "Error creating note frontmatter"

    def __init__(self, reporter: Reporter | None = None) -> None:
        self._reporter: Reporter = reporter or LoggingReporter()
        self._logger = Logger("frontmatter")

    def parse(self, text: str) -> ParsedDocument:
        """Split *text* into frontmatter and body.

        Text without a leading ``---`` block is returned whole as the body
        with empty frontmatter. The body of a delimited document is
        stripped of surrounding whitespace.

        On failure the original text is returned as the body with empty
        frontmatter.
        """
        try:
            match = _DOCUMENT_RE.match(text)
            if match is None:
                return ParsedDocument(frontmatter={}, body=text)
            block, rest = match.group(1) or "", match.group(2) or ""
            return ParsedDocument(frontmatter=parse_block(block), body=rest.strip())
        except Exception as e:  # Intentionally broad: codec error boundary
            self._logger.error(
                "frontmatter_parse_failed", error=str(e), error_type=type(e).__name__
            )
            self._reporter.notice(self.PARSE_FAILED_NOTICE)
            return ParsedDocument(frontmatter={}, body=text)

    def stringify(self, frontmatter: Mapping[str, Any]) -> str:
        """Serialize *frontmatter* as a delimited block.

        On failure an empty block (``---\\n---``) is returned.
        """
        try:
            return render_block(frontmatter)
        except Exception as e:  # Intentionally broad: codec error boundary
            self._logger.error(
                "frontmatter_stringify_failed", error=str(e), error_type=type(e).__name__
            )
            self._reporter.notice(self.STRINGIFY_FAILED_NOTICE)
            return EMPTY_BLOCK

    @staticmethod
    def merge(existing: Mapping[str, Any], required: Mapping[str, Any]) -> dict[str, Any]:
        """Overlay *required* onto *existing*.

        Keys in *required* replace the same keys in *existing*; keys only in
        *existing* are kept in place. No recursive merging, no deletion.
        """
        merged = dict(existing)
        merged.update(required)
        return merged
