"""Typed-slot coercion
-------------------

Inputs in the editor are text boxes, but content values are typed JSON.  When a
scalar is first shown it is tagged with the primitive kind it had (a *typed
slot*); a later text edit is coerced back to that kind when it is committed:

- numbers parse the leading numeric part of the text, ``0`` when there is none
- booleans are ``True`` only for the literal text ``"true"``
- nested containers accept JSON text and keep the raw text otherwise
- everything else (strings, nulls) stays a string
"""

from __future__ import annotations

__all__ = [
    "SlotKind",
    "TypedSlot",
    "slot_for",
    "slot_kind_of",
    "coerce_text",
    "parse_float_prefix",
    "display_text",
]

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from content_editor.utils import JSONValue, dumps_compact

_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Beyond this floats lose integer precision, keep them as floats
_MAX_SAFE_INT = 2**53


class SlotKind(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    JSON = "json"


def slot_kind_of(value: object) -> SlotKind:
    """Primitive kind of a runtime value (bool is checked before int on purpose)."""
    if isinstance(value, bool):
        return SlotKind.BOOLEAN
    if isinstance(value, (int, float)):
        return SlotKind.NUMBER
    if isinstance(value, (dict, list)):
        return SlotKind.JSON
    return SlotKind.STRING


def parse_float_prefix(text: str) -> int | float:
    """Parse the leading number in `text`, ``0`` when there is none.

    Integral results come back as ``int`` so ``"150"`` stays ``150`` in JSON
    rather than ``150.0``.
    """
    m = _FLOAT_PREFIX.match(text or "")
    if m is None:
        return 0
    try:
        f = float(m.group(1))
    except ValueError:
        return 0
    if math.isinf(f) or math.isnan(f) or f == 0:
        return 0
    if f.is_integer() and abs(f) < _MAX_SAFE_INT:
        return int(f)
    return f


def _strict_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


def coerce_text(text: str, kind: SlotKind) -> JSONValue:
    """Coerce edited text back to `kind`.

    Args:
        text: The text the user committed.
        kind: Kind recorded when the value was first displayed.

    Returns:
        The coerced value.
    """
    if kind is SlotKind.NUMBER:
        return parse_float_prefix(text)
    if kind is SlotKind.BOOLEAN:
        return text == "true"
    if kind is SlotKind.JSON:
        try:
            parsed = json.loads(text, parse_constant=_strict_constant)
        except ValueError:
            return text
        if isinstance(parsed, (dict, list)):
            return parsed
        return text
    return text


def display_text(value: object) -> str:
    """Text shown in an input for `value` (``None`` renders empty)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return dumps_compact(value)
    return str(value)


@dataclass(frozen=True)
class TypedSlot:
    """A scalar tagged with the kind it had when first classified."""

    kind: SlotKind
    value: Any

    @property
    def text(self) -> str:
        return display_text(self.value)

    def commit(self, text: str) -> JSONValue:
        """Coerce an edit of this slot back to its recorded kind."""
        return coerce_text(text, self.kind)


def slot_for(value: object) -> TypedSlot:
    """Tag `value` with its current primitive kind."""
    return TypedSlot(slot_kind_of(value), value)

