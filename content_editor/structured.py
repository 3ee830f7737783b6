"""Generic structured editor
-------------------------

Pure operations for the three container shapes the generic editor handles,
plus the raw/structured mode toggle:

- object maps: rename, set, add and delete properties
- scalar lists: append, remove and replace entries
- object arrays: add/remove whole items and add/edit/remove fields of one item,
  with typed-slot coercion against the field's original value

Every operation returns a fresh container and leaves its input untouched.
`StructuredEditor` binds a current value to an ``on_change`` callback, the only
way a new value leaves the editor.

Map and list value edits stay strings unless ``coerce_all`` is set (see
``EditorConfig.unify_coercion``); object-array field edits are always coerced.
"""

from __future__ import annotations

__all__ = [
    "RawJsonError",
    "INVALID_JSON",
    "parse_raw_json",
    "to_raw_text",
    "map_add_property",
    "map_rename_key",
    "map_set_value",
    "map_remove_property",
    "list_append_empty",
    "list_remove",
    "list_set",
    "items_add_item",
    "items_remove_item",
    "item_set_field",
    "item_set_whole",
    "item_add_field",
    "item_remove_field",
    "RawEditSession",
    "StructuredEditor",
    "bool_badge",
    "is_http_url",
    "shorten_url",
]

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from content_editor.classifier import Classification, classify
from content_editor.coercion import slot_for
from content_editor.utils import JSONValue, dumps_pretty, rename_key

logger = logging.getLogger(__name__)

INVALID_JSON = "Invalid JSON"

OnChange = Callable[[Any], None]


class RawJsonError(ValueError):
    """Raw-mode text that does not parse as strict JSON."""


def _reject_constant(name: str) -> float:
    raise RawJsonError(f"{name} is not valid JSON")


def parse_raw_json(text: str) -> JSONValue:
    """Parse raw-mode text as strict JSON (no NaN/Infinity).

    Raises:
        RawJsonError: If the text does not parse.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RawJsonError:
        raise
    except ValueError as e:
        raise RawJsonError(str(e)) from e


def to_raw_text(value: JSONValue, indent: int = 2) -> str:
    """Pretty-printed JSON shown in raw mode."""
    return dumps_pretty(value, indent=indent)


def _require(value: object, kind: type, op: str) -> None:
    if not isinstance(value, kind):
        raise TypeError(f"{op} expects a {kind.__name__}, got {type(value).__name__}")


# --------------------------------------------------------
#          OBJECT MAP
# --------------------------------------------------------


def map_add_property(value: dict[str, Any]) -> dict[str, Any]:
    """Append an entry with an empty key and empty string value."""
    _require(value, dict, "map_add_property")
    return {**value, "": ""}


def map_rename_key(value: dict[str, Any], old: str, new: str) -> dict[str, Any]:
    """Rename `old` to `new`; the renamed entry moves to the end."""
    _require(value, dict, "map_rename_key")
    return rename_key(value, old, new)


def map_set_value(value: dict[str, Any], key: str, text: str, coerce: bool = False) -> dict[str, Any]:
    """Replace the value at `key` with the edited text (coerced when asked)."""
    _require(value, dict, "map_set_value")
    new_val = slot_for(value.get(key)).commit(text) if coerce else text
    return {**value, key: new_val}


def map_remove_property(value: dict[str, Any], key: str) -> dict[str, Any]:
    """Drop only `key`."""
    _require(value, dict, "map_remove_property")
    return {k: v for k, v in value.items() if k != key}


# --------------------------------------------------------
#          SIMPLE ARRAY
# --------------------------------------------------------


def list_append_empty(value: list[Any]) -> list[Any]:
    _require(value, list, "list_append_empty")
    return [*value, ""]


def list_remove(value: list[Any], index: int) -> list[Any]:
    _require(value, list, "list_remove")
    out = list(value)
    del out[index]
    return out


def list_set(value: list[Any], index: int, text: str, coerce: bool = False) -> list[Any]:
    _require(value, list, "list_set")
    out = list(value)
    out[index] = slot_for(value[index]).commit(text) if coerce else text
    return out


# --------------------------------------------------------
#          OBJECT ARRAY
# --------------------------------------------------------


def items_add_item(value: list[Any]) -> list[Any]:
    """Append an empty object."""
    _require(value, list, "items_add_item")
    return [*value, {}]


def items_remove_item(value: list[Any], index: int) -> list[Any]:
    return list_remove(value, index)


def item_set_field(value: list[Any], index: int, key: str, text: str) -> list[Any]:
    """Edit one field of one item, coerced to the kind of the field's original value."""
    _require(value, list, "item_set_field")
    item = value[index]
    _require(item, dict, "item_set_field")
    out = list(value)
    out[index] = {**item, key: slot_for(item.get(key)).commit(text)}
    return out


def item_set_whole(value: list[Any], index: int, text: str) -> list[Any]:
    """Edit a non-object element of an object array as one typed slot."""
    _require(value, list, "item_set_whole")
    out = list(value)
    out[index] = slot_for(value[index]).commit(text)
    return out


def item_add_field(value: list[Any], index: int, key: str) -> list[Any]:
    """Add `key` (empty string value) to one item; other items are untouched."""
    _require(value, list, "item_add_field")
    item = value[index]
    _require(item, dict, "item_add_field")
    out = list(value)
    out[index] = {**item, key: ""}
    return out


def item_remove_field(value: list[Any], index: int, key: str) -> list[Any]:
    _require(value, list, "item_remove_field")
    item = value[index]
    _require(item, dict, "item_remove_field")
    out = list(value)
    out[index] = {k: v for k, v in item.items() if k != key}
    return out


# --------------------------------------------------------
#          RAW / STRUCTURED MODE
# --------------------------------------------------------


@dataclass
class RawEditSession:
    """Raw-mode buffer of one editor instance.

    The buffer only reaches ``on_change`` when it parses.  A failed parse keeps
    the typed text, sets `error`, and leaves the last valid value in effect.
    """

    mode: Literal["structured", "raw"] = "structured"
    text: str = ""
    error: str | None = None
    indent: int = 2
    _synced: Any = field(default=None, repr=False)

    @property
    def is_raw(self) -> bool:
        return self.mode == "raw"

    def sync(self, value: JSONValue) -> None:
        """Refresh the buffer when the value changed from outside.

        A buffer holding unparseable text is left alone so the user can fix it.
        """
        if self.error is not None:
            return
        if value != self._synced or not self.text:
            self.text = to_raw_text(value, self.indent)
            self._synced = value

    def enter_raw(self, value: JSONValue) -> None:
        self.mode = "raw"
        self.text = to_raw_text(value, self.indent)
        self.error = None
        self._synced = value

    def edit(self, text: str, on_change: OnChange) -> bool:
        """Take new raw text; forward it upward only if it parses."""
        self.text = text
        try:
            parsed = parse_raw_json(text)
        except RawJsonError as e:
            self.error = INVALID_JSON
            logger.debug(f"Raw edit not applied: {e}")
            return False
        self.error = None
        self._synced = parsed
        on_change(parsed)
        return True

    def leave_raw(self, on_change: OnChange) -> bool:
        """Switch back to structured mode, re-parsing the buffer first.

        On a parse failure the session stays in raw mode with the error set.
        """
        try:
            parsed = parse_raw_json(self.text)
        except RawJsonError:
            self.error = INVALID_JSON
            return False
        self.error = None
        self.mode = "structured"
        self._synced = parsed
        on_change(parsed)
        return True

    def toggle(self, value: JSONValue, on_change: OnChange) -> bool:
        """Flip the mode; returns False if leaving raw mode was refused."""
        if self.is_raw:
            return self.leave_raw(on_change)
        self.enter_raw(value)
        return True


# --------------------------------------------------------
#          EDITOR
# --------------------------------------------------------


class StructuredEditor:
    """Generic editor for object maps, scalar lists and object arrays.

    Holds the current value and forwards each new value through ``on_change``.
    Requests that would not change anything (out-of-range indexes, missing keys,
    empty field names) return False without calling back.
    """

    def __init__(
        self,
        value: JSONValue,
        on_change: OnChange,
        coerce_all: bool = False,
        indent: int = 2,
        raw: RawEditSession | None = None,
        expanded: bool = True,
    ) -> None:
        self.value = value
        self.on_change = on_change
        self.coerce_all = coerce_all
        self.expanded = expanded
        # A session kept by the caller survives re-renders (Streamlit reruns)
        self.raw = raw if raw is not None else RawEditSession(indent=indent)
        self.raw.sync(value)

    @property
    def classification(self) -> Classification:
        return classify(self.value)

    def _emit(self, new_value: JSONValue) -> bool:
        self.value = new_value
        self.raw.sync(new_value)
        self.on_change(new_value)
        return True

    def _in_range(self, index: int) -> bool:
        return isinstance(self.value, list) and 0 <= index < len(self.value)

    # View state, not data
    def toggle_expanded(self) -> bool:
        self.expanded = not self.expanded
        return self.expanded

    def toggle_mode(self) -> bool:
        return self.raw.toggle(self.value, self._accept_raw)

    def edit_raw(self, text: str) -> bool:
        return self.raw.edit(text, self._accept_raw)

    def _accept_raw(self, parsed: JSONValue) -> None:
        self.value = parsed
        self.on_change(parsed)

    # Primitive
    def set_scalar(self, text: str) -> bool:
        """Commit text for a bare scalar, coerced to the kind it had."""
        return self._emit(slot_for(self.value).commit(text))

    # Object map
    def add_property(self) -> bool:
        return self._emit(map_add_property(self.value))

    def rename_key(self, old: str, new: str) -> bool:
        if not isinstance(self.value, dict) or old not in self.value or old == new:
            return False
        return self._emit(map_rename_key(self.value, old, new))

    def set_value(self, key: str, text: str) -> bool:
        return self._emit(map_set_value(self.value, key, text, coerce=self.coerce_all))

    def remove_property(self, key: str) -> bool:
        if not isinstance(self.value, dict) or key not in self.value:
            return False
        return self._emit(map_remove_property(self.value, key))

    # Simple array
    def append_entry(self) -> bool:
        return self._emit(list_append_empty(self.value))

    def remove_entry(self, index: int) -> bool:
        if not self._in_range(index):
            logger.debug(f"Ignoring remove at {index}")
            return False
        return self._emit(list_remove(self.value, index))

    def set_entry(self, index: int, text: str) -> bool:
        if not self._in_range(index):
            return False
        return self._emit(list_set(self.value, index, text, coerce=self.coerce_all))

    # Object array
    def add_item(self) -> bool:
        return self._emit(items_add_item(self.value))

    def remove_item(self, index: int) -> bool:
        return self.remove_entry(index)

    def set_item_field(self, index: int, key: str, text: str) -> bool:
        if not self._in_range(index):
            return False
        if isinstance(self.value[index], dict):
            return self._emit(item_set_field(self.value, index, key, text))
        return self._emit(item_set_whole(self.value, index, text))

    def add_item_field(self, index: int, key: str) -> bool:
        """Commit a new field name for one item (on explicit confirmation, not per keystroke)."""
        if not key or not self._in_range(index) or not isinstance(self.value[index], dict):
            return False
        return self._emit(item_add_field(self.value, index, key))

    def remove_item_field(self, index: int, key: str) -> bool:
        if not self._in_range(index) or not isinstance(self.value[index], dict) or key not in self.value[index]:
            return False
        return self._emit(item_remove_field(self.value, index, key))


# --------------------------------------------------------
#          READ-ONLY DISPLAY HELPERS
# --------------------------------------------------------


def bool_badge(value: bool) -> str:
    return "✓ Yes" if value else "✗ No"


def is_http_url(value: object) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def shorten_url(url: str, limit: int = 30) -> str:
    return url[:limit] + "..." if len(url) > limit else url
