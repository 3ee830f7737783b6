"""Utilities
---------

Small helpers shared by the editors, the Streamlit tools, and the CLI:

- the ``JSONValue`` alias used throughout for arbitrary content values
- dict/key helpers that always return fresh containers
- label/text helpers for rendering field names and JSON
- config/file readers with extension sanity checks

If you need a generic helper, check this file before adding another bespoke
version elsewhere.
"""

from __future__ import annotations

__all__ = [
    "JSONValue",
    "warn",
    "rename_key",
    "humanize_label",
    "dumps_pretty",
    "dumps_compact",
    "deep_merge",
    "read_json",
    "read_yaml",
]

import json
import re
import warnings
from typing import Any, Dict, Mapping

import yaml

JSONValue = str | int | float | bool | None | dict[str, "JSONValue"] | list["JSONValue"]


# convenience for warnings that gives a more useful stack frame (fn calling the warning, not warning fn itself)
def warn(msg: str, *args: object) -> None:
    """Emit a warning while pointing at the caller instead of this helper.

    Args:
        msg: Warning message to display.
        *args: Additional positional arguments forwarded to `warnings.warn`.
    """
    warnings.warn(msg, *args, stacklevel=3)  # type: ignore[call-overload]


def rename_key(d: Mapping[str, Any], old: str, new: str) -> Dict[str, Any]:
    """Return a copy of ``d`` with ``old`` renamed to ``new``.

    The renamed entry moves to the end; every other entry keeps its position.
    If ``new`` already exists it is overwritten (and moves to the end too).

    Args:
        d: Source mapping, left untouched.
        old: Key to rename.
        new: Replacement key.

    Returns:
        New dict with the renamed entry appended.
    """
    if old not in d:
        return dict(d)
    value = d[old]
    out = {k: v for k, v in d.items() if k != old and k != new}
    out[new] = value
    return out


def humanize_label(name: str) -> str:
    """Turn a field name like ``site_name`` into ``Site Name``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), name.replace("_", " "))


def dumps_pretty(value: JSONValue, indent: int = 2) -> str:
    """Serialize a value the way raw-mode text areas show it."""
    return json.dumps(value, indent=indent, ensure_ascii=False)


def dumps_compact(value: JSONValue) -> str:
    """Single-line JSON used inside inline inputs."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge source dict into target dict (in place) and return target."""
    for k, v in source.items():
        if isinstance(v, Mapping) and k in target and isinstance(target[k], dict):
            deep_merge(target[k], v)
        else:
            target[k] = v
    return target


def read_json(fname: str) -> JSONValue:
    """Load JSON file with extension sanity checks."""

    if ".json" not in fname:
        raise FileNotFoundError(f"Expecting {fname} to have a .json extension")
    with open(fname, "r", encoding="utf-8") as jf:
        return json.load(jf)


def read_yaml(fname: str) -> JSONValue:
    """Load YAML file with extension sanity checks."""

    if not fname.endswith((".yaml", ".yml")):
        raise FileNotFoundError(f"Expecting {fname} to have a .yaml extension")
    with open(fname, "r", encoding="utf-8") as stream:
        return yaml.safe_load(stream)
