"""Editor configuration
--------------------

`EditorConfig` collects the handful of knobs the editors and the Streamlit
tool need.  `load_config` layers them: built-in defaults, then an optional JSON
or YAML file, then explicit overrides (the Streamlit app passes
``st.secrets["content_editor"]`` here).
"""

from __future__ import annotations

__all__ = ["EditorConfig", "load_config", "DEFAULT_CONFIG"]

import logging
import os
from typing import Any, List, Literal, Mapping

import yaml
from pydantic import ValidationError

from content_editor.utils import deep_merge, read_json, read_yaml
from content_editor.validation import PBase

logger = logging.getLogger(__name__)


class EditorConfig(PBase):
    # Media
    media_base_url: str = ""  # Prepended to root-relative media paths ("/uploads/a.jpg")

    # Navigation tree
    max_depth: int = 2  # Root items plus one level of children
    allow_children: bool = True

    # Generic editor
    unify_coercion: bool = False  # Apply typed-slot coercion to map/list edits too, not only object-array items
    raw_indent: int = 2  # Indent of raw-mode JSON text

    # Editor hints (checked before shape inference)
    navigation_content_types: List[str] = ["navigation"]
    navigation_field_names: List[str] = ["items"]
    navigation_field_types: List[str] = ["navigation"]
    gallery_field_names: List[str] = ["media_gallery"]
    gallery_field_types: List[str] = ["gallery", "media_gallery"]

    # App
    backup_on_save: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


DEFAULT_CONFIG = EditorConfig()


def _read_config_file(path: str) -> dict[str, Any]:
    """Read a JSON or YAML config file into a dict."""
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        raw = read_json(path)
    elif ext in (".yaml", ".yml"):
        raw = read_yaml(path)
    else:
        raise ValueError(f"Unsupported config format: {path}")
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(raw).__name__}")
    return raw


def load_config(path: str | None = None, overrides: Mapping[str, Any] | None = None) -> EditorConfig:
    """Build an `EditorConfig` from defaults, an optional file, and overrides.

    A missing or malformed file is logged and skipped so the editor still starts
    with defaults; invalid values in overrides raise, since they come from code.

    Args:
        path: Optional path to a ``.json``/``.yaml`` config file.
        overrides: Values applied last (highest precedence).

    Returns:
        The validated configuration.
    """
    merged: dict[str, Any] = DEFAULT_CONFIG.model_dump()

    if path is not None:
        try:
            file_conf = _read_config_file(path)
            merged = deep_merge(merged, file_conf)
            EditorConfig.model_validate(merged)
            logger.info(f"Loaded editor config from {path}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            # ValidationError is a ValueError too
            logger.warning(f"Ignoring config file {path}: {e}")
            merged = DEFAULT_CONFIG.model_dump()

    if overrides:
        merged = deep_merge(merged, dict(overrides))

    try:
        return EditorConfig.model_validate(merged)
    except ValidationError:
        logger.error("Invalid editor config overrides")
        raise
