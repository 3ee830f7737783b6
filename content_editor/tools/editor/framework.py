"""Entry editor framework (state, IO, config, widget callbacks, save)."""

from __future__ import annotations

import json
import logging
import os
import shutil
from typing import Any, Callable

import streamlit as st

from content_editor.config import EditorConfig, load_config
from content_editor.identity import ItemKeys
from content_editor.media import MediaUrlResolver
from content_editor.structured import RawEditSession
from content_editor.utils import read_json
from content_editor.validation import ContentEntry, ContentType, MediaDescriptor, soft_validate

logger = logging.getLogger(__name__)

# Optional JSON/YAML config file, read before st.secrets["content_editor"]
CONFIG_ENV = "CONTENT_EDITOR_CONFIG"

STATUSES = ["draft", "published", "archived"]


def secrets_overrides() -> dict[str, Any]:
    """The ``[content_editor]`` table of secrets.toml, empty when there is none."""
    try:
        return dict(st.secrets.get("content_editor", {}))
    except FileNotFoundError:
        return {}


def get_config() -> EditorConfig:
    """Editor config for this session (loaded once)."""
    if "config" not in st.session_state:
        st.session_state["config"] = load_config(os.environ.get(CONFIG_ENV), secrets_overrides())
    return st.session_state["config"]


def setup_logging(config: EditorConfig) -> None:
    logging.basicConfig(level=config.log_level, format="%(levelname)s: %(message)s")


def resolver() -> MediaUrlResolver:
    return MediaUrlResolver(get_config().media_base_url)


def _load_media_library(media_path: str | None) -> list[MediaDescriptor]:
    if not media_path:
        return []
    raw = read_json(media_path)
    if not isinstance(raw, list):
        raise ValueError(f"Media library {media_path} must be a JSON list")
    return [d for d in (soft_validate(m, MediaDescriptor) for m in raw) if d is not None]


def init_state(entry_path: str, content_type_path: str | None = None, media_path: str | None = None) -> None:
    """Load an entry (plus optional content type and media library) into session state."""
    try:
        raw_entry = read_json(entry_path)
        entry = ContentEntry.model_validate(raw_entry)
        content_type = ContentType.model_validate(read_json(content_type_path)) if content_type_path else None
        media_library = _load_media_library(media_path)
    except (OSError, ValueError) as e:
        st.error(f"Failed to load entry: {e}")
        st.stop()
        return

    st.session_state["entry_path"] = entry_path
    st.session_state["entry"] = raw_entry
    st.session_state["values"] = entry.values
    st.session_state["slug"] = entry.slug
    st.session_state["status"] = entry.status
    st.session_state["content_type"] = content_type
    st.session_state["media_library"] = media_library
    st.session_state["item_keys"] = {}
    st.session_state["raw_sessions"] = {}
    st.session_state["expanded"] = {}
    st.session_state["picker"] = None
    st.session_state["dirty"] = False
    logger.info(f"Loaded entry {entry_path} ({len(entry.values)} fields)")


def field_values() -> dict[str, Any]:
    return st.session_state["values"]


def set_field(name: str, value: Any) -> None:  # noqa: ANN401
    """The single upward path of every editor: replace one field's value."""
    values = dict(st.session_state["values"])
    values[name] = value
    st.session_state["values"] = values
    st.session_state["dirty"] = True
    logger.debug(f"Field {name!r} changed")


def entry_title() -> str:
    entry = ContentEntry(slug=st.session_state.get("slug", ""), data=st.session_state["values"])
    return entry.display_title()


# --------------------------------------------------------
#          PER-FIELD TRANSIENT STATE
# --------------------------------------------------------


def item_keys(scope: str) -> ItemKeys:
    """Stable item identities for the array edited under `scope`."""
    keys = st.session_state["item_keys"]
    if scope not in keys:
        keys[scope] = ItemKeys()
    return keys[scope]


def raw_session(scope: str, indent: int = 2) -> RawEditSession:
    """Raw/structured mode state of the editor under `scope`."""
    sessions = st.session_state["raw_sessions"]
    if scope not in sessions:
        sessions[scope] = RawEditSession(indent=indent)
    return sessions[scope]


def is_expanded(scope: str) -> bool:
    """Whether the editor under `scope` shows its body (view state only)."""
    return st.session_state["expanded"].get(scope, True)


def set_expanded(scope: str, expanded: bool) -> None:
    st.session_state["expanded"][scope] = expanded


def open_picker(scope: str, replace_index: int | None = None) -> None:
    st.session_state["picker"] = {"scope": scope, "replace_index": replace_index}


def close_picker() -> None:
    st.session_state["picker"] = None


def picker_target(scope: str) -> dict[str, Any] | None:
    """Picker request for `scope` if the picker is open for it."""
    picker = st.session_state.get("picker")
    if picker is not None and picker["scope"] == scope:
        return picker
    return None


def take_picker(scope: str) -> dict[str, Any] | None:
    """Consume the picker request for `scope`.

    The request is cleared as soon as the dialog is shown, so closing the dialog
    without Select or Cancel does not reopen it on the next rerun.
    """
    picker = picker_target(scope)
    if picker is not None:
        close_picker()
    return picker


def bind_widget(key: str, fn: Callable[..., Any], *args: Any) -> Callable[[], None]:  # noqa: ANN401
    """Widget ``on_change`` callback calling ``fn(*args, <widget value>)``."""

    def _callback() -> None:
        fn(*args, st.session_state[key])

    return _callback


# --------------------------------------------------------
#          SAVE
# --------------------------------------------------------


def entry_payload() -> dict[str, Any]:
    """The entry as it will be written: original keys with slug, status and field data replaced."""
    payload = dict(st.session_state["entry"])
    data_key = "content_data" if "content_data" in payload and "data" not in payload else "data"
    payload[data_key] = st.session_state["values"]
    payload["slug"] = st.session_state["slug"]
    payload["status"] = st.session_state["status"]
    return payload


def next_backup_path(path: str) -> str:
    i = 0
    while os.path.exists(f"{path}.orig.{i}.json"):
        i += 1
    return f"{path}.orig.{i}.json"


def save_entry() -> None:
    """Save the entry to its file, keeping a numbered backup of the previous version."""
    path = st.session_state["entry_path"]
    config = get_config()

    try:
        if config.backup_on_save and os.path.exists(path):
            backup_path = next_backup_path(path)
            shutil.copy(path, backup_path)
            logger.info(f"Backup of {path} written to {backup_path}")
            st.toast(f"Backup created at {os.path.basename(backup_path)}")

        with open(path, "w", encoding="utf-8") as f:
            json.dump(entry_payload(), f, indent=2, ensure_ascii=False)

        st.session_state["dirty"] = False
        logger.info(f"Saved entry to {path}")
        st.success(f"Saved to {os.path.basename(path)}")

    except OSError as e:
        st.error(f"Failed to save: {e}")


def sidebar() -> None:
    """Render the sidebar UI."""
    with st.sidebar:
        st.header("Entry")

        st.text_input("Slug", key="slug")
        st.selectbox("Status", STATUSES, key="status")

        st.divider()

        if st.session_state.get("dirty"):
            st.caption("Unsaved changes")
        st.button("Save Changes", on_click=save_entry, type="primary")

        content_type = st.session_state.get("content_type")
        if content_type is not None:
            st.divider()
            st.caption(f"Content type: {content_type.name or content_type.api_id}")
