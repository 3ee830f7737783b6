"""Generic structured editor view: object maps, scalar lists, object arrays and raw JSON."""

from __future__ import annotations

from typing import Any, Callable

import streamlit as st

from content_editor.classifier import Classification, is_media_gallery_array
from content_editor.coercion import display_text, slot_for
from content_editor.structured import StructuredEditor, bool_badge, is_http_url, shorten_url
from content_editor.utils import dumps_compact, dumps_pretty, humanize_label
from content_editor.tools.editor.framework import (
    bind_widget,
    get_config,
    is_expanded,
    item_keys,
    raw_session,
    set_expanded,
)


def read_only_text(value: Any) -> str:  # noqa: ANN401
    """Markdown for one value in the read-only view."""
    if isinstance(value, bool):
        return bool_badge(value)
    if isinstance(value, list):
        if not value:
            return "Empty"
        return " ".join(f"`{display_text(v)}`" for v in value)
    if isinstance(value, dict):
        return f"`{dumps_compact(value)}`"
    if is_http_url(value):
        return f"[{shorten_url(value)}]({value})"
    return display_text(value)


def render_read_only(value: Any) -> None:  # noqa: ANN401
    """Display a value with no controls."""
    if isinstance(value, dict):
        for k, v in value.items():
            st.markdown(f"**{humanize_label(str(k))}**: {read_only_text(v)}")
    elif isinstance(value, list) and value and not is_media_gallery_array(value):
        if all(isinstance(v, dict) for v in value):
            for i, item in enumerate(value):
                with st.container(border=True):
                    st.caption(f"Item {i + 1}")
                    render_read_only(item)
        else:
            st.markdown(read_only_text(value))
    elif isinstance(value, list) and value:
        st.code(dumps_pretty(value), language="json")
    else:
        st.markdown(read_only_text(value))


def _object_map(scope: str, editor: StructuredEditor) -> None:
    for i, (k, v) in enumerate(editor.value.items()):
        c1, c2, c3 = st.columns([2, 3, 1])
        key_key, val_key = f"{scope}_key_{i}_{k}", f"{scope}_val_{i}_{k}"
        with c1:
            st.text_input("Key", value=k, key=key_key, on_change=bind_widget(key_key, editor.rename_key, k))
        with c2:
            st.text_input("Value", value=display_text(v), key=val_key, on_change=bind_widget(val_key, editor.set_value, k))
        with c3:
            st.button("✕", key=f"{scope}_del_{i}_{k}", on_click=editor.remove_property, args=(k,), help="Remove property")
    st.button("Add property", key=f"{scope}_add", on_click=editor.add_property)


def _simple_array(scope: str, editor: StructuredEditor) -> None:
    keys = item_keys(scope).sync(len(editor.value))

    def _remove(i: int) -> None:
        if editor.remove_entry(i):
            keys.remove(i)

    def _append() -> None:
        editor.append_entry()
        keys.append()

    for i, v in enumerate(editor.value):
        c1, c2 = st.columns([5, 1])
        val_key = f"{scope}_entry_{keys[i]}"
        with c1:
            st.text_input(
                f"Entry {i + 1}",
                value=display_text(v),
                key=val_key,
                label_visibility="collapsed",
                on_change=bind_widget(val_key, editor.set_entry, i),
            )
        with c2:
            st.button("✕", key=f"{scope}_rm_{keys[i]}", on_click=_remove, args=(i,))
    st.button("Add entry", key=f"{scope}_append", on_click=_append)


def _object_array(scope: str, editor: StructuredEditor) -> None:
    keys = item_keys(scope).sync(len(editor.value))

    def _remove(i: int) -> None:
        if editor.remove_item(i):
            keys.remove(i)

    def _add() -> None:
        editor.add_item()
        keys.append()

    def _add_field(i: int, name_key: str) -> None:
        if editor.add_item_field(i, st.session_state.get(name_key, "")):
            st.session_state[name_key] = ""

    for i, item in enumerate(editor.value):
        ident = keys[i]
        with st.container(border=True):
            c1, c2, c3 = st.columns([1, 6, 1])
            with c1:
                st.button("▾" if keys.is_expanded(i) else "▸", key=f"{scope}_tg_{ident}", on_click=keys.toggle, args=(i,))
            with c2:
                st.markdown(f"**Item {i + 1}**")
            with c3:
                st.button("✕", key=f"{scope}_rmi_{ident}", on_click=_remove, args=(i,), help="Remove item")

            if not keys.is_expanded(i):
                continue

            if not isinstance(item, dict):
                whole_key = f"{scope}_whole_{ident}"
                st.text_input(
                    "Value",
                    value=slot_for(item).text,
                    key=whole_key,
                    on_change=bind_widget(whole_key, editor.set_item_field, i, ""),
                )
                continue

            for k, v in item.items():
                f1, f2 = st.columns([5, 1])
                fkey = f"{scope}_f_{ident}_{k}"
                with f1:
                    st.text_input(
                        k,
                        value=slot_for(v).text,
                        key=fkey,
                        on_change=bind_widget(fkey, editor.set_item_field, i, k),
                    )
                with f2:
                    st.button("✕", key=f"{scope}_rmf_{ident}_{k}", on_click=editor.remove_item_field, args=(i, k))

            n1, n2 = st.columns([5, 1])
            name_key = f"{scope}_newf_{ident}"
            with n1:
                st.text_input("New field", key=name_key, placeholder="field name")
            with n2:
                st.button("Add", key=f"{scope}_addf_{ident}", on_click=_add_field, args=(i, name_key))

    st.button("Add item", key=f"{scope}_additem", on_click=_add)


def _primitive(scope: str, editor: StructuredEditor) -> None:
    slot = slot_for(editor.value)
    val_key = f"{scope}_primitive"
    st.text_input("Value", value=slot.text, key=val_key, on_change=bind_widget(val_key, editor.set_scalar))


def json_field_editor(
    scope: str,
    value: Any,  # noqa: ANN401
    on_change: Callable[[Any], None],
    read_only: bool = False,
) -> StructuredEditor | None:
    """Render the generic editor for one value.

    Args:
        scope: Unique widget-key prefix (usually the field name).
        value: Current value.
        on_change: Receives every new value.
        read_only: Display only, no controls.

    Returns:
        The editor bound for this render, None in read-only mode.
    """
    if read_only:
        render_read_only(value)
        return None

    config = get_config()
    session = raw_session(scope, config.raw_indent)
    editor = StructuredEditor(
        value,
        on_change,
        coerce_all=config.unify_coercion,
        indent=config.raw_indent,
        raw=session,
        expanded=is_expanded(scope),
    )

    def _toggle_expanded() -> None:
        set_expanded(scope, editor.toggle_expanded())

    c1, c2 = st.columns([1, 6])
    with c1:
        st.button(
            "▾" if editor.expanded else "▸",
            key=f"{scope}_expand",
            on_click=_toggle_expanded,
            help="Collapse" if editor.expanded else "Expand",
        )
    with c2:
        st.button(
            "Structured" if session.is_raw else "Raw JSON",
            key=f"{scope}_mode",
            on_click=editor.toggle_mode,
            help="Switch between widgets and JSON text",
        )

    if not editor.expanded:
        return editor

    if session.is_raw:
        text_key = f"{scope}_raw"
        st.text_area("JSON", value=session.text, key=text_key, height=300, on_change=bind_widget(text_key, editor.edit_raw))
        if session.error:
            st.error(session.error)
        return editor

    kind = editor.classification
    if kind is Classification.OBJECT_MAP:
        _object_map(scope, editor)
    elif kind is Classification.SIMPLE_ARRAY:
        _simple_array(scope, editor)
    elif kind in (Classification.OBJECT_ARRAY, Classification.MEDIA_GALLERY_ARRAY):
        _object_array(scope, editor)
    else:
        _primitive(scope, editor)
    return editor
