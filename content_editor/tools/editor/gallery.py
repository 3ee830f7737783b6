"""Media gallery view, media picker dialog and bulk reorder dialog."""

from __future__ import annotations

from typing import Any, Callable

import streamlit as st
from streamlit_sortables import sort_items

from content_editor.gallery import GalleryEditor, GalleryTile, gallery_items
from content_editor.media import media_alt_of, media_url_of
from content_editor.validation import MediaDescriptor
from content_editor.tools.editor.framework import (
    bind_widget,
    close_picker,
    item_keys,
    open_picker,
    resolver,
    take_picker,
)

COLUMNS = 3


def _library_label(d: MediaDescriptor) -> str:
    return d.filename or d.alt_text or d.url or d.public_url or d.storage_path or (d.id or "?")


@st.dialog("Select Media")
def media_picker_dialog(on_select: Callable[[MediaDescriptor], Any]) -> None:
    """Pick from the media library or enter a URL; cancelling delivers nothing."""
    library: list[MediaDescriptor] = st.session_state.get("media_library", [])

    descriptor: MediaDescriptor | None = None
    if library:
        choice = st.selectbox(
            "Library",
            range(len(library)),
            format_func=lambda i: _library_label(library[i]),
            key="picker_choice",
        )
        picked = library[choice]
        url = picked.url or picked.public_url or picked.storage_path
        if url:
            st.image(resolver().resolve(url), width=200)
        descriptor = picked

    st.caption("Or enter a URL")
    manual_url = st.text_input("URL", key="picker_url")
    manual_alt = st.text_input("Alt text", key="picker_alt")
    if manual_url:
        descriptor = MediaDescriptor(url=manual_url, alt_text=manual_alt or None)

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("Select", type="primary", disabled=descriptor is None):
            on_select(descriptor)
            close_picker()
            st.rerun()
    with col2:
        if st.button("Cancel"):
            close_picker()
            st.rerun()


@st.dialog("Reorder Gallery")
def reorder_dialog(scope: str, editor: GalleryEditor) -> None:
    """Drag to reorder the whole gallery at once."""
    labels = [f"{t.badge}. {t.alt}" for t in editor.tiles()]
    sorted_labels = sort_items(labels)
    if st.button("Apply Order"):
        order = [labels.index(label) for label in sorted_labels]
        if editor.reorder(order):
            item_keys(scope).permute(order)
        st.rerun()


def gallery_display(value: Any) -> None:  # noqa: ANN401
    """Read-only thumbnails."""
    items = gallery_items(value)
    if not items:
        st.caption("No images")
        return
    res = resolver()
    cols = st.columns(COLUMNS)
    for i, item in enumerate(items):
        with cols[i % COLUMNS]:
            url = media_url_of(item)
            alt = media_alt_of(item, i)
            if url:
                st.image(res.resolve(url), caption=alt)
            else:
                st.markdown(f"🖼️ No URL  \n{alt}")


def _tile(scope: str, editor: GalleryEditor, tile: GalleryTile) -> None:
    i = tile.index
    ident = item_keys(scope)[i]
    n = len(editor.items)

    with st.container(border=True):
        if tile.src:
            st.image(tile.src, caption=f"{tile.badge}. {tile.alt}")
        else:
            st.markdown(f"📄 **{tile.badge}.** {tile.url or 'No URL'}")

        item = editor.items[i]
        if isinstance(item, dict):
            cap_key, url_key = f"{scope}_alt_{ident}", f"{scope}_url_{ident}"
            st.text_input("Caption", value=item.get("alt", ""), key=cap_key, on_change=bind_widget(cap_key, editor.set_caption, i))
            st.text_input("URL", value=item.get("url", ""), key=url_key, on_change=bind_widget(url_key, editor.set_url, i))

        c1, c2, c3, c4 = st.columns(4)
        with c1:
            st.button("↑", key=f"{scope}_up_{ident}", on_click=_move, args=(scope, editor, i, i - 1), disabled=i == 0)
        with c2:
            st.button("↓", key=f"{scope}_dn_{ident}", on_click=_move, args=(scope, editor, i, i + 1), disabled=i == n - 1)
        with c3:
            st.button("⟳", key=f"{scope}_rep_{ident}", on_click=open_picker, args=(scope, i), help="Replace")
        with c4:
            st.button("✕", key=f"{scope}_rm_{ident}", on_click=_remove, args=(scope, editor, i), help="Remove")


def _move(scope: str, editor: GalleryEditor, src: int, dst: int) -> None:
    if editor.move(src, dst):
        item_keys(scope).swap(src, dst)


def _remove(scope: str, editor: GalleryEditor, i: int) -> None:
    if editor.remove(i):
        item_keys(scope).remove(i)


def _select(scope: str, editor: GalleryEditor, descriptor: MediaDescriptor, replace_index: int | None) -> None:
    if editor.select(descriptor, replace_index):
        keys = item_keys(scope)
        if replace_index is None:
            keys.append()
        else:
            keys.replace(replace_index)


def gallery_editor(
    scope: str,
    value: Any,  # noqa: ANN401
    on_change: Callable[[list[Any]], None],
    read_only: bool = False,
) -> GalleryEditor | None:
    """Render the gallery editor for one field; None in read-only mode."""
    if read_only:
        gallery_display(value)
        return None

    editor = GalleryEditor(value, on_change, resolver())
    item_keys(scope).sync(len(editor.items))

    if not editor.items:
        st.caption("No images")
    cols = st.columns(COLUMNS)
    for tile in editor.tiles():
        with cols[tile.index % COLUMNS]:
            _tile(scope, editor, tile)

    c1, c2 = st.columns([1, 1])
    with c1:
        st.button("Add media", key=f"{scope}_add", on_click=open_picker, args=(scope, None))
    with c2:
        if st.button("Reorder…", key=f"{scope}_reorder", disabled=len(editor.items) < 2):
            reorder_dialog(scope, editor)

    target = take_picker(scope)
    if target is not None:
        replace_index = target["replace_index"]
        media_picker_dialog(lambda d: _select(scope, editor, d, replace_index))
    return editor
