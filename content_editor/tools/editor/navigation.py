"""Navigation tree view and its read-only preview."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import streamlit as st

from content_editor.navigation import NavigationEditor, Path, nav_items, navigation_preview, navigation_problems
from content_editor.tools.editor.framework import bind_widget, get_config, item_keys


def preview_markdown(items: Sequence[dict[str, Any]]) -> str:
    """Nested markdown list of a menu, the same structure the editor shows."""
    lines = []
    for row in navigation_preview(items):
        icon = f"{row.icon} " if row.icon else ""
        lines.append(f"{'  ' * row.depth}- {icon}**{row.label}** `{row.href}` #{row.order}")
    return "\n".join(lines)


def navigation_display(value: Any) -> None:  # noqa: ANN401
    items = nav_items(value)
    if not items:
        st.caption("No menu items")
        return
    st.markdown(preview_markdown(items))


def _node(scope: str, editor: NavigationEditor, node: dict[str, Any], path: Path, n_siblings: int) -> None:
    i = path[-1]
    keys = editor.keys_for(path[:-1])
    ident = keys[i]
    children = node.get("children") or []
    depth = len(path) - 1

    cols = st.columns([0.3 + 0.5 * depth, 3, 3, 1.5, 0.6, 0.6, 0.6, 0.6])
    with cols[0]:
        if children:
            st.button(
                "▾" if keys.is_expanded(i) else "▸",
                key=f"{scope}_tg_{ident}",
                on_click=editor.toggle_expanded,
                args=(path,),
            )
    with cols[1]:
        lkey = f"{scope}_label_{ident}"
        st.text_input(
            "Label", value=node.get("label", ""), key=lkey, on_change=bind_widget(lkey, _update, editor, path, "label")
        )
    with cols[2]:
        hkey = f"{scope}_href_{ident}"
        st.text_input("Href", value=node.get("href", ""), key=hkey, on_change=bind_widget(hkey, _update, editor, path, "href"))
    with cols[3]:
        ikey = f"{scope}_icon_{ident}"
        st.text_input(
            "Icon", value=node.get("icon") or "", key=ikey, on_change=bind_widget(ikey, _update, editor, path, "icon")
        )
    with cols[4]:
        st.button("↑", key=f"{scope}_up_{ident}", on_click=editor.move, args=(path, "up"), disabled=i == 0)
    with cols[5]:
        st.button(
            "↓", key=f"{scope}_dn_{ident}", on_click=editor.move, args=(path, "down"), disabled=i == n_siblings - 1
        )
    with cols[6]:
        if editor.can_add_child(path):
            st.button("＋", key=f"{scope}_child_{ident}", on_click=editor.add_child, args=(path,), help="Add sub-item")
    with cols[7]:
        st.button("✕", key=f"{scope}_rm_{ident}", on_click=editor.remove, args=(path,), help="Remove")

    if children and keys.is_expanded(i):
        for j, child in enumerate(children):
            _node(scope, editor, child, (*path, j), len(children))


def _update(editor: NavigationEditor, path: Path, field: str, text: str) -> None:
    # An emptied icon is dropped rather than stored as ""
    editor.update(path, **{field: None if field == "icon" and not text else text})


def navigation_editor(
    scope: str,
    value: Any,  # noqa: ANN401
    on_change: Callable[[list[dict[str, Any]]], None],
    read_only: bool = False,
) -> NavigationEditor | None:
    """Render the navigation tree editor for one field; None in read-only mode."""
    if read_only:
        navigation_display(value)
        return None

    config = get_config()
    editor = NavigationEditor(
        value,
        on_change,
        allow_children=config.allow_children,
        max_depth=config.max_depth,
        keys=item_keys(scope),
    )

    for problem in navigation_problems(editor.items, config.max_depth):
        st.warning(problem)

    if not editor.items:
        st.caption("No menu items")
    for i, node in enumerate(editor.items):
        _node(scope, editor, node, (i,), len(editor.items))

    st.button("Add item", key=f"{scope}_add", on_click=editor.add_item)

    with st.expander("Preview"):
        navigation_display(editor.items)
    return editor
