"""Field dispatch: pick and render the editor for every field of an entry."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Mapping

import streamlit as st

from content_editor.classifier import (
    EditorKind,
    WidgetKind,
    infer_field_type,
    is_container,
    select_editor,
    widget_for_field,
)
from content_editor.coercion import SlotKind, coerce_text, display_text, parse_float_prefix
from content_editor.gallery import media_item_from_descriptor
from content_editor.media import MediaUrlResolver, is_image_path
from content_editor.utils import humanize_label
from content_editor.validation import ContentType, FieldDefinition
from content_editor.tools.editor.framework import (
    bind_widget,
    field_values,
    get_config,
    open_picker,
    resolver,
    set_field,
    take_picker,
)
from content_editor.tools.editor.gallery import gallery_editor, media_picker_dialog
from content_editor.tools.editor.navigation import navigation_editor
from content_editor.tools.editor.structured import json_field_editor

logger = logging.getLogger(__name__)


def field_label(name: str, field_def: FieldDefinition | None = None) -> str:
    """Definition label, else the humanized field name."""
    if field_def is not None and field_def.label:
        return field_def.label
    return humanize_label(name)


def additional_fields(values: Mapping[str, Any], content_type: ContentType | None) -> list[str]:
    """Data keys no field definition covers, in data order."""
    declared = set(content_type.field_map()) if content_type is not None else set()
    return [k for k in values if k not in declared]


def _parse_date(value: Any) -> dt.date | None:  # noqa: ANN401
    if not isinstance(value, str) or not value:
        return None
    try:
        return dt.date.fromisoformat(value[:10])
    except ValueError:
        return None


def _fallback_commit(original: Any, text: str) -> Any:  # noqa: ANN401
    """Unknown field types: containers accept JSON text, everything else stays text."""
    if isinstance(original, (dict, list)):
        return coerce_text(text, SlotKind.JSON)
    return text


def _scalar_widget(name: str, value: Any, field_def: FieldDefinition | None, widget: WidgetKind) -> None:  # noqa: ANN401
    label = field_label(name, field_def)
    help_text = field_def.help_text if field_def is not None else None
    key = f"field_{name}"

    if widget is WidgetKind.BOOLEAN:
        st.toggle(label, value=bool(value), key=key, help=help_text, on_change=bind_widget(key, set_field, name))
    elif widget is WidgetKind.NUMBER:
        st.text_input(
            label,
            value=display_text(value),
            key=key,
            help=help_text,
            on_change=bind_widget(key, lambda n, t: set_field(n, parse_float_prefix(t)), name),
        )
    elif widget is WidgetKind.SELECT:
        options = list(field_def.options or []) if field_def is not None else []
        if value is not None and value not in options:
            options.insert(0, value)
        st.selectbox(
            label,
            options,
            index=options.index(value) if value in options else None,
            key=key,
            help=help_text,
            on_change=bind_widget(key, set_field, name),
        )
    elif widget is WidgetKind.DATE:
        st.date_input(
            label,
            value=_parse_date(value),
            key=key,
            help=help_text,
            on_change=bind_widget(key, lambda n, d: set_field(n, d.isoformat() if d else None), name),
        )
    elif widget is WidgetKind.DATETIME:
        st.text_input(
            label,
            value=display_text(value),
            key=key,
            help=help_text or "ISO 8601, e.g. 2024-05-01T12:00",
            placeholder="YYYY-MM-DDTHH:MM",
            on_change=bind_widget(key, set_field, name),
        )
    elif widget in (WidgetKind.TEXTAREA, WidgetKind.RICHTEXT):
        st.text_area(
            label,
            value=display_text(value),
            key=key,
            help=help_text or ("HTML" if widget is WidgetKind.RICHTEXT else None),
            placeholder=help_text,
            height=300 if widget is WidgetKind.RICHTEXT else None,
            on_change=bind_widget(key, set_field, name),
        )
    elif widget is WidgetKind.MEDIA:
        _media_field(name, value, label, help_text, resolver())
    elif widget is WidgetKind.FALLBACK:
        st.text_input(
            label,
            value=display_text(value),
            key=key,
            help=help_text,
            on_change=bind_widget(key, lambda n, t: set_field(n, _fallback_commit(value, t)), name),
        )
    else:
        st.text_input(
            label,
            value=display_text(value),
            key=key,
            help=help_text,
            placeholder=help_text,
            on_change=bind_widget(key, set_field, name),
        )


def _media_field(name: str, value: Any, label: str, help_text: str | None, res: MediaUrlResolver) -> None:  # noqa: ANN401
    key = f"field_{name}"
    url = value if isinstance(value, str) else ""
    c1, c2 = st.columns([5, 1])
    with c1:
        st.text_input(label, value=url, key=key, help=help_text, on_change=bind_widget(key, set_field, name))
    with c2:
        st.button("Choose…", key=f"{key}_pick", on_click=open_picker, args=(name, None))
    if url and is_image_path(url):
        st.image(res.resolve(url), width=240)

    if take_picker(name) is not None:
        media_picker_dialog(lambda d: set_field(name, media_item_from_descriptor(d)["url"]))


def render_field(
    name: str,
    value: Any,  # noqa: ANN401
    field_def: FieldDefinition | None = None,
    content_type: ContentType | None = None,
    read_only: bool = False,
) -> EditorKind | WidgetKind:
    """Render one field with the editor its hints and shape call for.

    Returns:
        What was rendered: a value editor kind, or the scalar widget kind.
    """
    config = get_config()
    api_id = content_type.api_id if content_type is not None else None
    kind = select_editor(name, value, field_def, api_id, config)

    def _on_change(new_value: Any) -> None:  # noqa: ANN401
        set_field(name, new_value)

    if kind is EditorKind.NAVIGATION:
        st.markdown(f"**{field_label(name, field_def)}**")
        navigation_editor(name, value, _on_change, read_only=read_only)
        return kind
    if kind is EditorKind.GALLERY:
        st.markdown(f"**{field_label(name, field_def)}**")
        gallery_editor(name, value, _on_change, read_only=read_only)
        return kind

    widget = widget_for_field(field_def.type if field_def is not None else None, value, config)
    # Declared scalar types holding a container still get the structured editor
    if widget is WidgetKind.STRUCTURED or (is_container(value) and widget is not WidgetKind.FALLBACK):
        st.markdown(f"**{field_label(name, field_def)}**")
        json_field_editor(name, value, _on_change, read_only=read_only)
        return EditorKind.GENERIC

    if read_only:
        st.markdown(f"**{field_label(name, field_def)}**: {display_text(value)}")
    else:
        _scalar_widget(name, value, field_def, widget)
    return widget


def render_fields(content_type: ContentType | None = None, read_only: bool = False) -> None:
    """Render every declared field, then any undeclared data keys."""
    values = field_values()
    field_map = content_type.field_map() if content_type is not None else {}

    for name, fd in field_map.items():
        render_field(name, values.get(name), fd, content_type, read_only=read_only)

    extra = additional_fields(values, content_type)
    if extra:
        if field_map:
            st.subheader("Additional Fields")
        for name in extra:
            value = values[name]
            fd = FieldDefinition(name=name, type=infer_field_type(value))
            render_field(name, value, fd, content_type, read_only=read_only)
    logger.debug(f"Rendered {len(field_map)} declared and {len(extra)} additional fields")
