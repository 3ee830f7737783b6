"""Value classification
--------------------

One place that decides how a content value is presented:

- `classify` maps any JSON value to a closed `Classification` by shape
- `select_editor` picks the Generic, Gallery or Navigation editor for a field,
  letting field metadata pre-select a specialized editor before shape inference
- `widget_for_field` picks the scalar input for a declared field type

Shape inference is always the fallback, so fields with no definition at all
still get a sensible editor.
"""

from __future__ import annotations

__all__ = [
    "Classification",
    "EditorKind",
    "WidgetKind",
    "MEDIA_KEYS",
    "classify",
    "is_media_gallery_array",
    "is_container",
    "select_editor",
    "infer_field_type",
    "widget_for_field",
]

from enum import Enum
from typing import Any

from content_editor.config import DEFAULT_CONFIG, EditorConfig
from content_editor.validation import FieldDefinition

MEDIA_KEYS = ("url", "src", "image")


class Classification(str, Enum):
    PRIMITIVE = "primitive"
    OBJECT_MAP = "object_map"
    SIMPLE_ARRAY = "simple_array"
    OBJECT_ARRAY = "object_array"
    MEDIA_GALLERY_ARRAY = "media_gallery_array"


class EditorKind(str, Enum):
    GENERIC = "generic"
    GALLERY = "gallery"
    NAVIGATION = "navigation"


class WidgetKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    RICHTEXT = "richtext"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    DATE = "date"
    DATETIME = "datetime"
    MEDIA = "media"
    STRUCTURED = "structured"
    FALLBACK = "fallback"


_WIDGETS_BY_TYPE: dict[str, WidgetKind] = {
    "text": WidgetKind.TEXT,
    "string": WidgetKind.TEXT,
    "email": WidgetKind.TEXT,
    "url": WidgetKind.TEXT,
    "textarea": WidgetKind.TEXTAREA,
    "richtext": WidgetKind.RICHTEXT,
    "html": WidgetKind.RICHTEXT,
    "wysiwyg": WidgetKind.RICHTEXT,
    "number": WidgetKind.NUMBER,
    "boolean": WidgetKind.BOOLEAN,
    "select": WidgetKind.SELECT,
    "date": WidgetKind.DATE,
    "datetime": WidgetKind.DATETIME,
    "media": WidgetKind.MEDIA,
    "image": WidgetKind.MEDIA,
    "file": WidgetKind.MEDIA,
    "json": WidgetKind.STRUCTURED,
    "array": WidgetKind.STRUCTURED,
    "object": WidgetKind.STRUCTURED,
}


def is_container(value: object) -> bool:
    """True for JSON objects and arrays (``None`` is a scalar here)."""
    return isinstance(value, (dict, list))


def is_media_gallery_array(value: object) -> bool:
    """Media gallery heuristic.

    A non-empty list whose elements are all objects, at least one of which has a
    ``url``/``src``/``image`` key (case-insensitive, value not inspected).
    """
    if not isinstance(value, list) or len(value) == 0:
        return False
    if not all(isinstance(item, dict) for item in value):
        return False
    return any(any(str(k).lower() in MEDIA_KEYS for k in item) for item in value)


def classify(
    value: object,
    type_hint: str | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Classification:
    """Classify a JSON value by shape.

    Args:
        value: Any JSON value.
        type_hint: Optional field type from metadata.  A gallery hint marks any
            list (or missing value) as a gallery; other hints are ignored here.
        config: Supplies the field types that count as gallery hints.

    Returns:
        The rendering strategy tag.
    """
    if type_hint in config.gallery_field_types and (value is None or isinstance(value, list)):
        return Classification.MEDIA_GALLERY_ARRAY

    if isinstance(value, list):
        if is_media_gallery_array(value):
            return Classification.MEDIA_GALLERY_ARRAY
        if all(not is_container(item) for item in value):
            return Classification.SIMPLE_ARRAY
        return Classification.OBJECT_ARRAY
    if isinstance(value, dict):
        return Classification.OBJECT_MAP
    return Classification.PRIMITIVE


def select_editor(
    field_name: str,
    value: object,
    field_def: FieldDefinition | None = None,
    content_type_api_id: str | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> EditorKind:
    """Pick the editor for one field.

    Hints are checked first: an explicit navigation/gallery field type, the
    ``items`` field of a navigation content type, or a known gallery field name.
    Without a hint, a value shaped like a media gallery gets the gallery editor
    and everything else the generic editor.
    """
    field_type = field_def.type if field_def is not None else None

    if field_type in config.navigation_field_types:
        return EditorKind.NAVIGATION
    if content_type_api_id in config.navigation_content_types and field_name in config.navigation_field_names:
        return EditorKind.NAVIGATION

    if field_type in config.gallery_field_types or field_name in config.gallery_field_names:
        return EditorKind.GALLERY

    if classify(value, config=config) is Classification.MEDIA_GALLERY_ARRAY:
        return EditorKind.GALLERY
    return EditorKind.GENERIC


def infer_field_type(value: Any) -> str:  # noqa: ANN401
    """Field type for a data key no definition describes."""
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict) or value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "text"


def widget_for_field(
    field_type: str | None,
    value: Any = None,  # noqa: ANN401
    config: EditorConfig = DEFAULT_CONFIG,
) -> WidgetKind:
    """Scalar input for a declared field type; undeclared types fall back by value shape."""
    if field_type is None:
        field_type = infer_field_type(value)
    if field_type in config.navigation_field_types or field_type in config.gallery_field_types:
        return WidgetKind.STRUCTURED
    return _WIDGETS_BY_TYPE.get(field_type, WidgetKind.FALLBACK)
