"""Validation Models
------------------

Pydantic models for the shapes the editor knows about.  None of them are
enforced on stored content: entry data stays schema-advisory and the editors
operate on plain JSON values.  The models are used to

- read content-type metadata (`ContentType`, `FieldDefinition`)
- read entries and media descriptors handed over by external collaborators
- report advisory problems for navigation trees and galleries
  (`soft_validate`) without ever blocking an edit

Models that describe content values (`NavigationItem`, `MediaItem`,
`MediaDescriptor`) tolerate unknown keys; configuration-like models forbid them.
"""

from __future__ import annotations

__all__ = [
    "PBase",
    "OpenBase",
    "FieldDefinition",
    "ContentType",
    "ContentEntry",
    "NavigationItem",
    "MediaItem",
    "MediaDescriptor",
    "EntryStatus",
    "soft_validate",
    "hard_validate",
    "validation_problems",
]

from typing import Any, Dict, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from content_editor.utils import warn

M = TypeVar("M", bound=BaseModel)

EntryStatus = Literal["draft", "published", "archived"]


# Define a new base that is more strict towards unknown inputs
class PBase(BaseModel):
    model_config = ConfigDict(extra="forbid", protected_namespaces=())


# Content values may carry keys nobody declared - keep them
class OpenBase(BaseModel):
    model_config = ConfigDict(extra="allow", protected_namespaces=())


# --------------------------------------------------------
#          CONTENT TYPE METADATA
# --------------------------------------------------------


class FieldDefinition(OpenBase):
    name: str
    type: str = "text"  # text, textarea, number, boolean, select, json, array, object, media, ...
    label: Optional[str] = None  # Human label, falls back to the humanized name
    required: bool = False  # Advisory only, never enforced
    help_text: Optional[str] = None  # Shown under the input and as placeholder
    options: Optional[List[Any]] = None  # For select fields


class ContentType(OpenBase):
    id: Optional[str] = None
    name: str = ""
    api_id: Optional[str] = None  # e.g. 'navigation' - used as an editor hint
    fields: List[FieldDefinition] = []

    def field_map(self) -> Dict[str, FieldDefinition]:
        """Field definitions keyed by field name."""
        return {f.name: f for f in self.fields}


class ContentEntry(OpenBase):
    id: Optional[str] = None
    slug: str = ""
    status: EntryStatus = "draft"
    content_type_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    content_data: Optional[Dict[str, Any]] = None  # Older API payloads used this name

    @property
    def values(self) -> Dict[str, Any]:
        """Field-name -> value map, whichever payload key carries it."""
        return dict(self.data or self.content_data or {})

    def display_title(self) -> str:
        """Title shown in headers: title > site_name > name > slug."""
        values = self.values
        for key in ("title", "site_name", "name"):
            if values.get(key):
                return str(values[key])
        return self.slug


# --------------------------------------------------------
#          CONTENT VALUE SHAPES
# --------------------------------------------------------


class NavigationItem(OpenBase):
    label: str
    href: str
    order: Optional[int] = None  # 1-based position at its level, recomputed on every structural change
    icon: Optional[str] = None
    children: Optional[List["NavigationItem"]] = None  # Absent rather than empty

    @model_validator(mode="after")
    def check_children(self) -> "NavigationItem":
        if self.children is not None and len(self.children) == 0:
            raise ValueError(f"Item '{self.label}' has an empty children list; the key should be absent")
        return self


class MediaItem(OpenBase):
    url: str = ""
    alt: Optional[str] = None


class MediaDescriptor(OpenBase):
    """What the media picker hands back on selection."""

    id: Optional[str] = None
    url: Optional[str] = None
    public_url: Optional[str] = None
    storage_path: Optional[str] = None
    alt_text: Optional[str] = None
    filename: Optional[str] = None
    mime_type: Optional[str] = None


def validation_problems(m: object, model: type[BaseModel]) -> list[str]:
    """List human-readable validation problems for `m` against `model` (empty when valid)."""
    try:
        model.model_validate(m)
    except ValidationError as e:
        out = []
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            out.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return out
    return []


def hard_validate(m: object, model: type[M]) -> M:
    """Validate `m` against `model`, raising `pydantic.ValidationError` on failure."""
    return model.model_validate(m)


def soft_validate(m: object, model: type[M]) -> M | None:
    """Validate a value against a pydantic model, warning instead of raising.

    Args:
        m: Value to validate.
        model: Pydantic model class to validate against.

    Returns:
        The validated model, or None when validation failed.
    """
    try:
        return model.model_validate(m)
    except ValidationError as e:
        warn(f"{model.__name__} validation failed: {e.error_count()} problem(s)\n{e}")
        return None
