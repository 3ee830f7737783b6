"""Media helpers
-------------

- `MediaUrlResolver` turns stored paths into fetchable URLs
- `media_url_of` / `media_alt_of` read loosely shaped media objects
- `is_image_path` / `media_kind` decide how a URL is previewed
- `collect_media` lists every media URL found anywhere in an entry's data
"""

from __future__ import annotations

__all__ = [
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "AUDIO_EXTENSIONS",
    "MediaUrlResolver",
    "MediaRef",
    "is_absolute_url",
    "is_image_path",
    "media_kind",
    "media_url_of",
    "media_alt_of",
    "collect_media",
]

import os
from dataclasses import dataclass
from typing import Any, Literal, Mapping
from urllib.parse import urlsplit

from content_editor.classifier import MEDIA_KEYS
from content_editor.utils import humanize_label
from content_editor.validation import FieldDefinition

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "svg", "bmp", "ico"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "ogg", "mov", "avi"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "m4a", "aac"})

MediaKind = Literal["image", "video", "audio", "file"]


def is_absolute_url(url: str) -> bool:
    """Scheme-qualified (``https://``, ``data:``) or protocol-relative (``//cdn``)."""
    return bool(urlsplit(url).scheme) or url.startswith("//")


class MediaUrlResolver:
    """Map stored media paths to absolute URLs.

    Root-relative paths get `base_url` prepended; absolute URLs and anything
    else pass through unchanged; empty input resolves to ``""``.
    """

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url.rstrip("/")

    def resolve(self, path_or_url: str | None) -> str:
        if not path_or_url:
            return ""
        if is_absolute_url(path_or_url):
            return path_or_url
        if path_or_url.startswith("/"):
            return f"{self.base_url}{path_or_url}"
        return path_or_url

    __call__ = resolve


def _extension(url: str) -> str:
    path = urlsplit(url).path if is_absolute_url(url) else url.split("?", 1)[0].split("#", 1)[0]
    return os.path.splitext(path)[1].lstrip(".").lower()


def is_image_path(url: str | None) -> bool:
    """True when the URL ends in a known image extension."""
    if not url:
        return False
    return _extension(url) in IMAGE_EXTENSIONS


def media_kind(url: str, field_type: str | None = None) -> MediaKind | None:
    """Preview kind of a URL, or None when it is not media at all."""
    if is_image_path(url) or "/image" in url or field_type in ("image", "media"):
        return "image"
    ext = _extension(url)
    if ext in VIDEO_EXTENSIONS:
        return "video"
    if ext in AUDIO_EXTENSIONS:
        return "audio"
    if field_type == "file":
        return "file"
    return None


def media_url_of(item: object) -> str | None:
    """First non-empty string under a ``url``/``src``/``image`` key (case-insensitive)."""
    if not isinstance(item, Mapping):
        return None
    for key, value in item.items():
        if str(key).lower() in MEDIA_KEYS and isinstance(value, str) and value:
            return value
    return None


def media_alt_of(item: object, index: int) -> str:
    """Caption for a media object: alt > title > name > ``Image N``."""
    if isinstance(item, Mapping):
        for key in ("alt", "title", "name"):
            if item.get(key):
                return str(item[key])
    return f"Image {index + 1}"


@dataclass(frozen=True)
class MediaRef:
    key: str  # Path into the entry data, e.g. ``hero.image`` or ``gallery[2].url``
    url: str
    kind: MediaKind
    label: str


def _looks_like_link(value: object) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://", "/"))


def collect_media(data: Mapping[str, Any], field_defs: Mapping[str, FieldDefinition] | None = None) -> list[MediaRef]:
    """Walk entry data and list every media URL with its kind and a label.

    Args:
        data: Field-name -> value map of one entry.
        field_defs: Optional field definitions keyed by name, used for labels and
            to treat ``image``/``media``/``file`` fields as media regardless of extension.

    Returns:
        Media references in data order.
    """
    field_defs = field_defs or {}
    out: list[MediaRef] = []

    def _label_for(key: str) -> str:
        fd = field_defs.get(key)
        return fd.label if fd is not None and fd.label else humanize_label(key)

    def _walk(key: str, value: Any, field_type: str | None = None, label: str = "") -> None:  # noqa: ANN401
        if _looks_like_link(value):
            kind = media_kind(value, field_type)
            if kind is not None:
                out.append(MediaRef(key, value, kind, label or _label_for(key)))
        elif isinstance(value, list):
            for idx, item in enumerate(value):
                if isinstance(item, str):
                    _walk(f"{key}[{idx}]", item, field_type, f"{_label_for(key)} {idx + 1}")
                elif isinstance(item, dict):
                    item_label = item.get("title") or item.get("name") or f"{_label_for(key)} {idx + 1}"
                    for media_key, media_value in item.items():
                        if str(media_key).lower() in MEDIA_KEYS and media_value:
                            _walk(f"{key}[{idx}].{media_key}", media_value, field_type, str(item_label))
        elif isinstance(value, dict):
            for nested_key, nested_value in value.items():
                _walk(f"{key}.{nested_key}", nested_value)

    for key, value in data.items():
        fd = field_defs.get(key)
        _walk(key, value, fd.type if fd is not None else None)
    return out
