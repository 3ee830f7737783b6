"""Media gallery editor
--------------------

Ordered list of media objects (``{"url": ..., "alt": ...}`` plus whatever other
keys they carry).  Order is the array position; no ``order`` key is stored.

New items come from the media picker: its descriptor is turned into
``{"url", "alt"}`` with ``url > public_url > storage_path`` and
``alt_text > filename > ""``.
"""

from __future__ import annotations

__all__ = [
    "gallery_items",
    "media_item_from_descriptor",
    "gallery_add",
    "gallery_replace",
    "gallery_remove",
    "gallery_move",
    "gallery_reorder",
    "gallery_set_caption",
    "gallery_set_url",
    "GalleryTile",
    "gallery_tiles",
    "GalleryEditor",
]

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from content_editor.media import MediaUrlResolver, is_image_path, media_alt_of, media_url_of
from content_editor.validation import MediaDescriptor

logger = logging.getLogger(__name__)

Descriptor = Mapping[str, Any] | MediaDescriptor


def gallery_items(value: object) -> list[Any]:
    """The value as a gallery list; anything that is not a list is an empty gallery."""
    return list(value) if isinstance(value, list) else []


def media_item_from_descriptor(descriptor: Descriptor) -> dict[str, str]:
    """Build a gallery item from what the media picker returned."""
    if isinstance(descriptor, MediaDescriptor):
        descriptor = descriptor.model_dump()
    url = descriptor.get("url") or descriptor.get("public_url") or descriptor.get("storage_path") or ""
    alt = descriptor.get("alt_text") or descriptor.get("filename") or ""
    return {"url": url, "alt": alt}


def gallery_add(items: Sequence[Any], descriptor: Descriptor) -> list[Any]:
    return [*items, media_item_from_descriptor(descriptor)]


def gallery_replace(items: Sequence[Any], index: int, descriptor: Descriptor) -> list[Any]:
    out = list(items)
    out[index] = media_item_from_descriptor(descriptor)
    return out


def gallery_remove(items: Sequence[Any], index: int) -> list[Any]:
    return [item for i, item in enumerate(items) if i != index]


def gallery_move(items: Sequence[Any], src: int, dst: int) -> list[Any]:
    """Take the item at `src` out and put it back at `dst`."""
    out = list(items)
    moved = out.pop(src)
    out.insert(dst, moved)
    return out


def gallery_reorder(items: Sequence[Any], order: Sequence[int]) -> list[Any]:
    """Apply a full permutation: new position ``p`` gets the item from ``order[p]``."""
    if sorted(order) != list(range(len(items))):
        raise ValueError(f"Not a permutation of {len(items)} items: {list(order)}")
    return [items[i] for i in order]


def gallery_set_caption(items: Sequence[Any], index: int, alt: str) -> list[Any]:
    out = list(items)
    out[index] = {**items[index], "alt": alt}
    return out


def gallery_set_url(items: Sequence[Any], index: int, url: str) -> list[Any]:
    out = list(items)
    out[index] = {**items[index], "url": url}
    return out


@dataclass(frozen=True)
class GalleryTile:
    """What one gallery cell shows."""

    index: int
    url: str | None  # Stored value
    src: str | None  # Resolved URL for an <img>, None -> file placeholder
    alt: str

    @property
    def badge(self) -> str:
        return str(self.index + 1)


def gallery_tiles(items: Sequence[Any], resolver: MediaUrlResolver | None = None) -> list[GalleryTile]:
    """Preview model of a gallery: resolved image URLs or placeholders."""
    resolver = resolver or MediaUrlResolver()
    tiles = []
    for i, item in enumerate(items):
        url = media_url_of(item)
        src = resolver.resolve(url) if is_image_path(url) else ""
        tiles.append(GalleryTile(index=i, url=url, src=src or None, alt=media_alt_of(item, i)))
    return tiles


class GalleryEditor:
    """Binds a gallery value to an ``on_change`` callback.

    Each method returns True when it called back.  Out-of-range indexes and
    moves past either end return False and leave the value alone.
    """

    def __init__(
        self,
        value: object,
        on_change: Callable[[list[Any]], None],
        resolver: MediaUrlResolver | None = None,
    ) -> None:
        self.items = gallery_items(value)
        self.on_change = on_change
        self.resolver = resolver or MediaUrlResolver()

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.items)

    def _emit(self, items: list[Any]) -> bool:
        self.items = items
        self.on_change(items)
        return True

    def tiles(self) -> list[GalleryTile]:
        return gallery_tiles(self.items, self.resolver)

    def select(self, descriptor: Descriptor, replace_index: int | None = None) -> bool:
        """Media picker selection: append, or replace at `replace_index`."""
        if replace_index is None:
            return self.add(descriptor)
        return self.replace(replace_index, descriptor)

    def add(self, descriptor: Descriptor) -> bool:
        return self._emit(gallery_add(self.items, descriptor))

    def replace(self, index: int, descriptor: Descriptor) -> bool:
        if not self._in_range(index):
            return False
        return self._emit(gallery_replace(self.items, index, descriptor))

    def remove(self, index: int) -> bool:
        if not self._in_range(index):
            return False
        return self._emit(gallery_remove(self.items, index))

    def move(self, src: int, dst: int) -> bool:
        if not self._in_range(src) or not self._in_range(dst):
            logger.debug(f"Ignoring gallery move {src} -> {dst} (size {len(self.items)})")
            return False
        if src == dst:
            return False
        return self._emit(gallery_move(self.items, src, dst))

    def move_up(self, index: int) -> bool:
        return self.move(index, index - 1)

    def move_down(self, index: int) -> bool:
        return self.move(index, index + 1)

    def reorder(self, order: Sequence[int]) -> bool:
        if list(order) == list(range(len(self.items))):
            return False
        return self._emit(gallery_reorder(self.items, order))

    def set_caption(self, index: int, alt: str) -> bool:
        if not self._in_range(index) or not isinstance(self.items[index], dict):
            return False
        return self._emit(gallery_set_caption(self.items, index, alt))

    def set_url(self, index: int, url: str) -> bool:
        if not self._in_range(index) or not isinstance(self.items[index], dict):
            return False
        return self._emit(gallery_set_url(self.items, index, url))
