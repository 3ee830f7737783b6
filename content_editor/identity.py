"""Stable item identities
----------------------

Transient UI state (expanded cards, widget keys) must follow an item when it
moves, so it is keyed by an identity assigned when the list is first seen
rather than by array position.  Identities live only in the session and are
never written into content data.

`ItemKeys` mirrors every structural edit the editors perform (append, replace,
remove, swap, permute) and keeps one nested `ItemKeys` per item for its
children.
"""

from __future__ import annotations

__all__ = ["ItemKeys"]

import uuid
from typing import Iterator, Sequence


def _new_key() -> str:
    return uuid.uuid4().hex[:12]


class ItemKeys:
    """Parallel list of opaque keys for the items of one array level."""

    def __init__(self, n: int = 0) -> None:
        self._keys: list[str] = [_new_key() for _ in range(n)]
        self._children: dict[str, ItemKeys] = {}
        self.expanded: set[str] = set()

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __getitem__(self, i: int) -> str:
        return self._keys[i]

    def sync(self, n: int) -> "ItemKeys":
        """Match the item count after an edit made elsewhere (e.g. raw mode).

        Surviving positions keep their keys; extra keys are dropped from the end
        and missing ones appended.
        """
        if n < len(self._keys):
            for key in self._keys[n:]:
                self._forget(key)
            del self._keys[n:]
        while len(self._keys) < n:
            self._keys.append(_new_key())
        return self

    def append(self) -> str:
        key = _new_key()
        self._keys.append(key)
        return key

    def remove(self, i: int) -> None:
        if 0 <= i < len(self._keys):
            self._forget(self._keys.pop(i))

    def replace(self, i: int) -> str:
        """New identity at `i` (the item there was swapped for another one)."""
        self._forget(self._keys[i])
        key = _new_key()
        self._keys[i] = key
        return key

    def swap(self, i: int, j: int) -> None:
        self._keys[i], self._keys[j] = self._keys[j], self._keys[i]

    def permute(self, order: Sequence[int]) -> None:
        """Reorder so that new position ``p`` holds the key formerly at ``order[p]``."""
        self._keys = [self._keys[i] for i in order]

    def child(self, i: int, n: int) -> "ItemKeys":
        """Keys for the children of item `i`, synced to `n` children."""
        key = self._keys[i]
        if key not in self._children:
            self._children[key] = ItemKeys(n)
        return self._children[key].sync(n)

    def toggle(self, i: int) -> bool:
        """Flip the expanded flag of item `i`; returns the new state."""
        key = self._keys[i]
        if key in self.expanded:
            self.expanded.discard(key)
            return False
        self.expanded.add(key)
        return True

    def is_expanded(self, i: int) -> bool:
        return self._keys[i] in self.expanded

    def _forget(self, key: str) -> None:
        self.expanded.discard(key)
        self._children.pop(key, None)
