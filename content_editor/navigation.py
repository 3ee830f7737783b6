"""Navigation tree editor
----------------------

Menu items are ``{"label", "href", "order"?, "icon"?, "children"?}`` nested to a
bounded depth (root items are depth 0).  Nodes are addressed by index paths:
``(2,)`` is the third root item, ``(2, 0)`` its first child.

Edits rebuild only the containers on the way from the root to the target
(copy-on-write), so no node is ever shared between the old and the new tree.
After any structural change at the root level every root item's ``order`` is
its 1-based position; at deeper levels ``order`` is renumbered only where an
item already carries one.  A node with no children has no ``children`` key.
"""

from __future__ import annotations

__all__ = [
    "Path",
    "NEW_ITEM",
    "NEW_CHILD",
    "nav_items",
    "renumber",
    "get_node",
    "can_add_child",
    "add_root_item",
    "remove_node",
    "move_node",
    "add_child",
    "remove_child",
    "update_node",
    "NavPreviewRow",
    "navigation_preview",
    "navigation_problems",
    "NavigationEditor",
]

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from content_editor.identity import ItemKeys
from content_editor.validation import NavigationItem, validation_problems

logger = logging.getLogger(__name__)

Path = tuple[int, ...]
Direction = Literal["up", "down"]

NEW_ITEM = {"label": "New Item", "href": "/"}
NEW_CHILD = {"label": "New Sub-item", "href": "/"}


def nav_items(value: object) -> list[dict[str, Any]]:
    """The value as a list of menu items; anything else is an empty menu."""
    return list(value) if isinstance(value, list) else []


def renumber(level: Sequence[dict[str, Any]], force: bool = True) -> list[dict[str, Any]]:
    """Set ``order`` to the 1-based position (only on items that have one unless `force`)."""
    out = []
    for i, item in enumerate(level):
        if force or "order" in item:
            item = {**item, "order": i + 1}
        out.append(item)
    return out


def get_node(items: Sequence[dict[str, Any]], path: Path) -> dict[str, Any]:
    """Node at `path` (raises IndexError/KeyError on a bad path)."""
    if not path:
        raise IndexError("Empty navigation path")
    node = items[path[0]]
    for i in path[1:]:
        node = node["children"][i]
    return node


def _rebuild_level(
    items: Sequence[dict[str, Any]],
    parent: Path,
    fn: Callable[[list[dict[str, Any]]], list[dict[str, Any]]],
) -> list[dict[str, Any]]:
    """Replace the sibling list under `parent` with ``fn(siblings)``, copying the path to it.

    The root level is always renumbered; an emptied child level drops the
    ``children`` key.
    """
    if not parent:
        return renumber(fn(list(items)), force=True)

    i = parent[0]
    node = items[i]
    children = list(node.get("children") or [])
    if len(parent) == 1:
        new_children = renumber(fn(children), force=False)
    else:
        new_children = _rebuild_level(children, parent[1:], fn)

    new_node = {k: v for k, v in node.items() if k != "children"}
    if new_children:
        new_node["children"] = new_children
    elif "children" in node:
        logger.debug(f"Dropping empty children of {node.get('label')!r}")

    out = list(items)
    out[i] = new_node
    return out


def _rebuild_node(
    items: Sequence[dict[str, Any]],
    path: Path,
    fn: Callable[[dict[str, Any]], dict[str, Any]],
) -> list[dict[str, Any]]:
    """Replace the node at `path` with ``fn(node)`` without renumbering anything."""
    out = list(items)
    i = path[0]
    if len(path) == 1:
        out[i] = fn(items[i])
        return out
    node = items[i]
    out[i] = {**node, "children": _rebuild_node(node["children"], path[1:], fn)}
    return out


def _level_size(items: Sequence[dict[str, Any]], parent: Path) -> int:
    if not parent:
        return len(items)
    return len(get_node(items, parent).get("children") or [])


def can_add_child(depth: int, allow_children: bool = True, max_depth: int = 2) -> bool:
    """Whether a node at `depth` may get children."""
    return allow_children and depth < max_depth - 1


def add_root_item(items: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    """Append ``New Item`` with ``order`` = new length."""
    return _rebuild_level(items, (), lambda level: [*level, dict(NEW_ITEM)])


def remove_node(items: Sequence[dict[str, Any]], path: Path) -> list[dict[str, Any]]:
    parent, i = path[:-1], path[-1]
    return _rebuild_level(items, parent, lambda level: [n for j, n in enumerate(level) if j != i])


def move_node(items: Sequence[dict[str, Any]], path: Path, direction: Direction) -> list[dict[str, Any]] | None:
    """Swap a node with its previous/next sibling; None at either boundary."""
    parent, i = path[:-1], path[-1]
    target = i - 1 if direction == "up" else i + 1
    if not 0 <= i < _level_size(items, parent) or not 0 <= target < _level_size(items, parent):
        return None

    def _swap(level: list[dict[str, Any]]) -> list[dict[str, Any]]:
        level[i], level[target] = level[target], level[i]
        return level

    return _rebuild_level(items, parent, _swap)


def add_child(items: Sequence[dict[str, Any]], path: Path) -> list[dict[str, Any]]:
    """Append ``New Sub-item`` under the node at `path` (creating ``children`` if absent)."""
    return _rebuild_level(items, path, lambda level: [*level, dict(NEW_CHILD)])


def remove_child(items: Sequence[dict[str, Any]], parent: Path, index: int) -> list[dict[str, Any]]:
    return remove_node(items, (*parent, index))


def update_node(items: Sequence[dict[str, Any]], path: Path, **updates: Any) -> list[dict[str, Any]]:  # noqa: ANN401
    """Set fields (``label``, ``href``, ``icon`` ...) on one node; a None value removes the key."""

    def _apply(node: dict[str, Any]) -> dict[str, Any]:
        out = {**node, **updates}
        for k, v in updates.items():
            if v is None:
                del out[k]
        return out

    return _rebuild_node(items, path, _apply)


# --------------------------------------------------------
#          READ-ONLY PREVIEW
# --------------------------------------------------------


@dataclass(frozen=True)
class NavPreviewRow:
    path: Path
    label: str
    href: str
    order: int  # Stored order, or position when missing
    icon: str | None = None

    @property
    def depth(self) -> int:
        return len(self.path) - 1


def navigation_preview(items: Sequence[dict[str, Any]]) -> list[NavPreviewRow]:
    """Flatten a menu depth-first into rows for a read-only view (no controls)."""
    rows: list[NavPreviewRow] = []

    def _walk(level: Sequence[dict[str, Any]], prefix: Path) -> None:
        for i, node in enumerate(level):
            path = (*prefix, i)
            rows.append(
                NavPreviewRow(
                    path=path,
                    label=str(node.get("label", "")),
                    href=str(node.get("href", "")),
                    order=node.get("order") or i + 1,
                    icon=node.get("icon"),
                )
            )
            _walk(node.get("children") or [], path)

    _walk(items, ())
    return rows


def navigation_problems(items: Sequence[dict[str, Any]], max_depth: int = 2) -> list[str]:
    """Advisory problems: shape errors, nesting deeper than `max_depth`, gaps in root ``order``."""
    problems: list[str] = []
    for i, node in enumerate(items):
        problems.extend(f"[{i}] {p}" for p in validation_problems(node, NavigationItem))

    for row in navigation_preview(items):
        if row.depth >= max_depth:
            problems.append(f"{list(row.path)} is nested deeper than {max_depth} levels")

    orders = [n.get("order") for n in items if isinstance(n, dict) and "order" in n]
    if orders and orders != list(range(1, len(items) + 1)):
        problems.append(f"Root order is {orders}, expected 1..{len(items)}")
    return problems


# --------------------------------------------------------
#          EDITOR
# --------------------------------------------------------


class NavigationEditor:
    """Binds a menu value to an ``on_change`` callback.

    Expanded/collapsed state is view-only and keyed by stable item identities
    (`ItemKeys`), so it follows items when they move.  Methods return True when
    they called back; refused requests (boundaries, depth limit) return False.
    """

    def __init__(
        self,
        items: object,
        on_change: Callable[[list[dict[str, Any]]], None],
        allow_children: bool = True,
        max_depth: int = 2,
        keys: ItemKeys | None = None,
    ) -> None:
        self.items = nav_items(items)
        self.on_change = on_change
        self.allow_children = allow_children
        self.max_depth = max_depth
        self.keys = (keys or ItemKeys()).sync(len(self.items))

    def _emit(self, items: list[dict[str, Any]]) -> bool:
        self.items = items
        self.on_change(items)
        return True

    def keys_for(self, parent: Path) -> ItemKeys:
        """Identity keys of the sibling list under `parent` (root for ``()``)."""
        keys = self.keys.sync(len(self.items))
        level: Sequence[dict[str, Any]] = self.items
        for i in parent:
            children = level[i].get("children") or []
            keys = keys.child(i, len(children))
            level = children
        return keys

    def can_add_child(self, path: Path) -> bool:
        return can_add_child(len(path) - 1, self.allow_children, self.max_depth)

    # Root level
    def add_item(self) -> bool:
        self.keys_for(()).append()
        return self._emit(add_root_item(self.items))

    def remove_item(self, index: int) -> bool:
        return self.remove((index,))

    def move_up(self, index: int) -> bool:
        return self.move((index,), "up")

    def move_down(self, index: int) -> bool:
        return self.move((index,), "down")

    # Any level
    def remove(self, path: Path) -> bool:
        parent, i = path[:-1], path[-1]
        if not 0 <= i < _level_size(self.items, parent):
            return False
        self.keys_for(parent).remove(i)
        return self._emit(remove_node(self.items, path))

    def move(self, path: Path, direction: Direction) -> bool:
        new_items = move_node(self.items, path, direction)
        if new_items is None:
            logger.debug(f"Ignoring move {direction} of {list(path)}")
            return False
        i = path[-1]
        self.keys_for(path[:-1]).swap(i, i - 1 if direction == "up" else i + 1)
        return self._emit(new_items)

    def add_child(self, path: Path) -> bool:
        if not self.can_add_child(path):
            logger.debug(f"Refusing child under {list(path)} (max depth {self.max_depth})")
            return False
        self.keys_for(path).append()
        return self._emit(add_child(self.items, path))

    def remove_child(self, index: int, child_index: int) -> bool:
        return self.remove((index, child_index))

    def update(self, path: Path, **updates: Any) -> bool:  # noqa: ANN401
        return self._emit(update_node(self.items, path, **updates))

    # View state, not data
    def toggle_expanded(self, path: Path) -> bool:
        return self.keys_for(path[:-1]).toggle(path[-1])

    def is_expanded(self, path: Path) -> bool:
        return self.keys_for(path[:-1]).is_expanded(path[-1])
