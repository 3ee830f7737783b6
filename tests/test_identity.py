"""Tests for session-only item identities in `content_editor.identity`."""

from content_editor.identity import ItemKeys


def test_keys_unique():
    keys = ItemKeys(5)
    assert len(set(keys)) == 5


def test_swap_keeps_expanded_with_item():
    keys = ItemKeys(3)
    keys.toggle(0)
    keys.swap(0, 2)
    assert keys.is_expanded(2)
    assert not keys.is_expanded(0)


def test_permute():
    keys = ItemKeys(3)
    a, b, c = list(keys)
    keys.permute([1, 2, 0])
    assert list(keys) == [b, c, a]


def test_remove_forgets_state():
    keys = ItemKeys(2)
    first = keys[0]
    keys.toggle(0)
    keys.child(0, 2)
    keys.remove(0)
    assert first not in keys.expanded
    assert len(keys) == 1
    keys.remove(7)
    assert len(keys) == 1


def test_replace_gives_new_identity():
    keys = ItemKeys(2)
    old = keys[1]
    keys.toggle(1)
    assert keys.replace(1) != old
    assert not keys.is_expanded(1)


def test_sync_preserves_surviving_positions():
    keys = ItemKeys(3)
    before = list(keys)
    keys.sync(2)
    assert list(keys) == before[:2]
    keys.sync(4)
    assert list(keys)[:2] == before[:2]
    assert len(keys) == 4


def test_children_follow_parent():
    keys = ItemKeys(2)
    child = keys.child(0, 1)
    child.toggle(0)
    keys.swap(0, 1)
    assert keys.child(1, 1) is child
    assert keys.child(1, 1).is_expanded(0)


def test_toggle_returns_state():
    keys = ItemKeys(1)
    assert keys.toggle(0) is True
    assert keys.toggle(0) is False
