"""Tests for the media gallery editor in `content_editor.gallery`."""

import pytest

from content_editor.gallery import (
    GalleryEditor,
    gallery_move,
    gallery_reorder,
    gallery_tiles,
    media_item_from_descriptor,
)
from content_editor.media import MediaUrlResolver
from content_editor.validation import MediaDescriptor

IMG1 = {"url": "/uploads/1.jpg", "alt": "one"}
IMG2 = {"url": "/uploads/2.png", "alt": "two"}


class TestDescriptor:
    def test_url_priority(self):
        assert media_item_from_descriptor({"url": "u", "public_url": "p", "storage_path": "s"})["url"] == "u"
        assert media_item_from_descriptor({"public_url": "p", "storage_path": "s"})["url"] == "p"
        assert media_item_from_descriptor({"storage_path": "s"})["url"] == "s"
        assert media_item_from_descriptor({})["url"] == ""

    def test_alt_priority(self):
        assert media_item_from_descriptor({"alt_text": "a", "filename": "f"})["alt"] == "a"
        assert media_item_from_descriptor({"filename": "f"})["alt"] == "f"
        assert media_item_from_descriptor({"url": "u"}) == {"url": "u", "alt": ""}

    def test_model_descriptor(self):
        d = MediaDescriptor(public_url="https://cdn/x.jpg", filename="x.jpg", mime_type="image/jpeg")
        assert media_item_from_descriptor(d) == {"url": "https://cdn/x.jpg", "alt": "x.jpg"}


class TestGalleryEditor:
    def test_move_down_then_boundary(self, recorder):
        """Moving img1 down swaps it; moving the last item down again is a no-op."""
        editor = GalleryEditor([IMG1, IMG2], recorder)
        assert editor.move_down(0)
        assert recorder.calls == [[IMG2, IMG1]]

        assert not editor.move_down(1)
        assert len(recorder.calls) == 1
        assert editor.items == [IMG2, IMG1]

    def test_move_up_at_top_is_noop(self, recorder):
        editor = GalleryEditor([IMG1, IMG2], recorder)
        assert not editor.move_up(0)
        assert not editor.move(5, 0)
        assert recorder.calls == []

    def test_add_appends(self, recorder):
        editor = GalleryEditor([IMG1], recorder)
        editor.select({"storage_path": "/uploads/3.gif", "filename": "3.gif"})
        assert recorder.calls == [[IMG1, {"url": "/uploads/3.gif", "alt": "3.gif"}]]

    def test_replace_splices(self, recorder):
        editor = GalleryEditor([IMG1, IMG2], recorder)
        editor.select({"url": "/uploads/new.jpg", "alt_text": "new"}, replace_index=0)
        assert recorder.calls == [[{"url": "/uploads/new.jpg", "alt": "new"}, IMG2]]

    def test_replace_out_of_range(self, recorder):
        editor = GalleryEditor([IMG1], recorder)
        assert not editor.replace(3, {"url": "x"})
        assert recorder.calls == []

    def test_remove(self, recorder):
        editor = GalleryEditor([IMG1, IMG2], recorder)
        assert editor.remove(0)
        assert recorder.calls == [[IMG2]]
        assert not editor.remove(4)

    def test_caption_and_url(self, recorder):
        item = {"url": "/a.jpg", "alt": "x", "credit": "me"}
        editor = GalleryEditor([item], recorder)
        editor.set_caption(0, "new alt")
        editor.set_url(0, "/b.jpg")
        assert recorder.calls[-1] == [{"url": "/b.jpg", "alt": "new alt", "credit": "me"}]
        assert item == {"url": "/a.jpg", "alt": "x", "credit": "me"}

    def test_no_order_key_stored(self, recorder):
        editor = GalleryEditor([IMG1, IMG2], recorder)
        editor.move_down(0)
        assert all("order" not in item for item in recorder.calls[-1])

    def test_non_list_value_is_empty(self, recorder):
        editor = GalleryEditor(None, recorder)
        assert editor.items == []
        editor.add({"url": "/a.jpg"})
        assert recorder.calls == [[{"url": "/a.jpg", "alt": ""}]]

    def test_reorder(self, recorder):
        editor = GalleryEditor([IMG1, IMG2, {"url": "c.jpg"}], recorder)
        assert not editor.reorder([0, 1, 2])
        assert editor.reorder([2, 0, 1])
        assert recorder.calls == [[{"url": "c.jpg"}, IMG1, IMG2]]


class TestPureOps:
    def test_move_and_reorder(self):
        items = ["a", "b", "c"]
        assert gallery_move(items, 0, 2) == ["b", "c", "a"]
        assert gallery_reorder(items, [1, 2, 0]) == ["b", "c", "a"]
        assert items == ["a", "b", "c"]

    def test_reorder_rejects_bad_permutation(self):
        with pytest.raises(ValueError):
            gallery_reorder(["a", "b"], [0, 0])


class TestTiles:
    def test_tiles_resolve_images(self):
        tiles = gallery_tiles([IMG1, {"url": "/doc.pdf"}, {"title": "nothing"}], MediaUrlResolver("https://cdn.example/"))
        assert tiles[0].src == "https://cdn.example/uploads/1.jpg"
        assert tiles[0].badge == "1"
        assert tiles[1].src is None
        assert tiles[1].url == "/doc.pdf"
        assert tiles[2].url is None
        assert tiles[2].alt == "nothing"
