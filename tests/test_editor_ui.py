"""Tests for the Streamlit entry editor, driven through a mocked `st`."""

import json
from contextlib import ExitStack
from unittest.mock import patch

import pytest

from content_editor.classifier import EditorKind, WidgetKind
from content_editor.config import DEFAULT_CONFIG, EditorConfig
from content_editor.validation import ContentType, FieldDefinition, MediaDescriptor
from content_editor.tools.editor import fields, framework
from content_editor.tools.editor.gallery import gallery_editor
from content_editor.tools.editor.navigation import preview_markdown
from content_editor.tools.editor.structured import json_field_editor, read_only_text

pytestmark = pytest.mark.ui

UI_MODULES = ["framework", "structured", "gallery", "navigation", "fields"]


@pytest.fixture
def ui(mock_st):
    """Mocked `st` patched into every editor module, with a loaded entry."""
    # Dialog-opening buttons are never "clicked"
    mock_st.button.return_value = False
    mock_st.session_state.update(
        {
            "config": DEFAULT_CONFIG,
            "entry": {"id": "e1", "slug": "home", "status": "draft", "data": {"title": "Home"}},
            "values": {"title": "Home"},
            "slug": "home",
            "status": "draft",
            "content_type": None,
            "media_library": [],
            "item_keys": {},
            "raw_sessions": {},
            "expanded": {},
            "picker": None,
            "dirty": False,
        }
    )
    with ExitStack() as stack:
        for module in UI_MODULES:
            stack.enter_context(patch(f"content_editor.tools.editor.{module}.st", mock_st))
        yield mock_st


def _on_change_of(mock_widget):
    return mock_widget.call_args.kwargs["on_change"]


def _button(mock_st, label):
    return next(c for c in mock_st.button.call_args_list if c.args and c.args[0] == label)


def _button_labels(mock_st):
    return [c.args[0] for c in mock_st.button.call_args_list]


class TestState:
    def test_set_field_replaces_values(self, ui):
        before = ui.session_state["values"]
        framework.set_field("title", "Welcome")
        assert ui.session_state["values"] == {"title": "Welcome"}
        assert before == {"title": "Home"}
        assert ui.session_state["dirty"] is True

    def test_entry_title(self, ui):
        assert framework.entry_title() == "Home"
        ui.session_state["values"] = {}
        assert framework.entry_title() == "home"

    def test_bind_widget(self, ui):
        seen = []
        ui.session_state["w"] = "typed"
        framework.bind_widget("w", lambda *a: seen.append(a), "title")()
        assert seen == [("title", "typed")]

    def test_picker_scope(self, ui):
        framework.open_picker("media_gallery", 2)
        assert framework.picker_target("media_gallery") == {"scope": "media_gallery", "replace_index": 2}
        assert framework.picker_target("hero") is None
        framework.close_picker()
        assert framework.picker_target("media_gallery") is None

    def test_per_scope_state_is_reused(self, ui):
        assert framework.item_keys("a") is framework.item_keys("a")
        assert framework.raw_session("a") is not framework.raw_session("b")

    def test_get_config_from_env_file(self, ui, tmp_path, monkeypatch):
        path = tmp_path / "editor.yaml"
        path.write_text("max_depth: 3\n")
        monkeypatch.setenv(framework.CONFIG_ENV, str(path))
        ui.session_state.pop("config")
        assert framework.get_config().max_depth == 3
        assert ui.session_state["config"].max_depth == 3


class TestLoadAndSave:
    def test_init_state(self, ui, tmp_path):
        entry = tmp_path / "entry.json"
        entry.write_text(json.dumps({"slug": "menu", "status": "published", "content_data": {"items": []}}))
        ctype = tmp_path / "type.json"
        ctype.write_text(json.dumps({"name": "Navigation", "api_id": "navigation"}))
        media = tmp_path / "media.json"
        media.write_text(json.dumps([{"public_url": "https://cdn/a.jpg", "filename": "a.jpg"}]))

        framework.init_state(str(entry), str(ctype), str(media))

        state = ui.session_state
        assert state["values"] == {"items": []}
        assert state["slug"] == "menu"
        assert state["status"] == "published"
        assert state["content_type"].api_id == "navigation"
        assert state["media_library"][0].filename == "a.jpg"
        assert state["dirty"] is False

    def test_init_state_missing_file(self, ui, tmp_path):
        ui.session_state.clear()
        framework.init_state(str(tmp_path / "missing.json"))
        ui.error.assert_called_once()
        ui.stop.assert_called_once()
        assert "values" not in ui.session_state

    def test_payload_keeps_payload_key(self, ui):
        ui.session_state["entry"] = {"id": "e1", "slug": "home", "content_data": {"title": "Home"}}
        ui.session_state["slug"] = "start"
        framework.set_field("title", "Start")
        assert framework.entry_payload() == {
            "id": "e1",
            "slug": "start",
            "status": "draft",
            "content_data": {"title": "Start"},
        }

    def test_save_writes_numbered_backups(self, ui, tmp_path):
        path = tmp_path / "entry.json"
        path.write_text(json.dumps(ui.session_state["entry"]))
        ui.session_state["entry_path"] = str(path)

        framework.set_field("title", "First")
        framework.save_entry()
        framework.set_field("title", "Second")
        framework.save_entry()

        assert json.loads(path.read_text())["data"] == {"title": "Second"}
        assert json.loads((tmp_path / "entry.json.orig.0.json").read_text())["data"] == {"title": "Home"}
        assert json.loads((tmp_path / "entry.json.orig.1.json").read_text())["data"] == {"title": "First"}
        assert ui.session_state["dirty"] is False
        assert ui.success.call_count == 2

    def test_save_without_backup(self, ui, tmp_path):
        path = tmp_path / "entry.json"
        path.write_text("{}")
        ui.session_state["entry_path"] = str(path)
        ui.session_state["config"] = EditorConfig(backup_on_save=False)
        framework.save_entry()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["entry.json"]

    def test_save_error_reported(self, ui, tmp_path):
        ui.session_state["entry_path"] = str(tmp_path / "no_dir" / "entry.json")
        framework.save_entry()
        ui.error.assert_called_once()
        ui.success.assert_not_called()


class TestReadOnly:
    def test_read_only_text(self):
        assert read_only_text(True) == "✓ Yes"
        assert read_only_text([]) == "Empty"
        assert read_only_text(["a", 1]) == "`a` `1`"
        assert read_only_text({"a": 1}) == '`{"a":1}`'
        assert read_only_text("https://example.com") == "[https://example.com](https://example.com)"
        assert read_only_text(None) == ""

    def test_preview_markdown(self):
        items = [
            {"label": "Home", "href": "/", "order": 1, "icon": "🏠"},
            {"label": "About", "href": "/about", "order": 2, "children": [{"label": "Team", "href": "/team"}]},
        ]
        assert preview_markdown(items).splitlines() == [
            "- 🏠 **Home** `/` #1",
            "- **About** `/about` #2",
            "  - **Team** `/team` #1",
        ]


class TestFields:
    def test_field_label(self):
        assert fields.field_label("site_name") == "Site Name"
        assert fields.field_label("x", FieldDefinition(name="x", label="Custom")) == "Custom"

    def test_additional_fields(self):
        ct = ContentType.model_validate({"fields": [{"name": "title"}]})
        assert fields.additional_fields({"title": "", "b": 1, "a": 2}, ct) == ["b", "a"]
        assert fields.additional_fields({"a": 1}, None) == ["a"]

    def test_dispatch(self, ui):
        nav_type = ContentType(api_id="navigation")
        items = [{"label": "Home", "href": "/", "order": 1}]
        assert fields.render_field("items", items, None, nav_type) is EditorKind.NAVIGATION
        assert fields.render_field("media_gallery", [{"url": "/a.jpg"}]) is EditorKind.GALLERY
        assert fields.render_field("seo", {"title": "x"}) is EditorKind.GENERIC
        assert fields.render_field("title", "Hi") is WidgetKind.TEXT

    def test_declared_scalar_with_container_value(self, ui):
        fd = FieldDefinition(name="tags", type="text")
        assert fields.render_field("tags", ["a"], fd) is EditorKind.GENERIC

    def test_number_field_commits_prefix(self, ui):
        fd = FieldDefinition(name="count", type="number")
        assert fields.render_field("count", 3, fd) is WidgetKind.NUMBER
        ui.session_state["field_count"] = "12abc"
        _on_change_of(ui.text_input)()
        assert ui.session_state["values"]["count"] == 12

    def test_boolean_field(self, ui):
        assert fields.render_field("featured", False, FieldDefinition(name="featured", type="boolean")) is WidgetKind.BOOLEAN
        ui.session_state["field_featured"] = True
        _on_change_of(ui.toggle)()
        assert ui.session_state["values"]["featured"] is True

    def test_read_only_renders_no_inputs(self, ui):
        fields.render_field("title", "Hi", read_only=True)
        ui.text_input.assert_not_called()
        ui.markdown.assert_called_with("**Title**: Hi")

    def test_render_fields_additional_header(self, ui):
        ui.session_state["values"] = {"title": "Home", "extra": 1}
        fields.render_fields(ContentType.model_validate({"fields": [{"name": "title"}]}))
        ui.subheader.assert_called_once_with("Additional Fields")


class TestJsonFieldEditor:
    def test_invalid_raw_text_shows_error(self, ui, recorder):
        editor = json_field_editor("seo", {"a": 1}, recorder)
        editor.toggle_mode()

        json_field_editor("seo", {"a": 1}, recorder)
        ui.session_state["seo_raw"] = "{bad"
        _on_change_of(ui.text_area)()
        assert recorder.calls == []

        json_field_editor("seo", {"a": 1}, recorder)
        ui.error.assert_called_with("Invalid JSON")

    def test_valid_raw_text_calls_back(self, ui, recorder):
        json_field_editor("seo", {"a": 1}, recorder).toggle_mode()
        json_field_editor("seo", {"a": 1}, recorder)
        ui.session_state["seo_raw"] = '{"a": 2}'
        _on_change_of(ui.text_area)()
        assert recorder.calls == [{"a": 2}]

    def test_read_only_returns_none(self, ui, recorder):
        assert json_field_editor("seo", {"a": True}, recorder, read_only=True) is None
        ui.markdown.assert_called_with("**A**: ✓ Yes")

    def test_collapse_hides_body(self, ui, recorder):
        value = {"a": 1, "b": 2}
        json_field_editor("f", value, recorder)
        assert ui.text_input.call_count == 4

        _button(ui, "▾").kwargs["on_click"]()
        assert ui.session_state["expanded"] == {"f": False}

        ui.text_input.reset_mock()
        ui.button.reset_mock()
        editor = json_field_editor("f", value, recorder)
        assert not editor.expanded
        ui.text_input.assert_not_called()
        assert _button_labels(ui) == ["▸", "Raw JSON"]
        assert recorder.calls == []

    def test_expand_again_restores_rows(self, ui, recorder):
        ui.session_state["expanded"]["f"] = False
        json_field_editor("f", ["x", "y"], recorder)
        _button(ui, "▸").kwargs["on_click"]()

        ui.text_input.reset_mock()
        json_field_editor("f", ["x", "y"], recorder)
        assert ui.text_input.call_count == 2

    def test_collapsed_state_is_per_field(self, ui, recorder):
        ui.session_state["expanded"]["other"] = False
        json_field_editor("f", {"a": 1}, recorder)
        ui.text_input.assert_called()


class TestMediaPicker:
    """The picker request is consumed when its dialog is shown."""

    def test_gallery_dialog_not_reopened_after_dismiss(self, ui, recorder):
        framework.open_picker("media_gallery", None)
        with patch("content_editor.tools.editor.gallery.media_picker_dialog") as dialog:
            gallery_editor("media_gallery", [{"url": "/a.jpg"}], recorder)
            # Dialog closed with its own close control: nothing ran, next rerun
            gallery_editor("media_gallery", [{"url": "/a.jpg"}], recorder)
        dialog.assert_called_once()
        assert ui.session_state["picker"] is None

    def test_gallery_selection_after_request_cleared(self, ui, recorder):
        framework.open_picker("media_gallery", 0)
        with patch("content_editor.tools.editor.gallery.media_picker_dialog") as dialog:
            gallery_editor("media_gallery", [{"url": "/a.jpg"}], recorder)
        on_select = dialog.call_args.args[0]
        on_select(MediaDescriptor(url="/b.jpg"))
        assert recorder.calls == [[{"url": "/b.jpg", "alt": ""}]]

    def test_media_field_dialog_not_reopened(self, ui):
        fd = FieldDefinition(name="hero", type="image")
        framework.open_picker("hero")
        with patch("content_editor.tools.editor.fields.media_picker_dialog") as dialog:
            fields.render_field("hero", "/a.jpg", fd)
            fields.render_field("hero", "/a.jpg", fd)
        dialog.assert_called_once()
        assert framework.picker_target("hero") is None

        dialog.call_args.args[0](MediaDescriptor(public_url="https://cdn/b.png"))
        assert ui.session_state["values"]["hero"] == "https://cdn/b.png"

    def test_other_scope_keeps_request(self, ui, recorder):
        framework.open_picker("hero")
        with patch("content_editor.tools.editor.gallery.media_picker_dialog") as dialog:
            gallery_editor("media_gallery", [], recorder)
        dialog.assert_not_called()
        assert framework.picker_target("hero") is not None
