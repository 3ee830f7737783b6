"""Tests for the console entry points in `content_editor.commands`."""

import json
import os
import sys
from unittest.mock import patch

import pytest

from content_editor.commands import describe_entry, describe_fields, streamlit_fn_factory
from content_editor.config import EditorConfig
from content_editor.validation import ContentType

NAV_TYPE = {"name": "Navigation", "api_id": "navigation", "fields": [{"name": "items", "type": "json"}]}


def test_describe_fields_by_shape():
    values = {"title": "Hi", "media_gallery": [{"url": "/a.jpg"}], "tags": ["a", "b"], "seo": {"x": 1}}
    assert describe_fields(values) == [
        ("title", "primitive", "generic"),
        ("media_gallery", "media_gallery_array", "gallery"),
        ("tags", "simple_array", "generic"),
        ("seo", "object_map", "generic"),
    ]


def test_describe_fields_declared_first():
    """Declared fields come first, even when the entry has no value for them."""
    content_type = ContentType.model_validate(NAV_TYPE)
    rows = describe_fields({"brand": "Acme"}, content_type)
    assert rows == [("items", "primitive", "navigation"), ("brand", "primitive", "generic")]


def test_describe_entry_prints_rows(tmp_path, monkeypatch, capsys):
    entry = tmp_path / "entry.json"
    entry.write_text(json.dumps({"slug": "main-menu", "status": "published", "data": {"items": []}}))
    ctype = tmp_path / "type.json"
    ctype.write_text(json.dumps(NAV_TYPE))
    monkeypatch.setattr(sys, "argv", ["content-editor-describe", str(entry), str(ctype)])

    describe_entry()

    out = capsys.readouterr().out.splitlines()
    assert out[0] == "main-menu [published]"
    assert "items" in out[1] and out[1].endswith("-> navigation")


def test_describe_entry_usage(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["content-editor-describe"])
    with pytest.raises(SystemExit):
        describe_entry()
    assert "Requires one parameter" in capsys.readouterr().out


def test_streamlit_fn_factory_passes_arguments(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["content-editor", "entry.json", "type.json"])
    run = streamlit_fn_factory("./app.py", "/opt/editor")
    with patch("subprocess.run") as mock_run:
        run()
    mock_run.assert_called_once_with(
        ["streamlit", "run", os.path.join("/opt/editor", "./app.py"), "entry.json", "type.json"]
    )


def test_describe_fields_uses_given_config():
    """Classification and editor come from the same config."""
    content_type = ContentType.model_validate({"fields": [{"name": "pics", "type": "photos"}]})
    config = EditorConfig(gallery_field_types=["photos"])
    assert describe_fields({"pics": []}, content_type, config) == [("pics", "media_gallery_array", "gallery")]
