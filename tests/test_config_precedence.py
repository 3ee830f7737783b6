"""Tests for layered editor configuration in `content_editor.config`."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from content_editor.config import DEFAULT_CONFIG, EditorConfig, load_config


def test_defaults() -> None:
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config.max_depth == 2
    assert config.unify_coercion is False
    assert config.gallery_field_types == ["gallery", "media_gallery"]


def test_yaml_file_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "editor.yaml"
    path.write_text("max_depth: 3\nmedia_base_url: https://cdn.example\n")
    config = load_config(str(path))
    assert config.max_depth == 3
    assert config.media_base_url == "https://cdn.example"
    assert config.allow_children is True


def test_overrides_beat_file(tmp_path: Path) -> None:
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"max_depth": 3, "unify_coercion": True}))
    config = load_config(str(path), {"max_depth": 4})
    assert config.max_depth == 4
    assert config.unify_coercion is True


def test_bad_file_falls_back_to_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"no_such_option": 1}))
    with caplog.at_level(logging.WARNING, logger="content_editor.config"):
        config = load_config(str(path))
    assert config == DEFAULT_CONFIG
    assert "Ignoring config file" in caplog.text


def test_missing_file_falls_back(tmp_path: Path) -> None:
    assert load_config(str(tmp_path / "missing.yaml")) == DEFAULT_CONFIG


def test_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "editor.toml"
    path.write_text("max_depth = 3")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_invalid_overrides_raise() -> None:
    with pytest.raises(ValidationError):
        load_config(overrides={"log_level": "LOUD"})


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValidationError):
        EditorConfig(colour="red")
