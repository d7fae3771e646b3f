# tests/unit/test_config.py

import json

import pytest

from backend.app.config import ConfigLoadError, ExtensionConfig, ExtensionConfigIO


def test_load_creates_default(tmp_path):
    io = ExtensionConfigIO(tmp_path)
    cfg = io.load()

    assert cfg == ExtensionConfig()
    assert io.config_path == tmp_path / "data" / "extensions" / "config.json"
    assert json.loads(io.config_path.read_text(encoding="utf-8"))["settings_key"] == "extensions"


def test_save_and_load(tmp_path):
    io = ExtensionConfigIO(tmp_path)
    io.save(ExtensionConfig(settings_key="shop_extensions", environment="rest", rest_base_url="https://cms.example.test"))

    cfg = io.load()
    assert cfg.settings_key == "shop_extensions"
    assert cfg.environment == "rest"
    assert str(cfg.rest_base_url).startswith("https://cms.example.test")


def test_invalid_file_raises(tmp_path):
    io = ExtensionConfigIO(tmp_path)
    io.config_path.parent.mkdir(parents=True)
    io.config_path.write_text(json.dumps({"environment": "ftp"}), encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        io.load()


def test_unreadable_json_raises(tmp_path):
    io = ExtensionConfigIO(tmp_path)
    io.config_path.parent.mkdir(parents=True)
    io.config_path.write_text("{", encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        io.load()


def test_resolve_path(tmp_path):
    io = ExtensionConfigIO(tmp_path)
    assert io.resolve_path("data/x.json") == (tmp_path / "data" / "x.json").resolve()
    assert io.resolve_path(str(tmp_path / "abs")) == tmp_path / "abs"
