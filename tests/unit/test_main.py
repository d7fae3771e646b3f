# tests/unit/test_main.py

import logging

import pytest

from backend.app.config import ExtensionConfig, ExtensionConfigIO
from backend.app.extensions.domain.models import DisplayStatus
from backend.app.extensions.environment.filesystem import FilesystemPluginEnvironment
from backend.app.extensions.environment.memory import InMemoryPluginEnvironment
from backend.app.extensions.environment.rest import RestPluginEnvironment
from backend.app.extensions.store.settings_store import InMemorySettingsStore, JsonFileSettingsStore
from backend.app.logging_config import setup_logging
from backend.app.main import build_environment, create_registry


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    for name in (
        "backend.app",
        "backend.app.extensions",
        "backend.app.extensions.environment.memory",
        "backend.app.extensions.environment.filesystem",
        "backend.app.extensions.environment.rest",
    ):
        lg = logging.getLogger(name)
        for h in list(lg.handlers):
            lg.removeHandler(h)
            h.close()
        lg.propagate = True


def test_create_registry_filesystem(tmp_path):
    (tmp_path / "data" / "extensions" / "sources" / "seo-pro").mkdir(parents=True)
    descriptors = [{"key": "seo", "type": "module", "deps": ["seo-pro"]}]

    registry = create_registry(descriptors=descriptors, core_root=tmp_path)

    assert isinstance(registry.environment, FilesystemPluginEnvironment)
    assert isinstance(registry.store, JsonFileSettingsStore)
    assert registry.resolve_all()["seo"].status == DisplayStatus.UPGRADE

    assert registry.transition("seo", "install") is True
    assert registry.transition("seo", "activate") is True
    assert registry.update("seo", "on") is True
    assert registry.resolve_all()["seo"].status == DisplayStatus.ACTIVATE

    assert (tmp_path / "data" / "extensions" / "settings.json").is_file()
    assert (tmp_path / "logs" / "extensions.log").is_file()


def test_create_registry_memory(tmp_path):
    cfg = ExtensionConfig(environment="memory", settings_key="mem")
    registry = create_registry(cfg, descriptors=[{"key": "search", "type": "module", "status": "on"}], core_root=tmp_path)

    assert isinstance(registry.environment, InMemoryPluginEnvironment)
    assert isinstance(registry.store, InMemorySettingsStore)
    assert registry.settings_key == "mem"
    assert list(registry.enabled()) == ["search"]


def test_create_registry_applies_transform(tmp_path):
    cfg = ExtensionConfig(environment="memory")
    registry = create_registry(
        cfg,
        descriptors=[{"key": "a", "type": "module"}],
        transform=lambda entries: [],
        core_root=tmp_path,
    )
    assert registry.descriptors == ()


def test_build_rest_environment(tmp_path):
    cfg = ExtensionConfig(
        environment="rest",
        rest_base_url="https://cms.example.test",
        rest_username="admin",
        rest_password="secret",
        rest_timeout=3,
    )
    env = build_environment(cfg, ExtensionConfigIO(tmp_path))
    assert isinstance(env, RestPluginEnvironment)
    assert env.session.auth == ("admin", "secret")
    assert env.timeout == 3


def test_build_rest_environment_requires_url(tmp_path):
    with pytest.raises(ValueError):
        build_environment(ExtensionConfig(environment="rest"), ExtensionConfigIO(tmp_path))


def test_setup_logging_twice_keeps_one_handler_per_file(tmp_path):
    setup_logging(tmp_path)
    setup_logging(tmp_path)

    assert len(logging.getLogger("backend.app").handlers) == 1
    assert len(logging.getLogger("backend.app.extensions").handlers) == 1
    assert (tmp_path / "core.log").exists()
