# tests/conftest.py

import pytest

from backend.app.extensions.environment.memory import InMemoryPluginEnvironment
from backend.app.extensions.services.registry import ExtensionRegistry
from backend.app.extensions.store.settings_store import InMemorySettingsStore


@pytest.fixture
def store():
    """An empty in-memory settings store."""
    return InMemorySettingsStore()


@pytest.fixture
def environment():
    """A host with a few known plugins in different states."""
    env = InMemoryPluginEnvironment()
    env.add("seo-pro", name="SEO Pro")
    env.add("forms", name="Forms", installed=True)
    env.add("gallery", name="Gallery", installed=True, active=True)
    env.add("host-tools", name="Host Tools", installed=True)
    return env


@pytest.fixture
def descriptors():
    """One descriptor of every kind."""
    return [
        {"key": "seo", "type": "module", "slug": "seo-module", "deps": ["seo-pro"], "base_status": "off"},
        {"key": "search", "type": "module", "base_status": "on"},
        {"key": "forms", "type": "addon", "slug": "forms"},
        {"key": "gallery", "type": "plugin", "slug": "gallery", "base_status": "on"},
        {"key": "tools", "type": "host-plugin", "slug": "host-tools"},
    ]


@pytest.fixture
def registry(store, environment, descriptors):
    """A registry booted with the default descriptors."""
    reg = ExtensionRegistry(store, environment)
    reg.boot("test_extensions", descriptors)
    return reg
