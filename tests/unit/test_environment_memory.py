# tests/unit/test_environment_memory.py

from backend.app.extensions.domain.models import PluginRecord
from backend.app.extensions.environment.memory import InMemoryPluginEnvironment


def test_initial_records():
    env = InMemoryPluginEnvironment([PluginRecord(slug="forms", name="Forms", installed=True, active=True)])
    assert env.is_installed("forms")
    assert env.is_activated("forms")
    assert env.display_name("forms") == "Forms"


def test_unknown_slug():
    env = InMemoryPluginEnvironment()
    assert env.is_installed("nope") is False
    assert env.is_activated("nope") is False
    assert env.install("nope") is False
    assert env.activate("nope") is False
    assert env.deactivate("nope") is False
    assert env.display_name("nope") == "nope"


def test_lifecycle():
    env = InMemoryPluginEnvironment()
    env.add("seo-pro")

    assert env.activate("seo-pro") is False
    assert env.install("seo-pro") is True
    assert env.is_installed("seo-pro")
    assert not env.is_activated("seo-pro")

    assert env.activate("seo-pro") is True
    assert env.is_activated("seo-pro")

    assert env.deactivate("seo-pro") is True
    assert not env.is_activated("seo-pro")


def test_active_flag_without_install_is_not_activated():
    env = InMemoryPluginEnvironment()
    env.add("odd", active=True)
    assert env.is_activated("odd") is False
