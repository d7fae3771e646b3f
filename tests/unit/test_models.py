# tests/unit/test_models.py

import pytest
from pydantic import ValidationError

from backend.app.extensions.domain.models import ExtensionDescriptor, ExtensionType, Preference


def test_descriptor_accepts_host_field_names():
    d = ExtensionDescriptor.model_validate(
        {"name": "seo", "type": "module", "deps": ["seo-pro"], "upgrade": True, "status": "on"}
    )
    assert d.key == "seo"
    assert d.type == ExtensionType.MODULE
    assert d.needs_upgrade is True
    assert d.base_status == Preference.ON


def test_descriptor_defaults():
    d = ExtensionDescriptor(key="search", type="module")
    assert d.slug == ""
    assert d.deps == ()
    assert d.needs_upgrade is False
    assert d.base_status == Preference.OFF


def test_descriptor_null_slug_and_deps():
    d = ExtensionDescriptor.model_validate({"key": "x", "type": "plugin", "slug": None, "deps": None})
    assert d.slug == ""
    assert d.deps == ()


def test_descriptor_keeps_extra_fields():
    d = ExtensionDescriptor.model_validate({"key": "x", "type": "addon", "icon": "x.svg"})
    assert d.model_extra == {"icon": "x.svg"}


def test_descriptor_is_frozen():
    d = ExtensionDescriptor(key="x", type="plugin", slug="x")
    with pytest.raises(ValidationError):
        d.slug = "y"


def test_descriptor_keeps_unknown_type_as_string():
    d = ExtensionDescriptor.model_validate({"key": "x", "type": "arraytics-plugin", "slug": "x"})
    assert d.type == "arraytics-plugin"
    assert not isinstance(d.type, ExtensionType)


def test_descriptor_deps_are_immutable():
    d = ExtensionDescriptor.model_validate({"key": "seo", "type": "module", "deps": ["seo-pro"]})
    assert d.deps == ("seo-pro",)
    with pytest.raises(AttributeError):
        d.deps.insert(0, "other")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("on", Preference.ON),
        ("off", Preference.OFF),
        ("install", Preference.ON),
        ("activate", Preference.ON),
        (None, Preference.OFF),
    ],
)
def test_descriptor_base_status_reads_like_stored_values(raw, expected):
    d = ExtensionDescriptor.model_validate({"key": "x", "type": "module", "status": raw})
    assert d.base_status == expected


def test_descriptor_requires_key():
    with pytest.raises(ValidationError):
        ExtensionDescriptor.model_validate({"type": "plugin"})
