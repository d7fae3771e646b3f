from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# -----------------------------
# Enums
# -----------------------------

class ExtensionType(str, Enum):
    MODULE = "module"
    ADDON = "addon"
    PLUGIN = "plugin"
    HOST_PLUGIN = "host-plugin"


class Preference(str, Enum):
    """
    Persisted on/off intent for an extension.

    This is the only vocabulary that is ever written to the settings store.
    """

    ON = "on"
    OFF = "off"


class DisplayStatus(str, Enum):
    """
    Status shown to the admin UI.

    - on / off: raw preference, used for extensions without an environment target.
    - upgrade: the target plugin is not installed (a paid upgrade or download is needed).
    - install: the target is installed but not active.
    - activate: the target is installed and active.
    """

    ON = "on"
    OFF = "off"
    UPGRADE = "upgrade"
    INSTALL = "install"
    ACTIVATE = "activate"


class ExtensionAction(str, Enum):
    INSTALL = "install"
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"


def normalize_preference(value: Union[str, Preference, None]) -> Preference:
    """
    Collapse any requested status into the stored on/off vocabulary.

    Only an explicit "off" turns an extension off; everything else
    ("on", "install", "activate", ...) counts as "on".
    """
    if value is None:
        return Preference.ON
    if isinstance(value, Enum):
        value = value.value
    return Preference.OFF if value == Preference.OFF.value else Preference.ON


# -----------------------------
# Descriptor
# -----------------------------

class ExtensionDescriptor(BaseModel):
    """
    Static description of one extension, supplied by the host at boot.

    Mirrors the entries a host plugin declares, e.g.

    {
      "name": "seo",
      "type": "module",
      "slug": "seo-module",
      "deps": ["seo-pro"],
      "upgrade": false,
      "status": "off"
    }

    - key: unique identifier, also accepted as "name".
    - type: one of ExtensionType; other strings (e.g. a vendor's own
      "arraytics-plugin") are kept as-is and resolve from the preference alone.
    - slug: plugin identifier understood by the environment (may be empty).
    - deps: plugin slugs this extension depends on. Only the first one drives
      the display status of a module.
    - needs_upgrade: static flag, accepted as "upgrade".
    - base_status: preference used until the admin stores one, accepted as "status".
      Read like stored values: anything but "off" is "on".
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    key: str = Field(validation_alias=AliasChoices("key", "name"))
    type: Union[ExtensionType, str] = Field(union_mode="left_to_right")
    slug: str = ""
    deps: Tuple[str, ...] = ()
    needs_upgrade: bool = Field(
        default=False, validation_alias=AliasChoices("needs_upgrade", "upgrade")
    )
    base_status: Preference = Field(
        default=Preference.OFF, validation_alias=AliasChoices("base_status", "status")
    )

    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("slug", mode="before")
    @classmethod
    def _none_slug(cls, value):
        return "" if value is None else value

    @field_validator("deps", mode="before")
    @classmethod
    def _none_deps(cls, value):
        return () if value is None else value

    @field_validator("base_status", mode="before")
    @classmethod
    def _read_preference(cls, value):
        if value is None:
            return Preference.OFF
        return normalize_preference(value)


# -----------------------------
# Resolved view
# -----------------------------

class ResolvedExtension(BaseModel):
    """
    Descriptor combined with the stored preference and live environment facts.

    Recomputed on every read; never persisted.
    """

    key: str
    descriptor: ExtensionDescriptor
    enabled: bool
    status: DisplayStatus
    notice: Optional[bool] = None

    @property
    def type(self) -> Union[ExtensionType, str]:
        return self.descriptor.type


# -----------------------------
# Environment records
# -----------------------------

class PluginManifest(BaseModel):
    """
    manifest.json shipped inside a plugin directory on disk.

    Only the fields the environment needs are declared; the rest is kept.
    """

    model_config = ConfigDict(extra="allow")

    slug: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None


class PluginRecord(BaseModel):
    """Live state of one plugin in an in-memory environment."""

    slug: str
    name: Optional[str] = None
    installed: bool = False
    active: bool = False
