# backend/app/extensions/lifecycle.py
from __future__ import annotations

from typing import Optional, Union

from .domain.models import (  # noqa: F401
    DisplayStatus,
    ExtensionDescriptor,
    ExtensionType,
    normalize_preference,
)


def lifecycle_target(descriptor: ExtensionDescriptor) -> Optional[str]:
    """
    Return the plugin slug whose live state decides the display status.

    - module with deps: the first dependency.
    - plugin / addon / host-plugin: its own slug (possibly empty).
    - anything else: None, the stored preference is authoritative.
    """
    if descriptor.type == ExtensionType.MODULE:
        return descriptor.deps[0] if descriptor.deps else None
    if descriptor.type in (ExtensionType.PLUGIN, ExtensionType.ADDON, ExtensionType.HOST_PLUGIN):
        return descriptor.slug
    return None


def derive_display_status(
    ext_type: Union[ExtensionType, str],
    enabled: bool,
    installed: Optional[bool],
    activated: Optional[bool],
) -> DisplayStatus:
    """
    Pure status rule.

    installed/activated are None when the extension has no environment target;
    the preference then decides between on and off. Host plugins are never
    offered as an upgrade, so their installed flag is ignored.
    """
    if activated is None:
        return DisplayStatus.ON if enabled else DisplayStatus.OFF

    if ext_type == ExtensionType.HOST_PLUGIN:
        return DisplayStatus.ACTIVATE if activated else DisplayStatus.INSTALL

    if not installed:
        return DisplayStatus.UPGRADE
    if not activated:
        return DisplayStatus.INSTALL
    return DisplayStatus.ACTIVATE
