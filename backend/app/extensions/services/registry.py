from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..domain.models import (
    DisplayStatus,
    ExtensionAction,
    ExtensionDescriptor,
    ExtensionType,
    Preference,
    ResolvedExtension,
)
from ..environment.base import PluginEnvironment
from ..lifecycle import derive_display_status, lifecycle_target, normalize_preference
from ..store.settings_store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_KEY = "extensions"

DescriptorInput = Union[ExtensionDescriptor, Mapping[str, Any]]
DescriptorsInput = Union[Sequence[DescriptorInput], Mapping[str, DescriptorInput]]
DescriptorTransform = Callable[[List[Any]], Sequence[Any]]


def _as_entries(descriptors: DescriptorsInput) -> List[Any]:
    """
    Flatten the accepted input shapes into a list.

    A mapping is read as {key: descriptor}; the mapping key fills in `key`
    when the descriptor does not carry one itself.
    """
    if not isinstance(descriptors, Mapping):
        return list(descriptors)

    entries: List[Any] = []
    for key, descriptor in descriptors.items():
        if isinstance(descriptor, ExtensionDescriptor):
            entries.append(descriptor)
        elif "key" in descriptor or "name" in descriptor:
            entries.append(dict(descriptor))
        else:
            entries.append({**descriptor, "key": key})
    return entries


class ExtensionRegistry:
    """
    Enablement state of the host's extensions.

    - Descriptors are fixed once booted.
    - Preferences ("on"/"off") live in `store` under `settings_key`.
    - Display status is recomputed from `environment` on every read.

    Example:
        registry = ExtensionRegistry(store, environment)
        registry.boot("my_plugin_extensions", [
            {"key": "seo", "type": "module", "deps": ["seo-pro"]},
        ])
        registry.get()["seo"].status       # DisplayStatus.UPGRADE
        registry.transition("seo", "install")
        registry.update("seo", "on")
    """

    def __init__(
        self,
        store: SettingsStore,
        environment: PluginEnvironment,
        settings_key: str = DEFAULT_SETTINGS_KEY,
        descriptors: DescriptorsInput = (),
        transform: Optional[DescriptorTransform] = None,
    ) -> None:
        self.store = store
        self.environment = environment
        self.transform = transform
        self._settings_key = settings_key
        self._descriptors: Tuple[ExtensionDescriptor, ...] = ()
        self._by_key: Dict[str, ExtensionDescriptor] = {}
        if descriptors:
            self.boot(settings_key, descriptors)

    # ----------------------------
    # Boot
    # ----------------------------

    def boot(self, settings_key: str, descriptors: DescriptorsInput) -> None:
        """
        Replace the settings key and descriptor list.

        The list goes through `transform` first, then every entry is validated
        into an ExtensionDescriptor. Unknown types and extra fields are kept;
        a missing key or type raises pydantic.ValidationError.
        Duplicate keys keep the first occurrence.
        """
        entries = _as_entries(descriptors)
        if self.transform is not None:
            entries = list(self.transform(entries))

        booted: List[ExtensionDescriptor] = []
        by_key: Dict[str, ExtensionDescriptor] = {}
        for entry in entries:
            descriptor = (
                entry
                if isinstance(entry, ExtensionDescriptor)
                else ExtensionDescriptor.model_validate(entry)
            )
            if descriptor.key in by_key:
                logger.error("Duplicate extension key '%s'; keeping the first one", descriptor.key)
                continue
            by_key[descriptor.key] = descriptor
            booted.append(descriptor)

        self._settings_key = settings_key
        self._descriptors = tuple(booted)
        self._by_key = by_key
        logger.info("Booted %d extension(s) under settings key '%s'", len(booted), settings_key)

    @property
    def settings_key(self) -> str:
        return self._settings_key

    @property
    def descriptors(self) -> Tuple[ExtensionDescriptor, ...]:
        return self._descriptors

    def get_settings(self) -> Dict[str, Any]:
        return self.store.read(self._settings_key, {})

    # ----------------------------
    # Resolution
    # ----------------------------

    def _resolve_one(self, descriptor: ExtensionDescriptor, settings: Mapping[str, Any]) -> ResolvedExtension:
        stored = settings.get(descriptor.key)
        preference = normalize_preference(stored) if stored is not None else descriptor.base_status
        enabled = preference == Preference.ON

        installed: Optional[bool] = None
        activated: Optional[bool] = None
        target = lifecycle_target(descriptor)
        if target is not None:
            if descriptor.type == ExtensionType.HOST_PLUGIN:
                activated = self.environment.is_activated(target)
            else:
                installed = self.environment.is_installed(target)
                activated = self.environment.is_activated(target) if installed else False

        notice: Optional[bool] = None
        if descriptor.deps:
            notice = not self._deps_activated(descriptor.deps)

        return ResolvedExtension(
            key=descriptor.key,
            descriptor=descriptor,
            enabled=enabled,
            status=derive_display_status(descriptor.type, enabled, installed, activated),
            notice=notice,
        )

    def resolve_all(self) -> Dict[str, ResolvedExtension]:
        """Resolve every descriptor, in boot order."""
        settings = self.get_settings()
        return {d.key: self._resolve_one(d, settings) for d in self._descriptors}

    get = resolve_all

    def enabled(self) -> Dict[str, ResolvedExtension]:
        return {k: ext for k, ext in self.resolve_all().items() if ext.status == DisplayStatus.ON}

    def find(self, key: str) -> Optional[ExtensionDescriptor]:
        return self._by_key.get(key)

    def _of_type(self, ext_type: Union[ExtensionType, str]) -> Dict[str, ResolvedExtension]:
        return {k: ext for k, ext in self.resolve_all().items() if ext.type == ext_type}

    def get_plugins(self) -> Dict[str, ResolvedExtension]:
        return self._of_type(ExtensionType.PLUGIN)

    def get_addons(self) -> Dict[str, ResolvedExtension]:
        return self._of_type(ExtensionType.ADDON)

    def get_modules(self) -> Dict[str, ResolvedExtension]:
        return self._of_type(ExtensionType.MODULE)

    def get_host_plugins(self) -> Dict[str, ResolvedExtension]:
        return self._of_type(ExtensionType.HOST_PLUGIN)

    # ----------------------------
    # Mutation
    # ----------------------------

    def update(self, key: str, status: Union[str, Preference, DisplayStatus]) -> bool:
        """
        Persist the on/off preference for `key`.

        Anything but "off" is stored as "on". Returns False for unknown keys,
        for plugin-backed extensions without a slug, or when the store
        refuses the write.
        """
        descriptor = self._by_key.get(key)
        if descriptor is None:
            logger.warning("Cannot update unknown extension '%s'", key)
            return False
        if lifecycle_target(descriptor) == "":
            logger.warning("Cannot update extension '%s': it needs a slug", key)
            return False

        preference = normalize_preference(status)
        settings = self.get_settings()
        settings[key] = preference.value

        ok = self.store.write(self._settings_key, settings)
        if ok:
            logger.info("Extension '%s' set to '%s'", key, preference.value)
        else:
            logger.error("Failed to persist extension '%s' as '%s'", key, preference.value)
        return ok

    def transition(self, key: str, action: Union[str, ExtensionAction]) -> bool:
        """
        Drive the environment towards `action` for the extension's target plugin.

        Does not touch stored preferences. Raises ValueError for an action
        outside install/activate/deactivate; environment errors propagate.
        """
        action = ExtensionAction(action)

        descriptor = self._by_key.get(key)
        if descriptor is None:
            logger.warning("Cannot %s unknown extension '%s'", action.value, key)
            return False

        target = lifecycle_target(descriptor)
        if target is None:
            logger.debug("Extension '%s' has no plugin to %s", key, action.value)
            return True
        if not target:
            logger.warning("Extension '%s' has no slug; cannot %s", key, action.value)
            return False

        env = self.environment
        if action == ExtensionAction.INSTALL:
            if env.is_installed(target):
                return True
            logger.info("Installing '%s' for extension '%s'", target, key)
            return env.install(target)

        if action == ExtensionAction.ACTIVATE:
            if env.is_activated(target):
                return True
            logger.info("Activating '%s' for extension '%s'", target, key)
            return env.activate(target)

        if not env.is_activated(target):
            return True
        logger.info("Deactivating '%s' for extension '%s'", target, key)
        return env.deactivate(target)

    # ----------------------------
    # Dependencies
    # ----------------------------

    def _deps_activated(self, deps: Iterable[str]) -> bool:
        return all(self.environment.is_activated(dep) for dep in deps)

    def needs_upgrade(self, key: str) -> bool:
        descriptor = self._by_key.get(key)
        return bool(descriptor and descriptor.needs_upgrade)

    def get_dependencies(self, key: str) -> Optional[List[str]]:
        descriptor = self._by_key.get(key)
        if descriptor is None or not descriptor.deps:
            return None
        return list(descriptor.deps)

    def dependencies_resolved(self, key: str) -> bool:
        """True when the extension has no dependencies or all of them are active."""
        deps = self.get_dependencies(key)
        if not deps:
            return True
        return self._deps_activated(deps)

    def dependency_names(self, key: str) -> List[str]:
        return [self.environment.display_name(dep) for dep in self.get_dependencies(key) or []]

    def dependency_string(self, key: str) -> str:
        return ",".join(self.dependency_names(key))
