from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from backend.app.config import ExtensionConfig, ExtensionConfigIO
from backend.app.logging_config import bind_environment_logger, setup_logging
from backend.app.extensions.environment import (
    FilesystemPluginEnvironment,
    InMemoryPluginEnvironment,
    PluginEnvironment,
    RestPluginEnvironment,
)
from backend.app.extensions.services.registry import (
    DescriptorsInput,
    DescriptorTransform,
    ExtensionRegistry,
)
from backend.app.extensions.store.settings_store import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
)

logger = logging.getLogger("backend.app.main")


def build_settings_store(cfg: ExtensionConfig, io: ExtensionConfigIO) -> SettingsStore:
    if cfg.environment == "memory":
        return InMemorySettingsStore()
    return JsonFileSettingsStore(io.resolve_path(cfg.settings_path))


def build_environment(cfg: ExtensionConfig, io: ExtensionConfigIO) -> PluginEnvironment:
    if cfg.environment == "memory":
        return InMemoryPluginEnvironment()

    if cfg.environment == "rest":
        if cfg.rest_base_url is None:
            raise ValueError("rest_base_url is required for the rest environment")
        auth = None
        if cfg.rest_username:
            auth = (cfg.rest_username, cfg.rest_password or "")
        return RestPluginEnvironment(str(cfg.rest_base_url), auth=auth, timeout=cfg.rest_timeout)

    sources_dir = io.resolve_path(cfg.sources_dir) if cfg.sources_dir else None
    return FilesystemPluginEnvironment(io.resolve_path(cfg.plugins_dir), sources_dir)


def create_registry(
    config: Optional[ExtensionConfig] = None,
    descriptors: DescriptorsInput = (),
    transform: Optional[DescriptorTransform] = None,
    core_root: Optional[Path] = None,
) -> ExtensionRegistry:
    """
    Build a booted registry from configuration.

    - Loads <core>/data/extensions/config.json unless `config` is given.
    - Sets up file logging under cfg.log_dir.
    - Wires the settings store and plugin environment named by the config.
    """
    io = ExtensionConfigIO(core_root)
    cfg = config or io.load()

    log_dir = io.resolve_path(cfg.log_dir)
    setup_logging(log_dir)
    bind_environment_logger(cfg.environment, log_dir)

    logger.info("Creating extension registry (environment=%s)", cfg.environment)
    try:
        store = build_settings_store(cfg, io)
        environment = build_environment(cfg, io)
    except Exception:
        logger.exception("Extension registry setup failed")
        raise

    registry = ExtensionRegistry(store, environment, settings_key=cfg.settings_key, transform=transform)
    registry.boot(cfg.settings_key, descriptors)
    return registry
