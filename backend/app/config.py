from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, HttpUrl, ValidationError

logger = logging.getLogger(__name__)

CONFIG_LOCK = threading.Lock()

EnvironmentBackend = Literal["memory", "filesystem", "rest"]


def _core_root() -> Path:
    # config.py -> app -> backend -> <core_root>
    return Path(__file__).resolve().parents[2]


class ConfigLoadError(RuntimeError):
    pass


class ExtensionConfig(BaseModel):
    version: int = 1

    # Option name the preferences are stored under
    settings_key: str = "extensions"
    settings_path: str = "data/extensions/settings.json"

    environment: EnvironmentBackend = "filesystem"

    # filesystem environment
    plugins_dir: str = "data/extensions/plugins"
    sources_dir: Optional[str] = "data/extensions/sources"

    # rest environment
    rest_base_url: Optional[HttpUrl] = None
    rest_username: Optional[str] = None
    rest_password: Optional[str] = None
    rest_timeout: float = Field(default=10.0, gt=0)

    log_dir: str = "logs"


class ExtensionConfigIO:
    """
    Handles reading/writing `<core>/data/extensions/config.json` atomically.

    A missing file is created with defaults on first load.
    """

    def __init__(self, core_root: Optional[Path] = None):
        self.core_root = Path(core_root) if core_root is not None else _core_root()
        self.config_path = self.core_root / "data" / "extensions" / "config.json"
        logger.debug("ExtensionConfigIO initialized, config_path=%s", self.config_path)

    def load(self) -> ExtensionConfig:
        logger.debug("Loading extension config from %s", self.config_path)
        if not self.config_path.exists():
            cfg = ExtensionConfig()
            self.save(cfg)
            logger.info("Created default extension config at %s", self.config_path)
            return cfg

        with CONFIG_LOCK:
            try:
                raw = json.loads(self.config_path.read_text(encoding="utf-8"))
                return ExtensionConfig.model_validate(raw)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.error("Failed to load extension config: %s", e)
                raise ConfigLoadError(f"Failed to load extension config: {e}") from e

    def save(self, cfg: ExtensionConfig) -> None:
        with CONFIG_LOCK:
            logger.debug("Saving extension config to %s", self.config_path)
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.config_path.with_suffix(".json.tmp")
            tmp.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")
            tmp.replace(self.config_path)

    def resolve_path(self, path_str: str) -> Path:
        """Absolute paths are kept; relative ones are interpreted from the core root."""
        p = Path(path_str)
        if p.is_absolute():
            return p
        return (self.core_root / p).resolve()
