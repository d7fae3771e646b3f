from __future__ import annotations

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

SETTINGS_LOCK = threading.Lock()


class SettingsStore(Protocol):
    """
    Generic key-value settings storage (the host's options table).

    Values are whole mappings; callers do read-modify-write.
    """

    def read(self, key: str, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    def write(self, key: str, value: Dict[str, Any]) -> bool:
        ...


class InMemorySettingsStore:
    """Process-local store, used by tests and the `memory` environment backend."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self._data: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})

    def read(self, key: str, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if key not in self._data:
            return dict(default or {})
        return copy.deepcopy(self._data[key])

    def write(self, key: str, value: Dict[str, Any]) -> bool:
        self._data[key] = copy.deepcopy(dict(value))
        return True


class JsonFileSettingsStore:
    """
    Stores every settings key in one JSON document on disk.

    Layout:

    {
      "extensions": {"seo": "on", "forms": "off"},
      "other_plugin_extensions": {...}
    }

    Writes go through `<file>.tmp` + replace so readers never see a partial file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        logger.info("JsonFileSettingsStore initialized, path=%s", self.path)

    def _load_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read settings file %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.error("Settings file %s does not hold an object; ignoring", self.path)
            return {}
        return raw

    def read(self, key: str, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        with SETTINGS_LOCK:
            value = self._load_all().get(key)
        if not isinstance(value, dict):
            return dict(default or {})
        return value

    def write(self, key: str, value: Dict[str, Any]) -> bool:
        with SETTINGS_LOCK:
            data = self._load_all()
            data[key] = dict(value)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp = self.path.with_suffix(self.path.suffix + ".tmp")
                tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
                tmp.replace(self.path)
            except OSError:
                logger.exception("Failed to write settings key '%s' to %s", key, self.path)
                return False
        logger.debug("Saved settings key '%s' to %s", key, self.path)
        return True
