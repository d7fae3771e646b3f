from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Set

from pydantic import ValidationError

from ..domain.models import PluginManifest

logger = logging.getLogger(__name__)

ACTIVE_FILE_NAME = ".active.json"


class FilesystemPluginEnvironment:
    """
    Plugin environment backed by directories on disk.

    - installed: <plugins_dir>/<slug>/ exists (disk presence is the source of truth).
    - activated: slug is listed in <plugins_dir>/.active.json.
    - install: copies <sources_dir>/<slug>/ into <plugins_dir>/<slug>/.
    - display_name: "name" from <plugins_dir>/<slug>/manifest.json, else the slug.
    """

    def __init__(self, plugins_dir: Path, sources_dir: Optional[Path] = None) -> None:
        self.plugins_dir = Path(plugins_dir)
        self.sources_dir = Path(sources_dir) if sources_dir is not None else None
        logger.info(
            "FilesystemPluginEnvironment initialized, plugins_dir=%s sources_dir=%s",
            self.plugins_dir,
            self.sources_dir,
        )

    # ----------------------------
    # Disk helpers
    # ----------------------------

    def _plugin_dir(self, slug: str) -> Optional[Path]:
        # Empty or path-like slugs never map to a directory
        if not slug or "/" in slug or "\\" in slug or slug in (".", ".."):
            return None
        return self.plugins_dir / slug

    def _active_path(self) -> Path:
        return self.plugins_dir / ACTIVE_FILE_NAME

    def _read_active(self) -> Set[str]:
        p = self._active_path()
        if not p.exists():
            return set()
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read active plugin list %s: %s", p, e)
            return set()
        if not isinstance(data, list):
            return set()
        return {str(s) for s in data}

    def _write_active(self, active: Set[str]) -> bool:
        p = self._active_path()
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(sorted(active), indent=2), encoding="utf-8")
            tmp.replace(p)
        except OSError:
            logger.exception("Failed to write active plugin list %s", p)
            return False
        return True

    def _read_manifest(self, slug: str) -> Optional[PluginManifest]:
        plugin_dir = self._plugin_dir(slug)
        if plugin_dir is None:
            return None
        manifest_path = plugin_dir / "manifest.json"
        if not manifest_path.exists():
            return None
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
            return PluginManifest.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Invalid manifest for plugin '%s' (%s): %s", slug, manifest_path, e)
            return None

    def list_installed(self) -> List[str]:
        if not self.plugins_dir.exists():
            return []
        names = sorted(p.name for p in self.plugins_dir.iterdir() if p.is_dir())
        logger.debug("Found %d installed plugin(s): %s", len(names), names)
        return names

    # ----------------------------
    # PluginEnvironment
    # ----------------------------

    def is_installed(self, slug: str) -> bool:
        plugin_dir = self._plugin_dir(slug)
        return plugin_dir is not None and plugin_dir.is_dir()

    def is_activated(self, slug: str) -> bool:
        return self.is_installed(slug) and slug in self._read_active()

    def install(self, slug: str) -> bool:
        target_dir = self._plugin_dir(slug)
        if target_dir is None:
            logger.warning("Refusing to install plugin with invalid slug %r", slug)
            return False
        if target_dir.exists():
            return True
        if self.sources_dir is None:
            logger.warning("Cannot install plugin '%s': no sources directory configured", slug)
            return False

        source_dir = self.sources_dir / slug
        if not source_dir.is_dir():
            logger.warning("Cannot install plugin '%s': %s not found", slug, source_dir)
            return False

        try:
            self.plugins_dir.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source_dir, target_dir)
        except OSError:
            logger.exception("Failed to copy plugin '%s' from %s", slug, source_dir)
            # Keep the system consistent
            shutil.rmtree(target_dir, ignore_errors=True)
            return False

        logger.info("Installed plugin '%s' into %s", slug, target_dir)
        return True

    def activate(self, slug: str) -> bool:
        if not self.is_installed(slug):
            logger.warning("Cannot activate plugin '%s': not installed", slug)
            return False
        active = self._read_active()
        if slug in active:
            return True
        active.add(slug)
        ok = self._write_active(active)
        if ok:
            logger.info("Activated plugin '%s'", slug)
        return ok

    def deactivate(self, slug: str) -> bool:
        active = self._read_active()
        if slug not in active:
            return True
        active.discard(slug)
        ok = self._write_active(active)
        if ok:
            logger.info("Deactivated plugin '%s'", slug)
        return ok

    def display_name(self, slug: str) -> str:
        manifest = self._read_manifest(slug)
        if manifest is None or not manifest.name:
            return slug
        return manifest.name
