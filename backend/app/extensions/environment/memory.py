from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from ..domain.models import PluginRecord

logger = logging.getLogger(__name__)


class InMemoryPluginEnvironment:
    """
    Plugin environment held entirely in memory.

    A record with installed=False is "available": it can be installed.
    Slugs without a record are unknown to the host and cannot be installed.
    """

    def __init__(self, plugins: Optional[Iterable[PluginRecord]] = None) -> None:
        self._plugins: Dict[str, PluginRecord] = {}
        for record in plugins or ():
            self._plugins[record.slug] = record

    def add(self, slug: str, *, name: Optional[str] = None, installed: bool = False, active: bool = False) -> PluginRecord:
        record = PluginRecord(slug=slug, name=name, installed=installed, active=active)
        self._plugins[slug] = record
        return record

    def get(self, slug: str) -> Optional[PluginRecord]:
        return self._plugins.get(slug)

    def is_installed(self, slug: str) -> bool:
        record = self._plugins.get(slug)
        return bool(record and record.installed)

    def is_activated(self, slug: str) -> bool:
        record = self._plugins.get(slug)
        return bool(record and record.installed and record.active)

    def install(self, slug: str) -> bool:
        record = self._plugins.get(slug)
        if record is None:
            logger.warning("Cannot install unknown plugin '%s'", slug)
            return False
        record.installed = True
        logger.info("Installed plugin '%s'", slug)
        return True

    def activate(self, slug: str) -> bool:
        record = self._plugins.get(slug)
        if record is None or not record.installed:
            logger.warning("Cannot activate plugin '%s': not installed", slug)
            return False
        record.active = True
        logger.info("Activated plugin '%s'", slug)
        return True

    def deactivate(self, slug: str) -> bool:
        record = self._plugins.get(slug)
        if record is None or not record.installed:
            return False
        record.active = False
        logger.info("Deactivated plugin '%s'", slug)
        return True

    def display_name(self, slug: str) -> str:
        record = self._plugins.get(slug)
        if record is None or not record.name:
            return slug
        return record.name
