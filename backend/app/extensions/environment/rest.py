from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests import RequestException

from .base import PluginEnvironmentError

logger = logging.getLogger(__name__)

PLUGINS_ROUTE = "/wp-json/wp/v2/plugins"


def _slug_of(plugin_id: str) -> str:
    # "seo-pro/seo-pro" -> "seo-pro"; single-file plugins look like "hello"
    return plugin_id.split("/", 1)[0]


class RestPluginEnvironment:
    """
    Plugin environment that talks to the host over its REST plugins endpoint.

    - GET  {base}/wp-json/wp/v2/plugins            list installed plugins
    - POST {base}/wp-json/wp/v2/plugins            {"slug": ...} installs from the directory
    - POST {base}/wp-json/wp/v2/plugins/<plugin>   {"status": "active"|"inactive"}

    Every query hits the host; nothing is cached between calls.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[Tuple[str, str]] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if auth is not None:
            self.session.auth = auth

    def _url(self, plugin_id: Optional[str] = None) -> str:
        url = f"{self.base_url}{PLUGINS_ROUTE}"
        if plugin_id:
            url = f"{url}/{plugin_id}"
        return url

    def _list_plugins(self) -> List[Dict[str, Any]]:
        url = self._url()
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except RequestException as exc:
            raise PluginEnvironmentError(f"Failed to reach {url}: {exc}") from exc

        if resp.status_code != 200:
            raise PluginEnvironmentError(
                f"Listing plugins failed (HTTP {resp.status_code}): {resp.text[:200]}"
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise PluginEnvironmentError(f"Plugin list from {url} is not JSON") from exc

        if not isinstance(data, list):
            raise PluginEnvironmentError(f"Unexpected plugin list payload from {url}")
        return [p for p in data if isinstance(p, dict)]

    def _find(self, slug: str) -> Optional[Dict[str, Any]]:
        if not slug:
            return None
        for plugin in self._list_plugins():
            if _slug_of(str(plugin.get("plugin", ""))) == slug:
                return plugin
        return None

    def _post(self, url: str, payload: Dict[str, Any], what: str) -> bool:
        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout)
        except RequestException as exc:
            raise PluginEnvironmentError(f"Failed to {what}: {exc}") from exc

        if 200 <= resp.status_code < 300:
            logger.info("Host accepted request to %s", what)
            return True

        logger.error("Host rejected request to %s (HTTP %s): %s", what, resp.status_code, resp.text[:200])
        return False

    def _set_status(self, slug: str, status: str) -> bool:
        plugin = self._find(slug)
        if plugin is None:
            logger.warning("Plugin '%s' is not installed on the host", slug)
            return False
        return self._post(
            self._url(str(plugin["plugin"])),
            {"status": status},
            f"set plugin '{slug}' {status}",
        )

    # ----------------------------
    # PluginEnvironment
    # ----------------------------

    def is_installed(self, slug: str) -> bool:
        return self._find(slug) is not None

    def is_activated(self, slug: str) -> bool:
        plugin = self._find(slug)
        if plugin is None:
            return False
        return plugin.get("status") in ("active", "network-active")

    def install(self, slug: str) -> bool:
        if not slug:
            return False
        return self._post(self._url(), {"slug": slug}, f"install plugin '{slug}'")

    def activate(self, slug: str) -> bool:
        return self._set_status(slug, "active")

    def deactivate(self, slug: str) -> bool:
        return self._set_status(slug, "inactive")

    def display_name(self, slug: str) -> str:
        plugin = self._find(slug)
        if plugin is None or not plugin.get("name"):
            return slug
        return str(plugin["name"])
