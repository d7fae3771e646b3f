from __future__ import annotations

from typing import Protocol


class PluginEnvironmentError(RuntimeError):
    """The host could not be asked about, or could not act on, a plugin."""


class PluginEnvironment(Protocol):
    """
    Live plugin state of the host, addressed by slug.

    Lifecycle calls return True on success and False when the host refused;
    transport-level failures raise PluginEnvironmentError.
    """

    def is_installed(self, slug: str) -> bool:
        ...

    def is_activated(self, slug: str) -> bool:
        ...

    def install(self, slug: str) -> bool:
        ...

    def activate(self, slug: str) -> bool:
        ...

    def deactivate(self, slug: str) -> bool:
        ...

    def display_name(self, slug: str) -> str:
        ...
