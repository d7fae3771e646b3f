from __future__ import annotations

import logging
from typing import Any, Callable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

# A filter receives the descriptor list (models or plain mappings) and returns a new one.
DescriptorFilter = Callable[[List[Any]], Sequence[Any]]

DEFAULT_PRIORITY = 10


class FilterChain:
    """
    Priority-ordered descriptor filters, applied once when a registry boots.

    Lower priorities run first; equal priorities run in registration order.
    An instance is itself a valid `transform` for ExtensionRegistry.
    """

    def __init__(self) -> None:
        self._filters: List[Tuple[int, int, DescriptorFilter]] = []
        self._counter = 0

    def add_filter(self, callback: DescriptorFilter, priority: int = DEFAULT_PRIORITY) -> None:
        self._filters.append((priority, self._counter, callback))
        self._counter += 1
        self._filters.sort(key=lambda f: (f[0], f[1]))

    def remove_filter(self, callback: DescriptorFilter) -> bool:
        before = len(self._filters)
        self._filters = [f for f in self._filters if f[2] is not callback]
        return len(self._filters) != before

    def has_filters(self) -> bool:
        return bool(self._filters)

    def __call__(self, descriptors: Sequence[Any]) -> List[Any]:
        result = list(descriptors)
        for priority, _, callback in self._filters:
            logger.debug(
                "Applying descriptor filter %s (priority %s)",
                getattr(callback, "__name__", repr(callback)),
                priority,
            )
            result = list(callback(result))
        return result
