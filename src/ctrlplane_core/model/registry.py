"""In-memory registry of filters keyed by content identity.

One entity registers a filter under its identity and another resolves it later.
The two may be created in the same apply with no ordering between them, so
``resolve`` waits a bounded amount of time for a registration to show up.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ctrlplane_core.config import settings
from ctrlplane_core.contracts.errors import FilterNotFoundError
from ctrlplane_core.contracts.filters import FilterNode
from ctrlplane_core.util.logging import get_logger

logger = get_logger("registry")


class FilterRegistry:
    """Thread-safe map of identity -> filter with a retrying lookup."""

    def __init__(
        self,
        max_retries: Optional[int] = None,
        retry_delay_s: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_retries = (
            settings.CTRLPLANE_FILTER_RESOLVE_RETRIES if max_retries is None else max_retries
        )
        self.retry_delay_s = (
            settings.CTRLPLANE_FILTER_RESOLVE_DELAY_S if retry_delay_s is None else retry_delay_s
        )
        self._sleep = sleep
        self._filters: dict[str, FilterNode] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._filters)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._filters

    def _lookup(self, identity: str) -> Optional[FilterNode]:
        with self._lock:
            return self._filters.get(identity)

    def register(self, identity: str, node: FilterNode) -> None:
        """Insert or overwrite the filter stored under ``identity``."""
        with self._lock:
            self._filters[identity] = node
            size = len(self._filters)
        logger.debug(f"Registered resource filter id={identity} registry_size={size}")

    def resolve(self, identity: str) -> FilterNode:
        """Return the filter registered under ``identity``.

        If it is not there yet, look again up to ``max_retries`` times,
        sleeping ``retry_delay_s`` before each attempt.

        Raises:
            FilterNotFoundError: if the filter never appears.
        """
        node = self._lookup(identity)
        if node is not None:
            logger.debug(f"Retrieved resource filter id={identity}")
            return node

        logger.info(
            f"Resource filter id={identity} not immediately found, will retry "
            f"max_retries={self.max_retries} retry_delay_s={self.retry_delay_s} "
            f"registry_size={len(self)}"
        )
        for attempt in range(1, self.max_retries + 1):
            self._sleep(self.retry_delay_s)
            node = self._lookup(identity)
            if node is not None:
                logger.info(f"Resource filter id={identity} found after retry {attempt}")
                return node
            logger.debug(f"Resource filter id={identity} still not found, retry {attempt}")

        logger.warning(
            f"Resource filter id={identity} not found after {self.max_retries} retries "
            f"registry_size={len(self)}"
        )
        raise FilterNotFoundError(identity, self.max_retries)

    def remove(self, identity: str) -> None:
        """Delete ``identity``; removing an absent identity is a no-op."""
        with self._lock:
            removed = self._filters.pop(identity, None) is not None
        if removed:
            logger.info(f"Deleted resource filter id={identity} from registry")


_default_registry: Optional[FilterRegistry] = None
_default_lock = threading.Lock()


def get_registry() -> FilterRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = FilterRegistry()
            logger.info("Resource filter registry initialized")
        return _default_registry
