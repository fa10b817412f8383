from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable

from stockledger.core.constants import CACHE_KEYS, MUTATION_CACHE_KEYS

logger = logging.getLogger(__name__)

_SUBSCRIBER_EXCEPTIONS = (LookupError, RuntimeError, TypeError, ValueError)


class InvalidationBus:
    """Generation counters per cache key, plus callbacks fired on each bump."""

    def __init__(self, keys=CACHE_KEYS):
        self._lock = threading.Lock()
        self._generations: dict[str, int] = {key: 0 for key in keys}
        self._subscribers: dict[str, list[Callable[[str], None]]] = defaultdict(list)

    def subscribe(self, key: str, callback: Callable[[str], None]) -> Callable[[], None]:
        with self._lock:
            self._generations.setdefault(key, 0)
            self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(key, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def invalidate(self, *keys: str) -> dict[str, int]:
        bumped = {}
        with self._lock:
            for key in keys:
                self._generations[key] = self._generations.get(key, 0) + 1
                bumped[key] = self._generations[key]
            pending = [(key, list(self._subscribers.get(key, []))) for key in keys]

        for key, callbacks in pending:
            for callback in callbacks:
                try:
                    callback(key)
                except _SUBSCRIBER_EXCEPTIONS:
                    logger.exception("Invalidation subscriber failed for %s", key)
        return bumped

    def notify_mutation(self, kind: str) -> dict[str, int]:
        keys = MUTATION_CACHE_KEYS.get(kind)
        if keys is None:
            raise ValueError("Unknown mutation kind: {}".format(kind))
        logger.info(
            "Invalidating caches after %s",
            kind,
            extra={"mutation": kind, "cache_keys": list(keys)},
        )
        return self.invalidate(*keys)

    def generation(self, key: str) -> int:
        with self._lock:
            return self._generations.get(key, 0)

    def versions(self) -> dict[str, int]:
        with self._lock:
            return dict(self._generations)


_bus = InvalidationBus()


def get_invalidation_bus() -> InvalidationBus:
    return _bus


__all__ = ["InvalidationBus", "get_invalidation_bus"]
