"""
Cache-aside helpers shared by the user and blog services.

Reads go cache first, then the database, then (best-effort) back into the
cache. Writes commit to the database first and invalidate afterwards. Cache
failures are logged and swallowed here; they never fail the caller.
"""

import logging
from typing import Callable, Optional, TypeVar

from blogo.cache import NullCache
from blogo.errors import CacheError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheAsideService:
    """Base class holding the optional cache and the cache-aside protocol."""

    def __init__(self, cache=None):
        self.cache = cache if cache is not None else NullCache()

    def _cache_call(self, operation: str, fn: Callable, *args):
        try:
            return fn(*args)
        except CacheError as e:
            logger.warning("Cache %s failed, ignoring: %s", operation, e)
            return None

    def _read_through(
        self,
        kind: str,
        entity_id: int,
        lookup: Callable[[int], Optional[T]],
        load: Callable[[int], T],
        store: Callable[[T, int], None],
        ttl_seconds: int,
    ) -> T:
        cached = self._cache_call(f"get {kind}:{entity_id}", lookup, entity_id)
        if cached is not None:
            logger.debug("Cache hit for %s:%s", kind, entity_id)
            return cached

        value = load(entity_id)
        self._cache_call(f"set {kind}:{entity_id}", store, value, ttl_seconds)
        return value

    def _invalidate(self, operation: str, fn: Callable, *args) -> None:
        self._cache_call(f"invalidate {operation}", fn, *args)
