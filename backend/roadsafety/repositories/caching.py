"""
Read-through cache for the accident collection.

Screening reads every accident on each run; wrapping the provider keeps
repeated runs (one per location type) to a single bulk read within the TTL.
"""

import logging
import time
from typing import Callable, List, Optional

from ..models.accident import Accident
from .base import AccidentProvider

logger = logging.getLogger(__name__)


class CachingAccidentProvider(AccidentProvider):
    """
    Cache the result of ``inner.all()``.

    Args:
        inner: Provider to read through to
        ttl_seconds: Cache lifetime; None keeps entries until ``invalidate()``
        clock: Monotonic time source in seconds
    """

    def __init__(
        self,
        inner: AccidentProvider,
        ttl_seconds: Optional[float] = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Optional[List[Accident]] = None
        self._cached_at: Optional[float] = None

    def _is_fresh(self) -> bool:
        if self._cache is None:
            return False
        if self.ttl_seconds is None:
            return True
        return (self._clock() - self._cached_at) < self.ttl_seconds

    def all(self) -> List[Accident]:
        if self._is_fresh():
            logger.debug("Accident cache hit")
            return list(self._cache)

        logger.debug("Accident cache miss - reading from provider")
        self._cache = list(self.inner.all())
        self._cached_at = self._clock()
        return list(self._cache)

    def invalidate(self) -> None:
        self._cache = None
        self._cached_at = None
