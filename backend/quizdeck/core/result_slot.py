# backend/quizdeck/core/result_slot.py

import logging
import time
import uuid
from typing import Callable, Optional

from cachetools import TTLCache

from .schemas import AttemptResult

logger = logging.getLogger("quizdeck.slot")

DEFAULT_TTL = 900.0
DEFAULT_MAXSIZE = 1024


class ResultSlot:
    """
    Write-once, read-once handoff of submitted results.

    `consume` reads and clears in one step, so a second read of the same key
    (a page reload, say) reports that no result is available. Results that
    are never read expire after `ttl` seconds, and at most `maxsize` are kept.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._results: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    def put(self, result: AttemptResult, key: Optional[str] = None) -> str:
        key = key or str(uuid.uuid4())
        if key in self._results:
            # an unread result is never replaced
            logger.warning(f"Result key={key} already holds an unread result; attempt={result.attempt_id} dropped")
            return key
        self._results[key] = result
        logger.debug(f"Stored result for attempt={result.attempt_id} under key={key}")
        return key

    def consume(self, key: str) -> Optional[AttemptResult]:
        result = self._results.pop(key, None)
        if result is None:
            logger.info(f"No result available for key={key}")
        return result

    def __len__(self) -> int:
        self._results.expire()
        return len(self._results)
