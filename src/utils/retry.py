"""Simple retry helper for transient operations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def retry(
    fn: Callable[[], T],
    attempts: int = 3,
    delay_seconds: float = 0.25,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> T:
    last_error: Exception | None = None
    for attempt in range(1, max(1, attempts) + 1):
        try:
            return fn()
        except retry_on as exc:
            last_error = exc
            if attempt < attempts:
                logger.debug("Attempt %s/%s failed: %s", attempt, attempts, exc)
                time.sleep(delay_seconds)
    assert last_error is not None
    raise last_error
