"""Retry with backoff for database operations."""

import logging
import time
from typing import Callable, Optional, TypeVar

from bson.errors import InvalidId
from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError

from jobportal.core.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that will not go away by trying again
NON_RETRYABLE = (HTTPException, ValueError, InvalidId, DuplicateKeyError)


def retry_operation(
    operation: Callable[[], T],
    max_attempts: Optional[int] = None,
    delay: Optional[float] = None,
) -> T:
    """
    Run `operation`, retrying on failure.

    The wait before attempt n+1 is `delay * n`. HTTP errors, validation
    errors and duplicate keys are raised immediately.

    Sleeps in the calling thread: call it from plain `def` routes, which
    FastAPI runs in its threadpool.
    """
    settings = get_settings()
    attempts = max_attempts if max_attempts is not None else settings.db_retry_attempts
    base_delay = delay if delay is not None else settings.db_retry_delay

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except NON_RETRYABLE:
            raise
        except Exception as exc:
            logger.warning("Attempt %d/%d failed: %s", attempt, attempts, exc)
            if attempt == attempts:
                raise
            time.sleep(base_delay * attempt)
    raise RuntimeError("retry_operation called with max_attempts < 1")
