# site_planner/planning/retry.py
"""Retry logic for single store writes with exponential backoff."""

import logging
import sqlite3

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

TRANSIENT_MESSAGES = ("database is locked", "database is busy", "database table is locked")


def is_retryable(exception: BaseException) -> bool:
    """
    Returns True if the exception should be retried.

    Retryable conditions:
    - sqlite3.OperationalError for a locked/busy database (another writer holds it)

    Everything else (unknown IDs, constraint violations, schema errors) fails at once.
    """
    if isinstance(exception, sqlite3.OperationalError):
        message = str(exception).lower()
        return any(marker in message for marker in TRANSIENT_MESSAGES)
    return False


def store_write_retry(attempts: int = 3):
    """
    Tenacity retry decorator for one awaited store write.

    Args:
        attempts: Total attempts, first one included (1 disables retrying)
    """
    return retry(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
