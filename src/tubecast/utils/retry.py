"""Retry helpers for calls to external services.

Exponential backoff with jitter via tenacity. Only the video catalog source
retries; the feed merge itself never does.
"""

import logging
from collections.abc import Callable
from functools import wraps

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        max_wait_seconds: float = 30,
        min_wait_seconds: float = 1,
        jitter: bool = True,
    ):
        """Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (including initial)
            max_wait_seconds: Maximum wait time between retries
            min_wait_seconds: Minimum wait time between retries
            jitter: Whether to add jitter to wait times
        """
        self.max_attempts = max_attempts
        self.max_wait_seconds = max_wait_seconds
        self.min_wait_seconds = min_wait_seconds
        self.jitter = jitter


DEFAULT_RETRY_CONFIG = RetryConfig()

# Minimal delays for tests
TEST_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    max_wait_seconds=0.01,
    min_wait_seconds=0,
    jitter=False,
)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log a failed attempt before tenacity sleeps."""
    if retry_state.outcome and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        logger.warning(
            f"Retry attempt {retry_state.attempt_number} failed: "
            f"{type(exception).__name__}: {exception}"
        )


def with_retry(
    retry_on: tuple[type[Exception], ...],
    config: RetryConfig | None = None,
) -> Callable:
    """Decorator adding exponential-backoff retries for ``retry_on`` errors.

    The last exception is re-raised once attempts are exhausted.

    Usage:
        @with_retry((DownloadError,), RetryConfig(max_attempts=5))
        def fetch():
            ...
    """
    config = config or DEFAULT_RETRY_CONFIG

    def decorator(func: Callable) -> Callable:
        retry_decorator = retry(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_exponential_jitter(
                initial=config.min_wait_seconds,
                max=config.max_wait_seconds,
                jitter=config.max_wait_seconds if config.jitter else 0,
            ),
            retry=retry_if_exception_type(retry_on),
            before_sleep=log_retry_attempt,
            reraise=True,
        )

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return retry_decorator(func)(*args, **kwargs)
            except retry_on as e:
                logger.error(
                    f"{func.__name__} failed after {config.max_attempts} attempts: "
                    f"{type(e).__name__}: {e}"
                )
                raise

        return wrapper

    return decorator
