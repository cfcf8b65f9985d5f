"""
Retry helpers

Exponential backoff retries built on Tenacity.
"""

from typing import Type, Tuple
import logging

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

logger = logging.getLogger(__name__)


def retry_on_k8s_error(
    max_attempts: int = 3,
    wait_min: float = 0.5,
    wait_max: float = 4,
    exceptions: Tuple[Type[Exception], ...] = (
        TimeoutError,
        ConnectionError,
        OSError,
    )
):
    """Retry decorator for Kubernetes API calls

    Retries the wrapped callable (sync or async) on transient errors with an
    exponential backoff and re-raises the last error once attempts run out.

    Args:
        max_attempts: maximum number of attempts (default 3)
        wait_min: minimum wait between attempts in seconds (default 0.5)
        wait_max: maximum wait between attempts in seconds (default 4)
        exceptions: exception types that trigger a retry

    Returns:
        decorator

    Example:
        @retry_on_k8s_error(max_attempts=5)
        async def list_pods():
            return await client.run([...])
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=wait_min, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
