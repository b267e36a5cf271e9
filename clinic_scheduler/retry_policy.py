"""Retry policy for store calls.

Pattern: tenacity with exponential backoff, scoped to InfrastructureError.
Validation, conflict, transition and not-found errors are terminal and
propagate on the first occurrence.
"""
import logging

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clinic_scheduler import config
from clinic_scheduler.errors import InfrastructureError

logger = logging.getLogger(__name__)


def build_retrying(
    max_retries: int = config.STORE_MAX_RETRIES,
    min_wait: float = config.STORE_RETRY_MIN_SECONDS,
    max_wait: float = config.STORE_RETRY_MAX_SECONDS,
) -> Retrying:
    """
    Create a retry controller for transient store failures.

    Args:
        max_retries: Retries after the initial attempt (default: 3)
        min_wait: First backoff delay in seconds; doubles each retry
        max_wait: Upper bound for a single backoff delay

    Returns:
        tenacity.Retrying; call it as retrying(fn, *args, **kwargs)
    """
    return Retrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(InfrastructureError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
