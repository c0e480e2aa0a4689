# haatbazar/core/retry.py
import logging

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from haatbazar.core.errors import ConcurrentModification

logger = logging.getLogger("haatbazar.retry")


def conflict_retry(attempts: int) -> Retrying:
    """Retry a whole read-modify-write while the store reports a concurrent modification."""
    return Retrying(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(ConcurrentModification),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
