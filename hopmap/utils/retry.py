import time
from typing import Callable, Optional, TypeVar

from hopmap.exceptions import RateLimitedException
from hopmap.utils import logger


R = TypeVar("R")


def retry_backoff(
    fn: Callable[[], R],
    max_retries=3,
    default_backoff=5.0,
    exception_class=RateLimitedException,
    log_errors=True,
    sleep: Callable[[float], None] = time.sleep,
) -> R:
    """Call fn until it does not raise exception_class.
    After each failure, sleep for the delay the exception carries in `retry_after`
    (seconds) or for default_backoff when it carries none, then try again.
    fn runs at most max_retries + 1 times; the last exception is raised once the
    retries are spent.
    """
    for i in range(max_retries + 1):
        try:
            return fn()
        except exception_class as e:
            if i == max_retries:
                if log_errors:
                    logger.fs.warning(f"Giving up on {_fn_name(fn)} after {max_retries} retries: {e}")
                raise e
            backoff = _backoff_for(e, default_backoff)
            if log_errors:
                logger.fs.warning(f"Retrying {_fn_name(fn)} in {backoff:.2f}s due to: {e} (retry {i + 1}/{max_retries})")
            sleep(backoff)
    raise AssertionError("unreachable")


def _backoff_for(e: Exception, default_backoff: float) -> float:
    retry_after: Optional[float] = getattr(e, "retry_after", None)
    return default_backoff if retry_after is None else retry_after


def _fn_name(fn) -> str:
    fn = getattr(fn, "func", fn)  # unwrap functools.partial
    return fn.__qualname__ if hasattr(fn, "__qualname__") else "unknown function"
