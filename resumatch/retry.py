"""Backoff for job-feed HTTP fetches.

Only the job sources retry. Remote scoring is a single attempt with a hard
deadline, so it never goes through here.
"""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable, Optional, Tuple, Type

import requests

from resumatch.log import get_logger

log = get_logger(__name__)

RETRYABLE_STATUS = frozenset({408, 425, 429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """Connection drops, timeouts and 408/429/5xx responses; not 4xx or bad URLs."""
    if isinstance(exc, requests.HTTPError):
        response = exc.response
        return response is None or response.status_code in RETRYABLE_STATUS
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


def backoff_delay(
    attempt: int,
    base_delay: float,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
    jitter: bool = True,
) -> float:
    delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (requests.RequestException,),
    should_retry: Optional[Callable[[BaseException], bool]] = is_transient,
) -> Callable:
    """Retry the wrapped fetch while it raises a transient *retryable* error.

    Errors that *should_retry* rejects are raised on the first attempt.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    permanent = should_retry is not None and not should_retry(exc)
                    if permanent or attempt >= max_attempts:
                        log.error(
                            "%s gave up after %d attempt(s): %s",
                            fn.__qualname__, attempt, exc,
                        )
                        raise
                    delay = backoff_delay(attempt, base_delay, backoff_factor, max_delay, jitter)
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        fn.__qualname__, attempt, max_attempts, exc, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
