"""Shared LLM utilities: transient-error classification and the retry policy."""

import sys

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from devteam.config import get_config


def is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient HTTP/network error worth retrying."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.ConnectError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (429, 500, 502, 503)
    return False


def stream_retrying(label: str, can_retry) -> AsyncRetrying:
    """Build an AsyncRetrying loop for one streamed invocation.

    Retries on HTTP 429/500/502/503, connection errors, and timeouts, but only
    while `can_retry()` holds; once text has been delivered a retry would
    duplicate it, so the error is raised instead. Non-transient errors are
    raised immediately.
    """
    config = get_config()
    retries = config.get("llm_max_retries", 3)

    return AsyncRetrying(
        stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(
            multiplier=1,
            min=config.get("llm_retry_wait_min", 2),
            max=config.get("llm_retry_wait_max", 16),
        ),
        retry=retry_if_exception(lambda exc: can_retry() and is_transient(exc)),
        reraise=True,
        before_sleep=lambda state: print(
            f"[devteam] {label}: transient error {state.outcome.exception()!r}. "
            f"Retrying in {state.next_action.sleep:.0f}s "
            f"(attempt {state.attempt_number}/{retries})...",
            file=sys.stderr,
        ),
    )
