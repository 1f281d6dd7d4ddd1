"""Retry with exponential backoff, and a wall-clock limit for single calls."""

import random
import time
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from functools import wraps
from typing import Callable, Optional, TypeVar, ParamSpec

from lineup.constants import (
    RETRY_MAX_ATTEMPTS,
    RETRY_BASE_DELAY_SEC,
    RETRY_MAX_DELAY_SEC,
    get_logger,
)
from lineup.errors import LookupTimeout

logger = get_logger("retry")

P = ParamSpec("P")
T = TypeVar("T")


def retry_with_backoff(
    max_attempts: int = RETRY_MAX_ATTEMPTS,
    base_delay: float = RETRY_BASE_DELAY_SEC,
    max_delay: float = RETRY_MAX_DELAY_SEC,
    exceptions: tuple = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for retrying a function with exponential backoff.

    The last exception is re-raised once attempts run out, so callers can
    still tell a failed call from an empty result.

    Args:
        max_attempts: Total number of attempts, 1 disables retrying
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        exceptions: Tuple of exception types to catch and retry
        sleep: Function used to wait between attempts
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_attempts:
                        if max_attempts > 1:
                            logger.warning(
                                f"{func.__name__} failed after {max_attempts} attempts: {e}"
                            )
                        raise

                    # Exponential backoff with jitter
                    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
                    delay = delay * (0.5 + random.random())

                    logger.debug(
                        f"{func.__name__} attempt {attempt} failed: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    sleep(delay)

            raise ValueError("max_attempts must be at least 1")

        return wrapper

    return decorator


def call_with_timeout(func: Callable[..., T], timeout: Optional[float], *args, **kwargs) -> T:
    """Run ``func`` and give up after ``timeout`` seconds.

    The call runs on a daemon thread. SDK clients offer no way to interrupt
    a request already in flight, so on expiry that request keeps running
    until the SDK's own socket timeout ends it, and the caller may start
    its next call meanwhile. Prefer an SDK-level timeout where the client
    has one (``SpotifyClient`` passes ``requests_timeout`` to spotipy).
    Being a daemon, an abandoned call never blocks interpreter exit.
    """
    if not timeout:
        return func(*args, **kwargs)

    future: Future = Future()

    def runner() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)

    name = getattr(func, "__name__", "call")
    threading.Thread(target=runner, name=f"lineup-lookup-{name}", daemon=True).start()
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        raise LookupTimeout(f"{name} timed out after {timeout:g}s") from None
