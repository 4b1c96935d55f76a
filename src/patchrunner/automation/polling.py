import logging
import time
from typing import Callable, Optional

from .errors import CompletionTimeoutError, UIInteractionError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 250


def wait_until(
    predicate: Callable[[], bool],
    timeout_ms: int,
    description: str = "completion predicate",
    interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> float:
    """Re-evaluate ``predicate`` until it holds or ``timeout_ms`` elapses.

    The predicate is checked immediately, then every ``interval_ms``. Sleeps
    are clipped to the deadline so the last check happens at the boundary.
    A ``UIInteractionError`` from the predicate counts as "not yet"; the last
    one is chained onto the timeout error.

    Returns:
        Elapsed milliseconds when the predicate held.

    Raises:
        CompletionTimeoutError: the predicate was still false at the deadline.
    """
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be positive")
    if interval_ms <= 0:
        raise ValueError("interval_ms must be positive")

    start = clock()
    deadline = start + timeout_ms / 1000.0
    attempts = 0
    last_error: Optional[UIInteractionError] = None
    while True:
        attempts += 1
        try:
            held = predicate()
        except UIInteractionError as e:
            # Page may be reloading; the query is retried on the next tick.
            logger.debug("%s check %d failed: %s", description, attempts, e)
            last_error = e
            held = False
        if held:
            elapsed_ms = (clock() - start) * 1000.0
            logger.debug("%s held after %d checks (%.0fms)", description, attempts, elapsed_ms)
            return elapsed_ms
        remaining = deadline - clock()
        if remaining <= 0:
            logger.debug("%s still false after %d checks", description, attempts)
            raise CompletionTimeoutError(description, timeout_ms) from last_error
        sleep(min(interval_ms / 1000.0, remaining))
