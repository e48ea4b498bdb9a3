"""Retrying read-modify-write sequences on conflicts."""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .config import (
    RETRY_STEPS,
    RETRY_DURATION_SECONDS,
    RETRY_FACTOR,
    RETRY_JITTER,
    RETRY_CAP_SECONDS,
)
from .errors import is_conflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Backoff:
    """
    Backoff between attempts.

    Attributes:
        steps: Maximum number of attempts
        duration: Sleep before the second attempt, in seconds
        factor: Multiplier applied to the sleep after every attempt
        jitter: Random extra sleep, as a fraction of the current sleep
        cap: Upper bound of the sleep, in seconds
    """
    steps: int = RETRY_STEPS
    duration: float = RETRY_DURATION_SECONDS
    factor: float = RETRY_FACTOR
    jitter: float = RETRY_JITTER
    cap: float = RETRY_CAP_SECONDS

    def delays(self):
        """Yield the sleep before each retry (steps - 1 values)."""
        duration = self.duration
        for _ in range(self.steps - 1):
            delay = duration
            if self.jitter > 0:
                delay += random.uniform(0, self.jitter * duration)
            yield min(delay, self.cap)
            duration = min(duration * self.factor, self.cap)


DEFAULT_BACKOFF = Backoff()


def retry_on_conflict(
    fn: Callable[[], T],
    backoff: Backoff = DEFAULT_BACKOFF,
    is_retriable: Callable[[BaseException], bool] = is_conflict,
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Run fn until it doesn't fail with a retriable error.

    fn must redo the whole read-modify-write sequence on every call.
    Non-retriable errors are raised right away; once the attempts are
    used up the last retriable error is raised.

    Returns:
        What fn returned
    """
    sleep = sleep or time.sleep
    delays = backoff.delays()
    attempt = 1

    while True:
        try:
            return fn()
        except Exception as e:
            if not is_retriable(e):
                raise
            delay = next(delays, None)
            if delay is None:
                logger.error(f"Giving up after {attempt} attempt(s): {e}")
                raise
            logger.warning(f"Conflict on attempt {attempt}, retrying in {delay:.3f}s: {e}")
            sleep(delay)
            attempt += 1
