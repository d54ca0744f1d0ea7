"""Condition polling primitive.

Repeatedly evaluates a check function on a fixed interval until it reports
success, raises, or the timeout elapses:

- ``check()`` returns True  -> condition met, stop immediately
- ``check()`` returns False -> not met yet, check again on the next tick
- ``check()`` raises        -> the condition is broken, the error propagates
- timeout elapses           -> ConditionTimeoutError
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import ConditionTimeoutError
from .deadline import Deadline, current_deadline

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_TIMEOUT = 30.0

CheckFunction = Callable[[], bool]


@dataclass
class PollConfig:
    """Configuration for condition polling."""
    interval: float = DEFAULT_INTERVAL
    timeout: float = DEFAULT_TIMEOUT


class ConditionPoller:
    """Polls a check function until it is met, errors, or times out."""

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize condition poller.

        Args:
            interval: Seconds between checks. Must be positive.
            timeout: Overall deadline in seconds. <= 0 falls back to 30s.
            sleep: Sleep function, replaceable in tests.
        """
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self.interval = interval
        self.timeout = timeout if timeout > 0 else DEFAULT_TIMEOUT
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: PollConfig) -> "ConditionPoller":
        return cls(interval=config.interval, timeout=config.timeout)

    def wait(self, check: CheckFunction, description: str = "condition") -> int:
        """Block until ``check`` returns True.

        The first check happens immediately; each check completes before the
        next interval starts. When a test deadline is active the wait never
        outlives it.

        Args:
            check: Function returning True once the condition is met.
            description: Condition name used in logs and errors.

        Returns:
            Number of checks it took for the condition to be met.

        Raises:
            ConditionTimeoutError: If the condition is not met in time.
            Exception: Whatever ``check`` raised, unchanged.
        """
        deadline = Deadline(self.timeout, parent=current_deadline())
        attempts = 0

        while True:
            attempts += 1
            if check():
                logger.info("Condition met: %s (after %d attempt(s))", description, attempts)
                return attempts

            if deadline.is_expired:
                break

            remaining = deadline.remaining
            logger.debug(
                "Condition %s not met yet, %.1fs remaining", description, remaining
            )
            self._sleep(min(self.interval, remaining))

        raise ConditionTimeoutError(description, deadline.budget, attempts=attempts)


def wait_for_condition(
    check: CheckFunction,
    interval: float = DEFAULT_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
    description: str = "condition",
) -> int:
    """Poll ``check`` every ``interval`` seconds for up to ``timeout`` seconds.

    See ConditionPoller.wait for the full contract.
    """
    poller = ConditionPoller(interval=interval, timeout=timeout)
    return poller.wait(check, description=description)
