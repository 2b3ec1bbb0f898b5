"""Serial scheduling of external service calls."""

import time
from typing import Callable, TypeVar

T = TypeVar("T")


class SerialScheduler:
    """Runs external calls one at a time with a fixed pause after each.

    The pause is applied whether the call returned or raised. It is a flat
    quota courtesy, not adaptive to the service's responses.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the scheduler.

        Args:
            delay_seconds: Pause after every call
            sleep: Sleep function (replaceable in tests)
        """
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.calls = 0

    def call(self, fn: Callable[..., T], *args, **kwargs) -> T:
        """Run ``fn`` and then wait out the rate limit delay."""
        try:
            return fn(*args, **kwargs)
        finally:
            self.calls += 1
            if self.delay_seconds > 0:
                self._sleep(self.delay_seconds)
