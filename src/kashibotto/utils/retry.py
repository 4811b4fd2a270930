"""Retry policy with exponential backoff for external API calls."""

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Default retry settings
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0  # seconds
DEFAULT_MAX_DELAY = 30.0  # seconds
DEFAULT_BACKOFF_FACTOR = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with exponential backoff and optional jitter.

    The delay before retry ``n`` (1-based) is
    ``min(base_delay * backoff_factor ** (n - 1), max_delay) * scale``
    plus a uniform random jitter in ``[0, jitter]``.

    Args:
        max_attempts: Total number of attempts, including the first one
        base_delay: Delay before the first retry in seconds
        backoff_factor: Multiplier applied to the delay after each retry
        max_delay: Upper bound for the un-jittered delay in seconds
        jitter: Maximum random seconds added to each delay
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_delay: float = DEFAULT_MAX_DELAY
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0 or self.jitter < 0:
            raise ValueError("Retry delays must be non-negative")

    def delay_for(self, attempt: int, scale: float = 1.0) -> float:
        """Return the sleep time after failed attempt number ``attempt``."""
        delay = min(
            self.base_delay * (self.backoff_factor ** (attempt - 1)), self.max_delay
        )
        delay *= scale
        if self.jitter:
            delay += random.uniform(0, self.jitter)
        return delay

    def call(
        self,
        func: Callable[..., T],
        *args: Any,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        delay_scale: Optional[Callable[[BaseException], float]] = None,
        on_retry: Optional[Callable[[BaseException, int], None]] = None,
        **kwargs: Any,
    ) -> T:
        """
        Execute ``func`` with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments for the function
            retry_on: Exception types that trigger a retry; others propagate
            delay_scale: Optional per-exception multiplier for the backoff delay
            on_retry: Optional callback called with (exception, attempt) before sleeping
            **kwargs: Keyword arguments for the function

        Returns:
            Result of the first successful call

        Raises:
            The last exception if all attempts fail
        """
        name = getattr(func, "__name__", repr(func))

        for attempt in range(1, self.max_attempts + 1):
            try:
                return func(*args, **kwargs)
            except retry_on as e:
                if attempt >= self.max_attempts:
                    logger.warning(
                        f"All {self.max_attempts} attempts exhausted for {name}: {e}"
                    )
                    raise

                scale = delay_scale(e) if delay_scale else 1.0
                delay = self.delay_for(attempt, scale)
                logger.debug(
                    f"Attempt {attempt}/{self.max_attempts} for {name} failed: {e}; "
                    f"retrying in {delay:.2f}s"
                )

                if on_retry:
                    on_retry(e, attempt)

                time.sleep(delay)

        # max_attempts >= 1 guarantees a return or raise above
        raise RuntimeError("Unexpected state in retry logic")
