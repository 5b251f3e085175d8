"""
Retry and fallback execution for Cercalia operations.

- with_retry: repeats one unit of work with exponential backoff (tenacity),
  retrying only transient failures
- first_available: tries heterogeneous strategies in order and returns the
  first present result
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .errors import CercaliaError, is_retryable
from .models import RetryAttempt

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY = 0.5
DEFAULT_MULTIPLIER = 1.5


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry settings for one logical operation.

    The wait before attempt n+1 is delay * multiplier ** (n - 1) seconds.
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_DELAY
    multiplier: float = DEFAULT_MULTIPLIER
    log_retries: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")

    def wait_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        return self.delay * self.multiplier ** (attempt - 1)


def with_retry(
    func: Callable[[], T],
    policy: Optional[RetryPolicy] = None,
    *,
    operation: str = "operation",
    logger=None,
    on_retry: Optional[Callable[[RetryAttempt], None]] = None,
    cancel_event: Optional[threading.Event] = None,
) -> T:
    """
    Run `func` until it succeeds, fails terminally, or attempts run out.

    CercaliaErrors that are not transient (domain, structural, validation)
    are raised on first occurrence. Any other exception is transient and is
    retried after an exponential backoff. When attempts run out the last
    transient error is re-raised unchanged.

    Args:
        func: Zero-argument unit of work
        policy: Retry settings (defaults to RetryPolicy())
        operation: Label used in log lines
        logger: structlog logger (defaults to this module's logger)
        on_retry: Observer called with a RetryAttempt before each wait
        cancel_event: Setting this event aborts the wait between attempts

    Returns:
        Whatever `func` returns

    Raises:
        CercaliaError: CANCELLED if cancel_event is set during a wait
    """
    policy = policy or RetryPolicy()
    log = (logger or structlog.get_logger(__name__)).bind(operation=operation)
    last_error: list[BaseException] = []

    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        last_error[:] = [error] if error is not None else []

        record = RetryAttempt(
            operation=operation,
            attempt=retry_state.attempt_number,
            max_attempts=policy.max_attempts,
            wait=float(wait),
            error=error,
        )
        if policy.log_retries:
            log.info(
                "retry_attempt_failed",
                attempt=record.attempt,
                max_attempts=record.max_attempts,
                wait=round(record.wait, 3),
                error=record.error_message,
            )
        if on_retry is not None:
            on_retry(record)

    def sleep(seconds: float) -> None:
        if cancel_event is None:
            if seconds > 0:
                time.sleep(seconds)
            return

        if cancel_event.wait(seconds):
            log.warning("retry_interrupted")
            cause = last_error[0] if last_error else None
            raise CercaliaError.cancelled("Retry interrupted", operation=operation) from cause

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(multiplier=policy.delay, exp_base=policy.multiplier),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep,
        sleep=sleep,
        reraise=True,
    )

    return retrying(func)


def first_available(
    strategies: Iterable[Callable[[], Optional[T]]],
    *,
    operation: str = "operation",
    logger=None,
    log_attempts: bool = True,
) -> Optional[T]:
    """
    Try alternative ways of obtaining a result.

    Each strategy is called once, in order. The first non-None result wins.
    A strategy that raises is logged and skipped.

    Args:
        strategies: Zero-argument callables
        operation: Label used in log lines
        logger: structlog logger (defaults to this module's logger)
        log_attempts: Emit a log line for each failed or empty strategy

    Returns:
        First present result, or None if every strategy came back empty

    Raises:
        Exception: The last error raised by a strategy, when none succeeded
    """
    log = (logger or structlog.get_logger(__name__)).bind(operation=operation)
    candidates = list(strategies)
    total = len(candidates)
    last_error: Optional[Exception] = None

    for index, strategy in enumerate(candidates, start=1):
        try:
            result = strategy()
        except Exception as e:
            last_error = e
            if log_attempts:
                log.info("alternative_failed", attempt=index, total=total, error=str(e))
            continue

        if result is not None:
            return result

        if log_attempts and index < total:
            log.info("alternative_empty", attempt=index, total=total)

    if last_error is not None:
        raise last_error

    return None
