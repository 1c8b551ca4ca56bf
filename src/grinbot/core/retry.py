"""Backoff policies for transport calls.

Only transport reads go through here. Wallet operations are never retried;
their failures become replies instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from .exceptions import TransientError
from .logging_utils import log_event

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for one kind of transport call.

    ``cooldown_seconds`` is how long a service loop waits after a call has
    exhausted its attempts, before it tries again from scratch.
    """

    max_attempts: int = 5
    base_wait: float = 1.0
    max_wait: float = 60.0
    jitter: float = 0.1
    cooldown_seconds: float = 5.0


# getUpdates long-polls, so a short cap keeps the bot responsive after an outage.
TELEGRAM_POLL_RETRY = RetryPolicy(max_attempts=5, base_wait=1.0, max_wait=30.0)


def _log_before_sleep(
    logger: logging.Logger, event: str
) -> Callable[[RetryCallState], None]:
    def _before_sleep(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        log_event(
            logger,
            logging.WARNING,
            f"{event}.retrying",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
            exc=outcome.exception() if outcome is not None else None,
        )

    return _before_sleep


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    logger: logging.Logger,
    event: str,
) -> T:
    """Await ``func()``, retrying ``TransientError`` under ``policy``.

    Each retry is logged as ``<event>.retrying``. Other errors propagate on the
    first failure, and the last ``TransientError`` is re-raised once the
    attempts are exhausted.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(multiplier=policy.base_wait, max=policy.max_wait)
        + wait_random(0, max(policy.base_wait * policy.jitter, 0.0)),
        retry=retry_if_exception_type(TransientError),
        before_sleep=_log_before_sleep(logger, event),
        reraise=True,
    )
    return await retrying(func)
