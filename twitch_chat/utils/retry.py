"""Reconnect helper using Tenacity.

The session controller never retries on its own; applications that want a
persistent session wrap ``connect`` with this.
"""

from __future__ import annotations

import logging

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..client.client import TwitchChatClient
from ..constants import RECONNECT_MAX_ATTEMPTS, RECONNECT_MAX_BACKOFF_SECONDS
from ..errors import TransportError


class RetryExhaustedError(TransportError):
    """Raised when all connect attempts have failed."""

    def __init__(
        self, message: str, attempts: int, final_exception: BaseException | None = None
    ) -> None:
        super().__init__(message, operation_type="open")
        self.attempts = attempts
        self.final_exception = final_exception


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome else None
    sleep = retry_state.next_action.sleep if retry_state.next_action else 0
    logging.warning(
        f"🔄 Connect attempt {retry_state.attempt_number} failed ({error}); retrying in {sleep:.1f}s"
    )


async def connect_with_retry(
    client: TwitchChatClient,
    max_attempts: int = RECONNECT_MAX_ATTEMPTS,
    max_backoff: float = RECONNECT_MAX_BACKOFF_SECONDS,
) -> None:
    """Call ``client.connect`` until the transport opens, with exponential backoff.

    Only ``TransportError`` is retried; configuration and state errors are
    raised immediately.

    Raises:
        RetryExhaustedError: If every attempt failed.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, max=max_backoff),
        retry=retry_if_exception_type(TransportError),
        before_sleep=_log_retry,
    )
    try:
        await retrying(client.connect)
    except RetryError as e:
        raise RetryExhaustedError(
            f"Connect failed after {max_attempts} attempts",
            attempts=max_attempts,
            final_exception=e.last_attempt.exception(),
        ) from e
