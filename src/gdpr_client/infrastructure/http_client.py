"""Shared HTTP execution (requests + retry/backoff).

Every GDPR service call goes through ResilientExecutor so retry behavior
cannot diverge between operations.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
)

from gdpr_client.domain.config.retry import RetryPolicy
from gdpr_client.infrastructure.retry import classify_outcome, should_retry, wait_policy_backoff

logger = logging.getLogger(__name__)

RETRY_ATTEMPT_HEADER = "X-Retry-Attempt"


def _is_retryable_response(response: requests.Response) -> bool:
    return should_retry(response.status_code)


def _is_retryable_exception(exception: BaseException) -> bool:
    return should_retry(0, exception)


def _describe(retry_state: RetryCallState) -> str:
    outcome = retry_state.outcome
    if outcome.failed:
        error = outcome.exception()
        return f"{classify_outcome(0, error).value}: {error}"
    status_code = outcome.result().status_code
    return f"{classify_outcome(status_code).value}: HTTP {status_code}"


class ResilientExecutor:
    """Send requests with retries according to a RetryPolicy.

    Each call to ``execute`` runs its own attempt loop; the executor keeps no
    per-call state, so a single instance may serve concurrent callers.

    Ownership of response bodies: responses from failed, non-final attempts
    are closed here. The terminal response is returned with its body unread
    and the caller must close it.
    """

    def __init__(
        self,
        session: requests.Session,
        policy: RetryPolicy,
        *,
        timeout: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        """Initialize executor

        Args:
            session: Transport used for every attempt
            policy: Retry policy (read-only)
            timeout: Per-attempt HTTP timeout in seconds
            sleep: Blocking wait used between attempts
            rng: Optional random source for jitter
        """
        self.session = session
        self.policy = policy
        self.timeout = timeout
        self._sleep = sleep
        self._rng = rng

    def execute(self, request: requests.Request) -> requests.Response:
        """Send ``request``, retrying retryable failures.

        The request is treated as a template: every attempt prepares a fresh
        copy, so bodies and headers are never reused between attempts.

        Args:
            request: Request template

        Returns:
            Terminal response (success, non-retryable failure, or the last
            failure once retries are exhausted)

        Raises:
            requests.exceptions.RequestException: The last transport error,
                unchanged, when no response could be obtained
        """
        retrying = Retrying(
            stop=self._stop(),
            wait=wait_policy_backoff(self.policy, self._rng),
            retry=retry_if_exception(_is_retryable_exception) | retry_if_result(_is_retryable_response),
            before_sleep=self._before_sleep,
            retry_error_callback=self._on_exhausted,
            sleep=self._sleep,
        )

        retry_state = None
        for attempt in retrying:
            retry_state = attempt.retry_state
            with attempt:
                response = self._send(request, retry_state.attempt_number - 1)
            if not retry_state.outcome.failed:
                retry_state.set_result(response)

        return retry_state.outcome.result()

    def _stop(self):
        stop = stop_after_attempt(self.policy.max_retries + 1)
        if self.policy.total_timeout is not None:
            stop = stop | stop_after_delay(self.policy.total_timeout)
        return stop

    def _send(self, request: requests.Request, attempt_index: int) -> requests.Response:
        prepared = self.session.prepare_request(request)
        if attempt_index > 0:
            prepared.headers[RETRY_ATTEMPT_HEADER] = str(attempt_index)

        settings = self.session.merge_environment_settings(prepared.url, {}, True, None, None)
        logger.debug(f"HTTP {prepared.method} {prepared.url} (attempt {attempt_index + 1})")
        return self.session.send(prepared, timeout=self.timeout, **settings)

    def _before_sleep(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome is None:
            return
        description = _describe(retry_state)
        if not outcome.failed:
            # Release the connection before the next attempt
            outcome.result().close()
        logger.warning(
            f"GDPR service attempt {retry_state.attempt_number}/{self.policy.max_retries + 1} "
            f"failed ({description}). Retrying in {retry_state.next_action.sleep:.2f}s..."
        )

    def _on_exhausted(self, retry_state: RetryCallState) -> Optional[requests.Response]:
        logger.warning(
            f"GDPR service call gave up after {retry_state.attempt_number} attempt(s): "
            f"{_describe(retry_state)}"
        )
        # Raises the last exception as-is, or hands back the last response
        return retry_state.outcome.result()
