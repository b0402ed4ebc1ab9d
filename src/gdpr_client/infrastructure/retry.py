"""Retry classification and backoff for GDPR service calls.

Pure helpers deciding whether an attempt may be retried and how long to wait
before the next one. The retry loop itself lives in http_client and drives
these through tenacity.
"""

from __future__ import annotations

import random
import socket
from concurrent.futures import CancelledError
from enum import Enum
from typing import Optional

import requests
from tenacity import RetryCallState
from tenacity.wait import wait_base

from gdpr_client.domain.config.retry import RetryPolicy

# Deadline, cancellation, refused connection and failed host resolution
RETRYABLE_TRANSPORT_ERRORS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    TimeoutError,
    ConnectionRefusedError,
    socket.gaierror,
    CancelledError,
)

# ConnectionError subclasses that retrying cannot fix
TERMINAL_TRANSPORT_ERRORS = (requests.exceptions.SSLError,)


class FailureKind(str, Enum):
    """Classification of a single attempt"""

    TRANSPORT = "transport"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SUCCESS = "success"

    @property
    def retryable(self) -> bool:
        return self in (FailureKind.TRANSPORT, FailureKind.SERVER_ERROR, FailureKind.RATE_LIMITED)


def is_retryable_error(error: Optional[BaseException]) -> bool:
    """Check if a transport-level error is worth another attempt."""
    if error is None:
        return False
    if isinstance(error, TERMINAL_TRANSPORT_ERRORS):
        return False
    return isinstance(error, RETRYABLE_TRANSPORT_ERRORS)


def should_retry(status_code: int, error: Optional[BaseException] = None) -> bool:
    """Decide whether an attempt outcome is retryable.

    Args:
        status_code: HTTP status of the response, 0 if none was obtained
        error: Transport error raised by the attempt, if any

    Returns:
        True for deadline/cancellation/connection failures, 5xx except 501,
        and 429. False for everything else.
    """
    if is_retryable_error(error):
        return True
    # 501 Not Implemented will not start working on a retry
    if 500 <= status_code <= 599 and status_code != 501:
        return True
    return status_code == 429


def classify_outcome(status_code: int, error: Optional[BaseException] = None) -> FailureKind:
    """Map an attempt outcome onto the failure taxonomy."""
    if error is not None:
        return FailureKind.TRANSPORT
    if status_code == 429:
        return FailureKind.RATE_LIMITED
    if status_code == 501:
        return FailureKind.CLIENT_ERROR
    if 500 <= status_code <= 599:
        return FailureKind.SERVER_ERROR
    if 400 <= status_code <= 499:
        return FailureKind.CLIENT_ERROR
    return FailureKind.SUCCESS


def compute_backoff(
    policy: RetryPolicy,
    attempt_index: int,
    rng: Optional[random.Random] = None,
) -> float:
    """Compute the delay in seconds before retry number ``attempt_index``.

    Exponential backoff: initial_backoff * (backoff_factor ^ attempt_index),
    stretched by up to ``jitter`` and capped at max_backoff.

    Args:
        policy: Retry policy
        attempt_index: 0 for the delay before the second attempt
        rng: Optional random source (module-level random by default)

    Returns:
        Delay in seconds, never negative
    """
    try:
        delay = policy.initial_backoff * (policy.backoff_factor ** max(attempt_index, 0))
    except OverflowError:
        return policy.max_backoff

    if policy.jitter > 0:
        source = rng if rng is not None else random
        delay *= 1 + source.uniform(0, policy.jitter)

    return max(0.0, min(delay, policy.max_backoff))


class wait_policy_backoff(wait_base):
    """tenacity wait strategy backed by compute_backoff."""

    def __init__(self, policy: RetryPolicy, rng: Optional[random.Random] = None) -> None:
        self.policy = policy
        self.rng = rng

    def __call__(self, retry_state: RetryCallState) -> float:
        # attempt_number is 1-based and refers to the attempt that just failed
        return compute_backoff(self.policy, retry_state.attempt_number - 1, self.rng)
