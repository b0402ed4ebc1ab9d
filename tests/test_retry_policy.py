"""Tests for retry classification and backoff computation"""

from __future__ import annotations

import random
import socket
from concurrent.futures import CancelledError
from unittest.mock import Mock

import pytest
import requests

from gdpr_client.domain.config.retry import RetryPolicy
from gdpr_client.infrastructure.retry import (
    FailureKind,
    classify_outcome,
    compute_backoff,
    is_retryable_error,
    should_retry,
    wait_policy_backoff,
)


class TestShouldRetryStatus:
    """Tests for status code classification"""

    @pytest.mark.parametrize("status_code", [500, 502, 503, 504, 599])
    def test_server_errors_are_retryable(self, status_code):
        assert should_retry(status_code, None) is True

    def test_not_implemented_is_terminal(self):
        assert should_retry(501, None) is False

    def test_too_many_requests_is_retryable(self):
        assert should_retry(429, None) is True

    @pytest.mark.parametrize(
        "status_code",
        [200, 201, 204, 301, 302, 304, 400, 401, 403, 404, 409, 422, 0, 600],
    )
    def test_other_statuses_are_terminal(self, status_code):
        assert should_retry(status_code, None) is False


class TestShouldRetryErrors:
    """Tests for transport error classification"""

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.Timeout("deadline exceeded"),
            requests.exceptions.ConnectTimeout("connect timeout"),
            requests.exceptions.ReadTimeout("read timeout"),
            requests.exceptions.ConnectionError("connection refused"),
            TimeoutError("timed out"),
            ConnectionRefusedError("connection refused"),
            socket.gaierror("no such host"),
            CancelledError(),
        ],
    )
    def test_deadline_cancellation_and_connection_errors_are_retryable(self, error):
        assert should_retry(0, error) is True

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.SSLError("certificate verify failed"),
            requests.exceptions.InvalidURL("bad url"),
            requests.exceptions.TooManyRedirects("loop"),
            ValueError("unrelated"),
        ],
    )
    def test_other_errors_are_terminal(self, error):
        assert should_retry(0, error) is False

    def test_retryable_status_wins_over_terminal_error(self):
        """Status is still checked when the error itself is not retryable"""
        assert should_retry(503, ValueError("unrelated")) is True

    def test_is_retryable_error_none(self):
        assert is_retryable_error(None) is False

    def test_should_retry_is_idempotent(self):
        """Repeated calls with the same inputs give the same answer"""
        error = requests.exceptions.ReadTimeout("slow")
        for status_code, err in [(503, None), (501, None), (429, None), (404, None), (0, error)]:
            first = should_retry(status_code, err)
            assert all(should_retry(status_code, err) == first for _ in range(20))


class TestClassifyOutcome:
    """Tests for the failure taxonomy"""

    @pytest.mark.parametrize(
        "status_code,expected",
        [
            (200, FailureKind.SUCCESS),
            (302, FailureKind.SUCCESS),
            (400, FailureKind.CLIENT_ERROR),
            (404, FailureKind.CLIENT_ERROR),
            (429, FailureKind.RATE_LIMITED),
            (500, FailureKind.SERVER_ERROR),
            (501, FailureKind.CLIENT_ERROR),
            (503, FailureKind.SERVER_ERROR),
        ],
    )
    def test_status_classification(self, status_code, expected):
        assert classify_outcome(status_code) is expected

    def test_error_is_transport(self):
        assert classify_outcome(0, requests.exceptions.ConnectionError()) is FailureKind.TRANSPORT

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (FailureKind.TRANSPORT, True),
            (FailureKind.SERVER_ERROR, True),
            (FailureKind.RATE_LIMITED, True),
            (FailureKind.CLIENT_ERROR, False),
            (FailureKind.SUCCESS, False),
        ],
    )
    def test_retryable_kinds(self, kind, expected):
        assert kind.retryable is expected

    @pytest.mark.parametrize("status_code", [200, 400, 404, 429, 500, 501, 503, 599])
    def test_retryable_agrees_with_should_retry_for_statuses(self, status_code):
        assert classify_outcome(status_code).retryable is should_retry(status_code)


class TestComputeBackoff:
    """Tests for exponential backoff with jitter"""

    def test_exponential_sequence_without_jitter(self):
        policy = RetryPolicy(initial_backoff=0.1, backoff_factor=2.0, max_backoff=10.0, jitter=0)
        delays = [compute_backoff(policy, i) for i in range(4)]
        assert delays == pytest.approx([0.1, 0.2, 0.4, 0.8])

    def test_custom_factor(self):
        policy = RetryPolicy(initial_backoff=1.0, backoff_factor=3.0, max_backoff=100.0, jitter=0)
        assert compute_backoff(policy, 0) == pytest.approx(1.0)
        assert compute_backoff(policy, 2) == pytest.approx(9.0)

    def test_non_decreasing_and_capped_without_jitter(self):
        policy = RetryPolicy(initial_backoff=0.05, backoff_factor=1.7, max_backoff=3.0, jitter=0)
        delays = [compute_backoff(policy, i) for i in range(30)]
        assert all(a <= b for a, b in zip(delays, delays[1:]))
        assert all(0 <= d <= policy.max_backoff for d in delays)
        assert delays[-1] == policy.max_backoff

    def test_jitter_stays_within_bounds(self):
        policy = RetryPolicy(initial_backoff=0.5, backoff_factor=2.0, max_backoff=1000.0, jitter=0.3)
        rng = random.Random(1234)
        for attempt_index in range(6):
            base = 0.5 * 2.0 ** attempt_index
            for _ in range(50):
                delay = compute_backoff(policy, attempt_index, rng)
                assert base <= delay <= base * 1.3 + 1e-9

    def test_jitter_is_clamped_to_max_backoff(self):
        policy = RetryPolicy(initial_backoff=1.0, backoff_factor=2.0, max_backoff=1.0, jitter=1.0)
        rng = random.Random(7)
        assert all(compute_backoff(policy, 0, rng) <= 1.0 for _ in range(50))

    def test_jitter_uses_module_random_by_default(self, monkeypatch):
        monkeypatch.setattr(random, "uniform", lambda a, b: b)
        policy = RetryPolicy(initial_backoff=1.0, backoff_factor=2.0, max_backoff=100.0, jitter=0.5)
        assert compute_backoff(policy, 1) == pytest.approx(3.0)

    def test_huge_attempt_index_returns_max_backoff(self):
        policy = RetryPolicy(initial_backoff=0.1, backoff_factor=10.0, max_backoff=5.0, jitter=0)
        assert compute_backoff(policy, 10_000) == 5.0

    def test_never_negative(self):
        policy = RetryPolicy(jitter=0)
        assert compute_backoff(policy, -3) >= 0


class TestWaitPolicyBackoff:
    """Tests for the tenacity wait adapter"""

    def test_uses_index_of_failed_attempt(self):
        policy = RetryPolicy(initial_backoff=0.1, backoff_factor=2.0, max_backoff=10.0, jitter=0)
        wait = wait_policy_backoff(policy)
        assert wait(Mock(attempt_number=1)) == pytest.approx(0.1)
        assert wait(Mock(attempt_number=3)) == pytest.approx(0.4)
