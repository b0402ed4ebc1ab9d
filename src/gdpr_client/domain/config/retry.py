"""Retry policy model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """Retry behavior for calls to the GDPR service.

    Durations are in seconds. The policy is immutable and shared read-only
    by every call a client makes.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        initial_backoff: Delay before the first retry
        max_backoff: Upper bound for any single delay
        backoff_factor: Exponential growth factor between retries
        jitter: Random extra fraction (0.0-1.0) added to each delay
        total_timeout: Optional budget for the whole call, None = unbounded
    """

    max_retries: int = Field(3, ge=0)
    initial_backoff: float = Field(0.1, gt=0.0)
    max_backoff: float = Field(10.0, gt=0.0)
    backoff_factor: float = Field(2.0, gt=1.0)
    jitter: float = Field(0.2, ge=0.0, le=1.0)
    total_timeout: Optional[float] = Field(None, gt=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_backoff_bounds(self) -> "RetryPolicy":
        if self.initial_backoff > self.max_backoff:
            raise ValueError("initial_backoff must not exceed max_backoff")
        return self
