"""Root client configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from gdpr_client.domain.config.retry import RetryPolicy
from gdpr_client.domain.config.service import ServiceConfig


class ClientConfig(BaseModel):
    """Root configuration consumed by GDPRClient.

    Validation is performed at construction time so a bad configuration
    fails before the first request is sent.

    Attributes:
        service: Endpoint and credentials
        retry: Retry policy applied to every call
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "service": {
                    "base_url": "https://gdpr.internal.example.com",
                    "api_key": None,
                    "timeout": 10.0,
                    "environment": "Prod",
                },
                "retry": {
                    "max_retries": 3,
                    "initial_backoff": 0.1,
                    "max_backoff": 10.0,
                    "backoff_factor": 2.0,
                    "jitter": 0.2,
                    "total_timeout": None,
                },
            }
        },
    )
