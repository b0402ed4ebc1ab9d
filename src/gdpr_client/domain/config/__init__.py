"""Configuration models with Pydantic validation."""

from gdpr_client.domain.config.client import ClientConfig
from gdpr_client.domain.config.retry import RetryPolicy
from gdpr_client.domain.config.service import ServiceConfig

__all__ = [
    "ClientConfig",
    "RetryPolicy",
    "ServiceConfig",
]
