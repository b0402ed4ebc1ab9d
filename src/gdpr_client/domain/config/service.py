"""GDPR service connection model."""

from typing import Optional

from pydantic import BaseModel, Field


class ServiceConfig(BaseModel):
    """Configuration for the GDPR service endpoint.

    Attributes:
        base_url: Service base URL (None = from GDPR_SERVICE_URL env)
        api_key: Pre-shared API key (None = from GDPR_API_KEY env)
        timeout: Per-attempt HTTP timeout in seconds
        environment: Deployment environment name
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = Field(10.0, gt=0.0)
    environment: str = "Prod"
