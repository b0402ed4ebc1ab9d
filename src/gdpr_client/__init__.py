"""Client library for the GDPR compliance service."""

from gdpr_client.domain.config import ClientConfig, RetryPolicy, ServiceConfig
from gdpr_client.domain.models.envelope import Envelope, PaginatedResponse
from gdpr_client.domain.models.gdpr_request import (
    DeleteRequest,
    InfoRequest,
    RequestStatus,
    RequestType,
)
from gdpr_client.domain.models.inputs import (
    CreateDeleteRequestInput,
    CreateInfoRequestInput,
    DeleteRequestInput,
    FetchAllRequestInput,
    FetchByCreatorInput,
    FetchByStatusInput,
    FetchByTypeInput,
    FetchRequestInput,
    UpdateRequestInput,
)
from gdpr_client.infrastructure.gdpr.client import GDPRClient
from gdpr_client.infrastructure.gdpr.errors import (
    GDPRClientError,
    HTTPStatusError,
    RequestNotFoundError,
    ResponseDecodeError,
    ServiceError,
    TransportError,
)
from gdpr_client.infrastructure.http_client import ResilientExecutor
from gdpr_client.infrastructure.retry import compute_backoff, should_retry

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "CreateDeleteRequestInput",
    "CreateInfoRequestInput",
    "DeleteRequest",
    "DeleteRequestInput",
    "Envelope",
    "FetchAllRequestInput",
    "FetchByCreatorInput",
    "FetchByStatusInput",
    "FetchByTypeInput",
    "FetchRequestInput",
    "GDPRClient",
    "GDPRClientError",
    "HTTPStatusError",
    "InfoRequest",
    "PaginatedResponse",
    "RequestNotFoundError",
    "RequestStatus",
    "RequestType",
    "ResilientExecutor",
    "ResponseDecodeError",
    "RetryPolicy",
    "ServiceConfig",
    "ServiceError",
    "TransportError",
    "UpdateRequestInput",
    "compute_backoff",
    "should_retry",
]
