"""GDPR service API client"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from gdpr_client.domain.config.client import ClientConfig
from gdpr_client.domain.models.envelope import Envelope, PaginatedResponse
from gdpr_client.domain.models.gdpr_request import DeleteRequest, InfoRequest
from gdpr_client.domain.models.inputs import (
    CreateDeleteRequestInput,
    CreateInfoRequestInput,
    DeleteRequestInput,
    FetchAllRequestInput,
    FetchByCreatorInput,
    FetchByStatusInput,
    FetchByTypeInput,
    FetchRequestInput,
    ServiceInput,
    UpdateRequestInput,
)
from gdpr_client.infrastructure.gdpr.errors import (
    HTTPStatusError,
    RequestNotFoundError,
    ResponseDecodeError,
    ServiceError,
    TransportError,
)
from gdpr_client.infrastructure.http_client import ResilientExecutor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Deletion-request operations are routed by this controller value;
# info-request operations omit the parameter.
DELETE_CONTROLLER = "delete"


class GDPRClient:
    """Client for the GDPR compliance service"""

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
    ):
        """Initialize GDPR client

        Args:
            config: Validated client configuration
            session: Optional requests session (custom adapters, shared pool)

        Raises:
            ValueError: If no service base URL is configured
        """
        if not config.service.base_url:
            raise ValueError(
                "GDPR service URL is required. "
                "Set GDPR_SERVICE_URL environment variable or provide in config."
            )

        self.config = config
        self.base_url = config.service.base_url.rstrip("/")
        self.api_key = config.service.api_key
        self.environment = config.service.environment
        self.session = session or requests.Session()
        self.executor = ResilientExecutor(
            self.session,
            config.retry,
            timeout=config.service.timeout,
        )

        logger.info(f"GDPR client initialized for {self.base_url} ({self.environment})")

    def close(self) -> None:
        """Close the underlying HTTP session"""
        self.session.close()

    def __enter__(self) -> "GDPRClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Info requests

    def create_info_request(self, input: CreateInfoRequestInput) -> InfoRequest:
        """Create a new information-access request"""
        envelope = self._call("create", input)
        return self._decode_data(envelope, InfoRequest)

    def fetch_info_request(self, input: FetchRequestInput) -> InfoRequest:
        """Fetch an information-access request by its keys

        Raises:
            RequestNotFoundError: If the service has no such request
        """
        envelope = self._call("fetch", input, not_found="info request not found")
        return self._decode_data(envelope, InfoRequest)

    def update_info_request(self, input: UpdateRequestInput) -> bool:
        """Update type and/or status of an information-access request"""
        self._call("update", input)
        return True

    def delete_info_request(self, input: DeleteRequestInput) -> bool:
        """Delete an information-access request"""
        self._call("delete", input)
        return True

    def fetch_all_info_requests(self, input: FetchAllRequestInput) -> PaginatedResponse:
        """List information-access requests for a partition key"""
        envelope = self._call("fetchAll", input)
        return self._decode_data(envelope, PaginatedResponse)

    def fetch_info_requests_by_type(self, input: FetchByTypeInput) -> PaginatedResponse:
        """List information-access requests of a given type"""
        envelope = self._call("fetchByType", input)
        return self._decode_data(envelope, PaginatedResponse)

    def fetch_requests_by_creator(self, input: FetchByCreatorInput) -> PaginatedResponse:
        """List information-access requests created by a given principal"""
        envelope = self._call("fetchByCreator", input)
        return self._decode_data(envelope, PaginatedResponse)

    # Delete requests

    def create_delete_request(self, input: CreateDeleteRequestInput) -> DeleteRequest:
        """Create a new deletion request"""
        envelope = self._call("create", input, controller=DELETE_CONTROLLER)
        return self._decode_data(envelope, DeleteRequest)

    def fetch_delete_request(self, input: FetchRequestInput) -> DeleteRequest:
        """Fetch a deletion request by its keys

        Raises:
            RequestNotFoundError: If the service has no such request
        """
        envelope = self._call(
            "fetch", input, controller=DELETE_CONTROLLER, not_found="delete request not found"
        )
        return self._decode_data(envelope, DeleteRequest)

    def update_delete_request(self, input: UpdateRequestInput) -> bool:
        """Update type and/or status of a deletion request"""
        self._call("update", input, controller=DELETE_CONTROLLER)
        return True

    def delete_request(self, input: DeleteRequestInput) -> bool:
        """Delete a deletion request"""
        self._call("delete", input, controller=DELETE_CONTROLLER)
        return True

    def fetch_delete_requests_by_status(self, input: FetchByStatusInput) -> PaginatedResponse:
        """List deletion requests in a given status"""
        envelope = self._call("fetchByStatus", input, controller=DELETE_CONTROLLER)
        return self._decode_data(envelope, PaginatedResponse)

    def fetch_delete_requests_by_creator(self, input: FetchByCreatorInput) -> PaginatedResponse:
        """List deletion requests created by a given principal"""
        envelope = self._call("fetchByCreator", input, controller=DELETE_CONTROLLER)
        return self._decode_data(envelope, PaginatedResponse)

    def _build_request(
        self, action: str, payload: Dict[str, Any], controller: Optional[str]
    ) -> requests.Request:
        params = {"controller": controller} if controller else {}
        params["action"] = action
        return requests.Request(
            "POST",
            f"{self.base_url}/gdpr",
            params=params,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    def _call(
        self,
        action: str,
        input: ServiceInput,
        controller: Optional[str] = None,
        not_found: Optional[str] = None,
    ) -> Envelope:
        """POST an operation and return its successful envelope

        Args:
            action: Service action name
            input: Request body (client API key fills an empty api_key)
            controller: Optional controller routing value
            not_found: Message for a 404 envelope, None to treat it as a plain error

        Returns:
            Envelope with statusCode 200

        Raises:
            TransportError: If no response could be obtained
            HTTPStatusError: If the HTTP status is not 200
            ResponseDecodeError: If the body is not a valid envelope
            ServiceError: If the envelope status is not 200
        """
        if not input.api_key and self.api_key:
            input = input.model_copy(update={"api_key": self.api_key})

        operation = f"{controller or 'info'}.{action}"
        logger.debug(f"GDPR {operation}")
        request = self._build_request(action, input.to_payload(), controller)

        try:
            response = self.executor.execute(request)
        except requests.exceptions.RequestException as e:
            logger.error(f"GDPR {operation} failed to send request: {e}")
            raise TransportError(f"Failed to send request: {e}") from e

        with response:
            try:
                body = response.text
            except requests.exceptions.RequestException as e:
                raise TransportError(f"Failed to read response body: {e}") from e

            if response.status_code != 200:
                logger.error(f"GDPR {operation} failed with HTTP {response.status_code}")
                raise HTTPStatusError(response.status_code, body)

        logger.debug(f"GDPR {operation} response body: {body}")
        try:
            envelope = Envelope.model_validate_json(body)
        except ValidationError as e:
            raise ResponseDecodeError(f"Failed to unmarshal response: {e}") from e

        if not_found and envelope.status_code == 404:
            raise RequestNotFoundError(not_found, envelope.status_code)
        if not envelope.ok:
            raise ServiceError(envelope.message, envelope.status_code)
        return envelope

    def _decode_data(self, envelope: Envelope, model: Type[ModelT]) -> ModelT:
        """Validate the envelope payload against ``model``"""
        try:
            return model.model_validate(envelope.data)
        except ValidationError as e:
            raise ResponseDecodeError(f"Failed to unmarshal data: {e}") from e
