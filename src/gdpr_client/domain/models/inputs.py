"""Request bodies for GDPR service operations.

The service mixes key styles: create/fetch/update bodies use snake_case,
list and delete bodies use camelCase. Field aliases carry the wire names;
models accept either the alias or the Python name.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gdpr_client.domain.models.gdpr_request import RequestStatus, RequestType


class ServiceInput(BaseModel):
    """Base for request bodies carrying an optional API key"""

    api_key: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, extra="forbid")

    def to_payload(self) -> dict:
        """Serialize with wire names, dropping unset optional fields"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CreateInfoRequestInput(ServiceInput):
    partition_key: str
    type: RequestType = RequestType.INFO
    created_by: str


class CreateDeleteRequestInput(ServiceInput):
    partition_key: str
    type: RequestType = RequestType.DELETE
    created_by: str


class FetchRequestInput(ServiceInput):
    partition_key: str
    range_key: str


class UpdateRequestInput(ServiceInput):
    partition_key: str
    range_key: str
    type: Optional[RequestType] = None
    status: Optional[RequestStatus] = None


class CamelCaseInput(ServiceInput):
    """Base for bodies sent with camelCase keys"""

    api_key: Optional[str] = Field(None, alias="apiKey")


class FetchAllRequestInput(CamelCaseInput):
    partition_key: str = Field(alias="partitionKey")
    last_range_key: Optional[str] = Field(None, alias="lastRangeKey")


class FetchByTypeInput(CamelCaseInput):
    type: RequestType
    last_range_key: Optional[str] = Field(None, alias="lastRangeKey")


class FetchByStatusInput(CamelCaseInput):
    status: RequestStatus
    last_range_key: Optional[str] = Field(None, alias="lastRangeKey")


class FetchByCreatorInput(CamelCaseInput):
    created_by: str = Field(alias="createdBy")
    last_range_key: Optional[str] = Field(None, alias="lastRangeKey")


class DeleteRequestInput(CamelCaseInput):
    partition_key: str = Field(alias="partitionKey")
    range_key: str = Field(alias="rangeKey")
    is_hard_delete: bool = Field(False, alias="isHardDelete")
