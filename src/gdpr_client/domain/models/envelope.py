"""Response envelope returned by the GDPR service"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Envelope(BaseModel):
    """Generic {statusCode, message, data} wrapper.

    The service reports domain failures through ``status_code`` inside an
    otherwise successful HTTP 200 response.
    """

    status_code: int = Field(alias="statusCode")
    message: Optional[str] = None
    data: Any = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class PaginatedResponse(BaseModel):
    """One page of list results.

    ``last_range_key`` is an opaque cursor; pass it back unchanged to get the
    next page. None means there are no further pages.
    """

    results: List[Any] = Field(default_factory=list)
    last_range_key: Optional[str] = Field(None, alias="lastRangeKey")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_more(self) -> bool:
        return bool(self.last_range_key)
