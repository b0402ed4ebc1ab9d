"""GDPR request records as stored by the service"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class RequestType(str, Enum):
    """Kind of data subject request"""

    INFO = "INFO_REQUEST"
    DELETE = "DELETE_REQUEST"


class RequestStatus(str, Enum):
    """Processing status of a data subject request"""

    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    DELETED = "DELETED"


class GDPRRequest(BaseModel):
    """Fields shared by info and delete request records"""

    partition_key: str
    range_key: Optional[str] = None
    type: str
    status: Optional[str] = None
    created: Optional[str] = None
    modified: Optional[str] = None
    created_by: str

    model_config = ConfigDict(extra="ignore")

    @property
    def is_pending(self) -> bool:
        """Check if the service has not finished processing the request"""
        return self.status == RequestStatus.PENDING.value


class InfoRequest(GDPRRequest):
    """Information-access request"""


class DeleteRequest(GDPRRequest):
    """Data deletion request"""
