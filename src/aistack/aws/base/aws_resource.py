from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import time

from aistack.models.base_model import BaseModel
from aistack.models.base_enum_model import BaseEnumModel


class ResourceType(BaseEnumModel):
    """Kinds of resources a stack run can hold."""
    VPC = "vpc"
    BUCKET = "bucket"
    INTERNET_GATEWAY = "internet-gateway"
    GATEWAY_ATTACHMENT = "gateway-attachment"
    VPC_ENDPOINT = "vpc-endpoint"
    CONNECTION_NOTIFICATION = "connection-notification"
    ROUTE_TABLE_ASSOCIATION = "route-table-association"
    SECRET = "secret"
    METRIC_ALARM = "metric-alarm"


class ResourceStatus(BaseEnumModel):
    CREATED = "created"
    RELEASED = "released"
    RELEASE_FAILED = "release-failed"


@dataclass
class StackResource(BaseModel):
    """
    A resource created during a stack run.

    Attributes:
        resourceType (ResourceType): What kind of resource this is.
        resourceId (str): The identifier AWS returned for it (or its name, for buckets, secrets and alarms).
        parentId (Optional[str]): The resource it hangs off, e.g. the VPC of a gateway attachment
            or the endpoint of a route table association.
        status (ResourceStatus): Whether the run still holds it.
        creationTime (int): Epoch seconds when the create call returned.
        message (str): Last status message.
    """
    resourceType: ResourceType
    resourceId: str
    parentId: Optional[str] = None
    status: ResourceStatus = ResourceStatus.CREATED
    creationTime: int = field(default_factory=lambda: int(time.time()))
    message: str = ""
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_held(self) -> bool:
        """True while the resource still needs releasing."""
        return self.status == ResourceStatus.CREATED

    def update_status(self, new_status: ResourceStatus, message: Optional[str] = None) -> None:
        """Update the status of the resource."""
        self.status = new_status
        if message is not None:
            self.message = message

    def __str__(self) -> str:
        if self.parentId:
            return f"{self.resourceType}:{self.resourceId} (on {self.parentId})"
        return f"{self.resourceType}:{self.resourceId}"
