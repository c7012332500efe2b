from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aistack.helpers.utils import tags_to_dict
from aistack.models.base_model import BaseModel


@dataclass
class VpcEndpoint(BaseModel):
    vpcEndpointId: str
    vpcId: str
    serviceName: str
    vpcEndpointType: str = "Gateway"
    state: str = "pending"
    routeTableIds: List[str] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_describe_vpc_endpoints(cls, data: Dict[str, Any]) -> "VpcEndpoint":
        return cls(
            vpcEndpointId=data["VpcEndpointId"],
            vpcId=data.get("VpcId", ""),
            serviceName=data.get("ServiceName", ""),
            vpcEndpointType=data.get("VpcEndpointType", "Gateway"),
            state=str(data.get("State", "pending")),
            routeTableIds=list(data.get("RouteTableIds", [])),
            tags=tags_to_dict(data.get("Tags")),
        )

    def __str__(self) -> str:
        return f"VpcEndpoint(id={self.vpcEndpointId}, service={self.serviceName}, state={self.state})"


@dataclass
class ConnectionNotification(BaseModel):
    connectionNotificationId: str
    connectionNotificationArn: str
    connectionEvents: List[str] = field(default_factory=list)
    vpcEndpointId: Optional[str] = None
    connectionNotificationState: Optional[str] = None
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_describe_connection_notifications(cls, data: Dict[str, Any]) -> "ConnectionNotification":
        return cls(
            connectionNotificationId=data["ConnectionNotificationId"],
            connectionNotificationArn=data.get("ConnectionNotificationArn", ""),
            connectionEvents=list(data.get("ConnectionEvents", [])),
            vpcEndpointId=data.get("VpcEndpointId"),
            connectionNotificationState=data.get("ConnectionNotificationState"),
        )
