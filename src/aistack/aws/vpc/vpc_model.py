from dataclasses import dataclass, field
from typing import Any, Dict, List

from aistack.helpers.utils import tags_to_dict
from aistack.models.base_model import BaseModel


@dataclass
class Vpc(BaseModel):
    vpcId: str
    cidrBlock: str
    state: str = "pending"
    isDefault: bool = False
    tags: Dict[str, str] = field(default_factory=dict)
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_describe_vpcs(cls, data: Dict[str, Any]) -> "Vpc":
        return cls(
            vpcId=data["VpcId"],
            cidrBlock=data.get("CidrBlock", ""),
            state=data.get("State", "pending"),
            isDefault=data.get("IsDefault", False),
            tags=tags_to_dict(data.get("Tags")),
        )

    def __str__(self) -> str:
        return f"Vpc(id={self.vpcId}, cidr={self.cidrBlock}, state={self.state})"


@dataclass
class InternetGateway(BaseModel):
    internetGatewayId: str
    attachedVpcIds: List[str] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_describe_internet_gateways(cls, data: Dict[str, Any]) -> "InternetGateway":
        return cls(
            internetGatewayId=data["InternetGatewayId"],
            attachedVpcIds=[a["VpcId"] for a in data.get("Attachments", []) if "VpcId" in a],
            tags=tags_to_dict(data.get("Tags")),
        )

    def __str__(self) -> str:
        return f"InternetGateway(id={self.internetGatewayId}, attached={self.attachedVpcIds})"
