from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from aistack.models.base_model import BaseModel


@dataclass
class Secret(BaseModel):
    name: str
    arn: str
    versionId: Optional[str] = None
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_create_secret(cls, data: Dict[str, Any]) -> "Secret":
        return cls(name=data["Name"], arn=data["ARN"], versionId=data.get("VersionId"))
