from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from aistack.models.base_model import BaseModel


@dataclass
class Bucket(BaseModel):
    name: str
    region: str
    location: Optional[str] = None
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Bucket(name={self.name}, region={self.region})"
