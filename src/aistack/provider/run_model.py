from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import uuid

from aistack.aws.base.aws_resource import ResourceStatus, ResourceType, StackResource
from aistack.models.base_model import BaseModel
from aistack.models.base_enum_model import BaseEnumModel


class RunStatus(BaseEnumModel):
    """Enum representing possible statuses of a provisioning run."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"
    ROLLED_BACK = "rolled-back"


class StepStatus(BaseEnumModel):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult(BaseModel):
    """Outcome of one step of the stack plan."""
    number: int
    name: str
    status: StepStatus = StepStatus.PENDING
    message: str = ""
    outputs: Dict[str, Any] = field(default_factory=dict)
    durationMs: int = 0
    additionalProperties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProvisioningRun(BaseModel):
    """
    Represents one execution of the stack plan.

    Attributes:
        stackName (str): Name used to tag everything the run creates.
        region (str): AWS region all clients are bound to.
        runId (str): Unique ID for this run.
        status (RunStatus): Current status of the run.
        steps (List[StepResult]): Per-step outcomes, in execution order.
        resources (List[StackResource]): Ledger of resources created by the run, in creation order.
        connectionState (Optional[str]): State of the S3 endpoint read in step 8.
        startTime (int): Epoch seconds when the run started.
        endTime (int): Epoch seconds when the run finished.
        message (str): Message associated with the run.
        dryRun (bool): Whether the run targeted the in-process AWS emulation.
    """
    stackName: str
    region: str
    runId: str = field(default_factory=lambda: f"run-{uuid.uuid4()}")
    status: RunStatus = RunStatus.PENDING
    steps: List[StepResult] = field(default_factory=list)
    resources: List[StackResource] = field(default_factory=list)
    connectionState: Optional[str] = None
    startTime: int = 0
    endTime: int = 0
    message: str = ""
    dryRun: bool = False
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    def record_resource(self, resource_type: ResourceType, resource_id: str, parent_id: Optional[str] = None) -> StackResource:
        """
        Add a freshly created resource to the ledger.

        :return: The ledger entry.
        """
        resource = StackResource(resourceType=resource_type, resourceId=resource_id, parentId=parent_id)
        self.resources.append(resource)
        return resource

    def held_resources(self) -> List[StackResource]:
        """Resources still held by the run, newest first."""
        return [resource for resource in reversed(self.resources) if resource.is_held]

    def find_resource(self, resource_type: ResourceType, resource_id: str) -> Optional[StackResource]:
        for resource in self.resources:
            if resource.resourceType == resource_type and resource.resourceId == resource_id:
                return resource
        return None

    def get_step(self, number: int) -> Optional[StepResult]:
        for step in self.steps:
            if step.number == number:
                return step
        return None

    def update_status(self, new_status: RunStatus, message: Optional[str] = None) -> None:
        self.status = new_status
        if message is not None:
            self.message = message

    def format_response(self, long: bool = False) -> Dict[str, Any]:
        """
        Format this run into a response dictionary.

        :param long: Whether to include all fields in the response.
        :return: A dictionary representation of the response.
        """
        if long:
            return self.to_dict()

        return {
            "runId": self.runId,
            "stackName": self.stackName,
            "region": self.region,
            "status": self.status.value,
            "connectionState": self.connectionState,
            "resources": [
                {"type": r.resourceType.value, "id": r.resourceId, "status": r.status.value}
                for r in self.resources
            ],
            "heldResources": len([r for r in self.resources if r.status != ResourceStatus.RELEASED]),
            "message": self.message,
        }
