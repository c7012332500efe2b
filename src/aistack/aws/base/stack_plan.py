"""The fixed, ordered plan of calls a stack run makes."""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple


@dataclass(frozen=True)
class StackStep:
    number: int
    name: str
    description: str
    dependsOn: Tuple[int, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.number,
            "name": self.name,
            "description": self.description,
            "dependsOn": list(self.dependsOn),
        }


STACK_STEPS: Tuple[StackStep, ...] = (
    StackStep(1, "create-vpc", "create virtual network"),
    StackStep(2, "create-bucket", "create storage bucket"),
    StackStep(3, "create-internet-gateway", "create internet gateway"),
    StackStep(4, "attach-internet-gateway", "attach gateway to network", (1, 3)),
    StackStep(5, "create-vpc-endpoint", "create network endpoint (object storage)", (1,)),
    StackStep(6, "register-connection-notification", "register endpoint connection notification", (5,)),
    StackStep(7, "modify-endpoint-route-table", "modify endpoint route table", (1, 5)),
    StackStep(8, "describe-connection-state", "describe endpoint connection state", (5,)),
    StackStep(9, "create-secret", "create secret"),
    StackStep(10, "create-metric-alarm", "create metric alarm"),
    StackStep(11, "teardown", "delete alarm, delete secret, detach+delete gateway", (9, 10, 1, 3)),
)


def validate_plan(steps: Sequence[StackStep] = STACK_STEPS) -> None:
    """
    Check that steps are numbered 1..n without gaps and only depend on earlier steps.

    :raises ValueError: If the plan breaks either rule.
    """
    for index, step in enumerate(steps, start=1):
        if step.number != index:
            raise ValueError(f"Step '{step.name}' is numbered {step.number}, expected {index}")
        for dependency in step.dependsOn:
            if not (1 <= dependency < step.number):
                raise ValueError(f"Step {step.number} depends on step {dependency}, which does not run before it")


def describe_plan() -> List[Dict[str, Any]]:
    return [step.to_dict() for step in STACK_STEPS]
