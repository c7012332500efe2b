"""Tests for the fixed step plan."""

import pytest

from aistack.aws.base.stack_plan import STACK_STEPS, StackStep, describe_plan, validate_plan


@pytest.mark.unit
class TestStackPlan:
    def test_plan_has_eleven_numbered_steps(self):
        assert [step.number for step in STACK_STEPS] == list(range(1, 12))
        validate_plan()

    def test_dependencies_point_backwards(self):
        assert STACK_STEPS[3].dependsOn == (1, 3)
        assert STACK_STEPS[6].dependsOn == (1, 5)
        assert STACK_STEPS[10].dependsOn == (9, 10, 1, 3)

    def test_independent_steps(self):
        for number in (1, 2, 3, 9, 10):
            assert STACK_STEPS[number - 1].dependsOn == ()

    def test_gap_in_numbering_is_rejected(self):
        steps = (StackStep(1, "a", "a"), StackStep(3, "b", "b"))

        with pytest.raises(ValueError, match="expected 2"):
            validate_plan(steps)

    def test_forward_dependency_is_rejected(self):
        steps = (StackStep(1, "a", "a", (2,)), StackStep(2, "b", "b"))

        with pytest.raises(ValueError, match="does not run before it"):
            validate_plan(steps)

    def test_describe_plan(self):
        plan = describe_plan()

        assert len(plan) == 11
        assert plan[0] == {"step": 1, "name": "create-vpc", "description": "create virtual network", "dependsOn": []}
        assert plan[10]["name"] == "teardown"
