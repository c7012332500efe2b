"""Tests for the CloudWatch alarm handler."""

import pytest

from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.cloudwatch.cloudwatch_handler import CloudWatchHandler
from aistack.aws.cloudwatch.cloudwatch_model import MetricAlarm
from aistack.aws.exceptions.aws_exceptions import ResourceConflictError
from aistack.config.stack_config.stack_config_model import AlarmConfig


@pytest.mark.aws
class TestCloudWatchHandler:
    """Alarm calls against moto."""

    def test_put_and_describe_alarm(self, aws_mocks):
        handler = CloudWatchHandler("us-east-1")
        alarm = MetricAlarm.from_config(
            AlarmConfig(threshold=90, dimensions={"InstanceId": "i-0123456789abcdef0"}),
            tags={"RunId": "run-1"},
        )

        handler.put_metric_alarm(alarm)
        described = handler.describe_alarm("ai-alarm")

        assert described is not None
        assert described.metricName == "CPUUtilization"
        assert described.namespace == "AWS/EC2"
        assert described.threshold == 90.0
        assert described.comparisonOperator == "GreaterThanOrEqualToThreshold"
        assert described.dimensions == {"InstanceId": "i-0123456789abcdef0"}

    def test_create_refuses_to_replace_existing_alarm(self, aws_mocks, cloudwatch_client):
        cloudwatch_client.put_metric_alarm(
            AlarmName="ai-alarm",
            MetricName="Errors",
            Namespace="Prod/App",
            Statistic="Sum",
            ComparisonOperator="GreaterThanThreshold",
            Threshold=5.0,
            Period=60,
            EvaluationPeriods=1,
        )
        handler = CloudWatchHandler("us-east-1")

        with pytest.raises(ResourceConflictError) as exc_info:
            handler.create_metric_alarm(MetricAlarm.from_config(AlarmConfig()))

        assert exc_info.value.error_code == "AlarmAlreadyExists"
        existing = handler.describe_alarm("ai-alarm")
        assert existing.namespace == "Prod/App"
        assert existing.metricName == "Errors"

    def test_create_new_alarm(self, aws_mocks):
        handler = CloudWatchHandler("us-east-1")

        handler.create_metric_alarm(MetricAlarm.from_config(AlarmConfig()))

        assert handler.describe_alarm("ai-alarm").metricName == "CPUUtilization"

    def test_describe_unknown_alarm_returns_none(self, aws_mocks):
        assert CloudWatchHandler("us-east-1").describe_alarm("missing") is None

    def test_release_deletes_alarm(self, aws_mocks):
        handler = CloudWatchHandler("us-east-1")
        handler.put_metric_alarm(MetricAlarm.from_config(AlarmConfig()))

        handler.release(StackResource(ResourceType.METRIC_ALARM, "ai-alarm"))

        assert handler.describe_alarm("ai-alarm") is None


@pytest.mark.unit
class TestMetricAlarmParams:
    def test_optional_fields_are_omitted(self):
        params = MetricAlarm.from_config(AlarmConfig()).to_put_metric_alarm_params()

        assert params["AlarmName"] == "ai-alarm"
        assert params["Period"] == 60
        assert "Dimensions" not in params
        assert "AlarmActions" not in params
        assert "Tags" not in params

    def test_dimensions_and_tags_use_aws_shapes(self):
        alarm = MetricAlarm.from_config(AlarmConfig(dimensions={"InstanceId": "i-1"}), tags={"StackName": "ai-stack"})

        params = alarm.to_put_metric_alarm_params()

        assert params["Dimensions"] == [{"Name": "InstanceId", "Value": "i-1"}]
        assert params["Tags"] == [{"Key": "StackName", "Value": "ai-stack"}]
