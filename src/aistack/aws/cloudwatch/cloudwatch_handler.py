from typing import List, Optional

from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.cloudwatch.cloudwatch_model import MetricAlarm
from aistack.aws.exceptions.aws_exceptions import ResourceConflictError
from aistack.helpers.logger import setup_logging

logger = setup_logging()


class CloudWatchHandler(BaseAWSHandler):
    """
    Handler for CloudWatch metric alarms.
    """

    resource_types = (ResourceType.METRIC_ALARM,)

    def __init__(self, region_name: str, **kwargs):
        super().__init__(region_name, **kwargs)
        self.cloudwatch_client = self._create_client("cloudwatch")

    def create_metric_alarm(self, alarm: MetricAlarm) -> MetricAlarm:
        """
        Create an alarm whose name is not in use yet. PutMetricAlarm alone would replace an existing one.

        :param alarm: The alarm definition.
        :return: The alarm that was submitted.
        :raises ResourceConflictError: If an alarm with the same name already exists.
        """
        if self.describe_alarm(alarm.alarmName) is not None:
            logger.error(f"Alarm '{alarm.alarmName}' already exists; refusing to replace it.")
            raise ResourceConflictError(f"Alarm {alarm.alarmName} already exists", error_code="AlarmAlreadyExists")
        return self.put_metric_alarm(alarm)

    def put_metric_alarm(self, alarm: MetricAlarm) -> MetricAlarm:
        """
        Create or replace a metric alarm.

        :param alarm: The alarm definition.
        :return: The alarm that was submitted.
        """
        try:
            self.cloudwatch_client.put_metric_alarm(**alarm.to_put_metric_alarm_params())
            logger.info(f"Created alarm {alarm}.")
            return alarm
        except ClientError as e:
            logger.error(f"Failed to create alarm '{alarm.alarmName}': {e}")
            raise

    def describe_alarm(self, alarm_name: str) -> Optional[MetricAlarm]:
        """
        :return: The alarm, or None if no alarm has that name.
        """
        try:
            response = self.cloudwatch_client.describe_alarms(AlarmNames=[alarm_name])
        except ClientError as e:
            logger.error(f"Failed to describe alarm '{alarm_name}': {e}")
            raise

        alarms = response.get("MetricAlarms", [])
        if not alarms:
            return None
        return MetricAlarm.from_describe_alarms(alarms[0])

    def delete_alarms(self, alarm_names: List[str]) -> None:
        try:
            self.cloudwatch_client.delete_alarms(AlarmNames=alarm_names)
            logger.info(f"Deleted alarms {alarm_names}.")
        except ClientError as e:
            logger.error(f"Failed to delete alarms {alarm_names}: {e}")
            raise

    def release(self, resource: StackResource) -> None:
        if resource.resourceType != ResourceType.METRIC_ALARM:
            raise ValueError(f"{self.__class__.__name__} cannot release {resource}")
        self.delete_alarms([resource.resourceId])
