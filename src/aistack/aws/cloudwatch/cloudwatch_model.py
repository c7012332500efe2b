from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aistack.helpers.utils import dict_to_tags
from aistack.models.base_model import BaseModel


@dataclass
class MetricAlarm(BaseModel):
    alarmName: str
    metricName: str
    namespace: str
    statistic: str
    comparisonOperator: str
    threshold: float
    period: int
    evaluationPeriods: int
    dimensions: Dict[str, str] = field(default_factory=dict)
    alarmActions: List[str] = field(default_factory=list)
    stateValue: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    additionalProperties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_config(cls, alarm_config, tags: Optional[Dict[str, str]] = None) -> "MetricAlarm":
        """
        Build an alarm from an AlarmConfig section.

        :param alarm_config: The ``alarm`` section of the stack configuration.
        :param tags: Tags to apply to the alarm.
        """
        return cls(
            alarmName=alarm_config.alarm_name,
            metricName=alarm_config.metric_name,
            namespace=alarm_config.namespace,
            statistic=alarm_config.statistic,
            comparisonOperator=alarm_config.comparison_operator,
            threshold=float(alarm_config.threshold),
            period=alarm_config.period,
            evaluationPeriods=alarm_config.evaluation_periods,
            dimensions=dict(alarm_config.dimensions),
            alarmActions=list(alarm_config.alarm_actions),
            tags=dict(tags or {}),
        )

    @classmethod
    def from_describe_alarms(cls, data: Dict[str, Any]) -> "MetricAlarm":
        return cls(
            alarmName=data["AlarmName"],
            metricName=data.get("MetricName", ""),
            namespace=data.get("Namespace", ""),
            statistic=data.get("Statistic", ""),
            comparisonOperator=data.get("ComparisonOperator", ""),
            threshold=float(data.get("Threshold", 0.0)),
            period=int(data.get("Period", 0)),
            evaluationPeriods=int(data.get("EvaluationPeriods", 0)),
            dimensions={d["Name"]: d["Value"] for d in data.get("Dimensions", [])},
            alarmActions=list(data.get("AlarmActions", [])),
            stateValue=data.get("StateValue"),
        )

    def to_put_metric_alarm_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "AlarmName": self.alarmName,
            "MetricName": self.metricName,
            "Namespace": self.namespace,
            "Statistic": self.statistic,
            "ComparisonOperator": self.comparisonOperator,
            "Threshold": self.threshold,
            "Period": self.period,
            "EvaluationPeriods": self.evaluationPeriods,
        }
        if self.dimensions:
            params["Dimensions"] = [{"Name": k, "Value": v} for k, v in self.dimensions.items()]
        if self.alarmActions:
            params["AlarmActions"] = self.alarmActions
        if self.tags:
            params["Tags"] = dict_to_tags(self.tags)
        return params

    def __str__(self) -> str:
        return (
            f"MetricAlarm(name={self.alarmName}, {self.namespace}/{self.metricName} "
            f"{self.statistic} {self.comparisonOperator} {self.threshold})"
        )
