"""Stack configuration schema."""

import ipaddress
import re
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

BUCKET_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")

COMPARISON_OPERATORS = (
    "GreaterThanOrEqualToThreshold",
    "GreaterThanThreshold",
    "LessThanThreshold",
    "LessThanOrEqualToThreshold",
)

STATISTICS = ("SampleCount", "Average", "Sum", "Minimum", "Maximum")


class AwsConfig(BaseModel):
    """AWS session and client configuration."""

    region: str = Field("us-east-1", description="Region every client is bound to")
    profile: Optional[str] = Field(None, description="Named profile from the shared credentials file")
    endpoint_url: Optional[str] = Field(None, description="Override endpoint for every client")
    max_attempts: int = Field(3, ge=1, le=10, description="botocore total call attempts")
    retry_mode: str = Field("standard", description="botocore retry mode")
    connect_timeout: int = Field(5, gt=0, description="Connect timeout in seconds")
    read_timeout: int = Field(10, gt=0, description="Read timeout in seconds")

    @field_validator("retry_mode")
    @classmethod
    def _check_retry_mode(cls, value: str) -> str:
        if value not in ("legacy", "standard", "adaptive"):
            raise ValueError(f"retry_mode must be legacy, standard or adaptive, got '{value}'")
        return value


class NetworkConfig(BaseModel):
    """Virtual network settings."""

    cidr_block: str = Field("10.0.0.0/16", description="IPv4 CIDR block of the VPC")

    @field_validator("cidr_block")
    @classmethod
    def _check_cidr(cls, value: str) -> str:
        try:
            network = ipaddress.IPv4Network(value, strict=True)
        except ValueError as e:
            raise ValueError(f"cidr_block '{value}' is not a valid IPv4 network: {e}")
        if not (16 <= network.prefixlen <= 28):
            raise ValueError(f"cidr_block prefix must be between /16 and /28, got /{network.prefixlen}")
        return value


class StorageConfig(BaseModel):
    """Object storage settings."""

    bucket_name: str = Field("ai-data", description="Name of the S3 bucket to create")

    @field_validator("bucket_name")
    @classmethod
    def _check_bucket_name(cls, value: str) -> str:
        if not BUCKET_NAME_PATTERN.match(value) or ".." in value:
            raise ValueError(f"'{value}' is not a valid S3 bucket name")
        return value


class EndpointConfig(BaseModel):
    """S3 VPC endpoint settings."""

    service_name: Optional[str] = Field(
        None, description="Endpoint service; defaults to com.amazonaws.<region>.s3"
    )
    endpoint_type: str = Field("Gateway", description="Gateway or Interface")
    connection_notification_arn: Optional[str] = Field(
        None, description="SNS topic notified of endpoint connection events; step skipped when unset"
    )
    connection_events: List[str] = Field(
        default_factory=lambda: ["Accept"], description="Connection events to notify on"
    )

    @field_validator("endpoint_type")
    @classmethod
    def _check_endpoint_type(cls, value: str) -> str:
        if value not in ("Gateway", "Interface"):
            raise ValueError(f"endpoint_type must be Gateway or Interface, got '{value}'")
        return value

    @field_validator("connection_notification_arn")
    @classmethod
    def _check_topic_arn(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith("arn:aws:sns:"):
            raise ValueError(f"connection_notification_arn must be an SNS topic ARN, got '{value}'")
        return value

    def resolve_service_name(self, region: str) -> str:
        return self.service_name or f"com.amazonaws.{region}.s3"


class SecretConfig(BaseModel):
    """Secrets Manager settings."""

    name: str = Field("ai-secret", min_length=1, max_length=512, description="Secret name")
    description: Optional[str] = Field(None, description="Secret description")
    secret_string: Optional[str] = Field(None, description="Initial secret value; none when unset")
    recovery_window_days: Optional[int] = Field(
        None, description="Days the deleted secret stays recoverable; service default (30) when unset"
    )
    force_delete_without_recovery: bool = Field(
        False, description="Delete immediately, skipping the recovery window"
    )

    @model_validator(mode="after")
    def _check_deletion_mode(self) -> "SecretConfig":
        if self.force_delete_without_recovery and self.recovery_window_days is not None:
            raise ValueError("recovery_window_days cannot be combined with force_delete_without_recovery")
        if self.recovery_window_days is not None and not (7 <= self.recovery_window_days <= 30):
            raise ValueError("recovery_window_days must be between 7 and 30")
        return self


class AlarmConfig(BaseModel):
    """CloudWatch metric alarm settings."""

    alarm_name: str = Field("ai-alarm", min_length=1, max_length=255, description="Alarm name")
    metric_name: str = Field("CPUUtilization", description="Metric the alarm watches")
    namespace: str = Field("AWS/EC2", description="Metric namespace")
    statistic: str = Field("Average", description="Statistic applied to the metric")
    comparison_operator: str = Field("GreaterThanOrEqualToThreshold", description="Threshold comparison")
    threshold: float = Field(80.0, description="Threshold value")
    period: int = Field(60, gt=0, description="Evaluation period in seconds")
    evaluation_periods: int = Field(1, gt=0, description="Periods over which to evaluate")
    dimensions: Dict[str, str] = Field(default_factory=dict, description="Metric dimensions")
    alarm_actions: List[str] = Field(default_factory=list, description="ARNs notified on ALARM")

    @field_validator("statistic")
    @classmethod
    def _check_statistic(cls, value: str) -> str:
        if value not in STATISTICS:
            raise ValueError(f"statistic must be one of {', '.join(STATISTICS)}")
        return value

    @field_validator("comparison_operator")
    @classmethod
    def _check_operator(cls, value: str) -> str:
        if value not in COMPARISON_OPERATORS:
            raise ValueError(f"comparison_operator must be one of {', '.join(COMPARISON_OPERATORS)}")
        return value

    @field_validator("period")
    @classmethod
    def _check_period(cls, value: int) -> int:
        # CloudWatch accepts 10, 20, 30 and any multiple of 60
        if value not in (10, 20, 30) and value % 60 != 0:
            raise ValueError("period must be 10, 20, 30 or a multiple of 60")
        return value


class TeardownConfig(BaseModel):
    """What the final teardown pass releases."""

    full: bool = Field(
        False, description="Also release the endpoint, notification, VPC and bucket after step 11"
    )


class StackConfig(BaseModel):
    """Complete configuration of a stack run."""

    stack_name: str = Field("ai-stack", min_length=1, description="Tag value identifying the stack")
    tags: Dict[str, str] = Field(default_factory=dict, description="Extra tags for every resource")
    aws: AwsConfig = Field(default_factory=AwsConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    secret: SecretConfig = Field(default_factory=SecretConfig)
    alarm: AlarmConfig = Field(default_factory=AlarmConfig)
    teardown: TeardownConfig = Field(default_factory=TeardownConfig)
