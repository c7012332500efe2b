"""Tests for stack configuration loading and validation."""

import json

import pytest
from pydantic import ValidationError

from aistack.aws.exceptions.aws_exceptions import AWSConfigurationError
from aistack.config.stack_config.stack_config_handler import StackConfigManager
from aistack.config.stack_config.stack_config_model import (
    AlarmConfig,
    EndpointConfig,
    NetworkConfig,
    SecretConfig,
    StackConfig,
    StorageConfig,
)


@pytest.fixture
def config_file(tmp_path):
    def _write(data):
        path = tmp_path / "stack.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return str(path)

    return _write


@pytest.mark.unit
class TestStackConfigDefaults:
    def test_defaults(self):
        config = StackConfig()

        assert config.stack_name == "ai-stack"
        assert config.aws.region == "us-east-1"
        assert config.aws.max_attempts == 3
        assert config.network.cidr_block == "10.0.0.0/16"
        assert config.storage.bucket_name == "ai-data"
        assert config.endpoint.endpoint_type == "Gateway"
        assert config.endpoint.connection_notification_arn is None
        assert config.secret.name == "ai-secret"
        assert config.alarm.alarm_name == "ai-alarm"
        assert config.alarm.period == 60
        assert config.teardown.full is False

    def test_service_name_follows_region(self):
        assert EndpointConfig().resolve_service_name("eu-west-1") == "com.amazonaws.eu-west-1.s3"
        assert EndpointConfig(service_name="com.example.svc").resolve_service_name("eu-west-1") == "com.example.svc"


@pytest.mark.unit
class TestStackConfigValidation:
    @pytest.mark.parametrize("cidr", ["10.0.0.0/8", "10.0.0.0/29", "10.0.0.1/16", "not-a-cidr"])
    def test_invalid_cidr(self, cidr):
        with pytest.raises(ValidationError):
            NetworkConfig(cidr_block=cidr)

    @pytest.mark.parametrize("name", ["AI-Data", "a", "ai..data", "-ai-data"])
    def test_invalid_bucket_name(self, name):
        with pytest.raises(ValidationError):
            StorageConfig(bucket_name=name)

    def test_notification_arn_must_be_sns(self):
        with pytest.raises(ValidationError):
            EndpointConfig(connection_notification_arn="arn:aws:sqs:us-east-1:123456789012:queue")

    def test_unknown_endpoint_type(self):
        with pytest.raises(ValidationError):
            EndpointConfig(endpoint_type="GatewayLoadBalancer")

    def test_recovery_window_bounds(self):
        assert SecretConfig(recovery_window_days=7).recovery_window_days == 7
        with pytest.raises(ValidationError):
            SecretConfig(recovery_window_days=3)

    def test_recovery_window_conflicts_with_force_delete(self):
        with pytest.raises(ValidationError):
            SecretConfig(recovery_window_days=10, force_delete_without_recovery=True)

    @pytest.mark.parametrize("period", [10, 30, 120])
    def test_valid_alarm_periods(self, period):
        assert AlarmConfig(period=period).period == period

    @pytest.mark.parametrize("field,value", [("period", 45), ("statistic", "Median"), ("comparison_operator", "Equal")])
    def test_invalid_alarm_settings(self, field, value):
        with pytest.raises(ValidationError):
            AlarmConfig(**{field: value})

    def test_invalid_retry_mode(self):
        with pytest.raises(ValidationError):
            StackConfig.model_validate({"aws": {"retry_mode": "eager"}})


@pytest.mark.unit
class TestStackConfigManager:
    def test_defaults_without_file(self):
        config = StackConfigManager.load()

        assert config == StackConfig()
        assert StackConfigManager.get_source() is None

    def test_file_values_are_loaded(self, config_file):
        path = config_file({"stack_name": "research", "storage": {"bucket_name": "research-data"}})

        config = StackConfigManager.load(config_file=path)

        assert config.stack_name == "research"
        assert config.storage.bucket_name == "research-data"
        assert config.secret.name == "ai-secret"
        assert StackConfigManager.get_source() == path

    def test_config_path_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("AISTACK_CONFIG_PATH", config_file({"stack_name": "from-env"}))

        assert StackConfigManager.load().stack_name == "from-env"

    def test_region_precedence(self, config_file, monkeypatch):
        path = config_file({"aws": {"region": "us-west-2"}})
        assert StackConfigManager.load(config_file=path).aws.region == "us-west-2"

        monkeypatch.setenv("AISTACK_REGION", "eu-central-1")
        assert StackConfigManager.load(config_file=path).aws.region == "eu-central-1"

        overrides = {"aws": {"region": "ap-south-1"}}
        assert StackConfigManager.load(config_file=path, overrides=overrides).aws.region == "ap-south-1"

        assert StackConfigManager.load(config_file=path, overrides=overrides, region="eu-west-1").aws.region == "eu-west-1"

    def test_overrides_merge_into_nested_sections(self, config_file):
        path = config_file({"alarm": {"threshold": 50, "period": 300}})

        config = StackConfigManager.load(config_file=path, overrides={"alarm": {"threshold": 95}})

        assert config.alarm.threshold == 95
        assert config.alarm.period == 300

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StackConfigManager.load(config_file=str(tmp_path / "missing.json"))

    def test_malformed_json(self, config_file):
        with pytest.raises(ValueError, match="Invalid JSON"):
            StackConfigManager.load(config_file=config_file("{not json"))

    def test_non_object_json(self, config_file):
        with pytest.raises(ValueError, match="JSON object"):
            StackConfigManager.load(config_file=config_file("[1, 2]"))

    def test_validation_error_is_configuration_error(self, config_file):
        with pytest.raises(AWSConfigurationError, match="Invalid stack configuration"):
            StackConfigManager.load(config_file=config_file({"network": {"cidr_block": "10.0.0.0/8"}}))

    def test_singleton_is_reused_until_reloaded(self):
        first = StackConfigManager()
        assert StackConfigManager(region="eu-west-1") is first
        assert first._config.aws.region == "us-east-1"

        StackConfigManager.load(region="eu-west-1")
        assert StackConfigManager() is not first
        assert StackConfigManager()._config.aws.region == "eu-west-1"

    def test_validation_error_keeps_its_cause(self):
        with pytest.raises(AWSConfigurationError) as exc_info:
            StackConfigManager.load(overrides={"alarm": {"period": 45}})

        assert isinstance(exc_info.value.__cause__, ValidationError)
