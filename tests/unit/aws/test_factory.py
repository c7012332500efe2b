"""Tests for building sessions and handlers from configuration."""

import pytest

from aistack.aws.base.aws_handler_factory import AWSHandlerFactory
from aistack.aws.exceptions.aws_exceptions import AWSConfigurationError
from aistack.config.stack_config.stack_config_model import AwsConfig, StackConfig


@pytest.mark.unit
class TestAWSHandlerFactory:
    def test_boto_config_carries_retries_and_timeouts(self):
        config = AWSHandlerFactory.create_boto_config(
            AwsConfig(region="eu-west-1", max_attempts=5, retry_mode="adaptive", connect_timeout=2, read_timeout=30)
        )

        assert config.region_name == "eu-west-1"
        assert config.retries == {"max_attempts": 5, "mode": "adaptive"}
        assert config.connect_timeout == 2
        assert config.read_timeout == 30

    def test_unknown_profile_is_a_configuration_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
        monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))

        with pytest.raises(AWSConfigurationError, match="no-such-profile"):
            AWSHandlerFactory.create_session(AwsConfig(profile="no-such-profile"))

    def test_dry_run_ignores_profile(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
        monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))

        session = AWSHandlerFactory.create_session(AwsConfig(profile="no-such-profile"), dry_run=True)

        assert session.region_name == "us-east-1"

    def test_handlers_share_region_and_endpoint(self, aws_mocks):
        config = StackConfig.model_validate({"aws": {"region": "eu-west-1", "endpoint_url": "http://localhost:4566"}})

        handler = AWSHandlerFactory.create_stack_handler(config)

        for service_handler in handler.handlers:
            assert service_handler.region_name == "eu-west-1"
        assert handler.vpc_handler.ec2_client.meta.endpoint_url == "http://localhost:4566"
        assert handler.s3_handler.s3_client.meta.region_name == "eu-west-1"

    def test_dry_run_drops_endpoint_override(self, aws_mocks):
        config = StackConfig.model_validate({"aws": {"endpoint_url": "http://localhost:4566"}})

        handler = AWSHandlerFactory.create_stack_handler(config, dry_run=True)

        assert handler.vpc_handler.ec2_client.meta.endpoint_url != "http://localhost:4566"

    def test_secret_recovery_settings_are_passed_through(self, aws_mocks):
        config = StackConfig.model_validate({"secret": {"recovery_window_days": 7}})

        handler = AWSHandlerFactory.create_stack_handler(config)

        assert handler.secrets_handler.recovery_window_days == 7
        assert handler.secrets_handler.force_delete_without_recovery is False
