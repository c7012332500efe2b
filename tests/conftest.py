"""Global test configuration and fixtures."""

import os
import sys
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aistack.aws.base.aws_handler_factory import AWSHandlerFactory  # noqa: E402
from aistack.config.stack_config.stack_config_handler import StackConfigManager  # noqa: E402
from aistack.config.stack_config.stack_config_model import StackConfig  # noqa: E402

REGION = "us-east-1"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ.update(
        {
            "AWS_DEFAULT_REGION": REGION,
            "AWS_ACCESS_KEY_ID": "testing",
            "AWS_SECRET_ACCESS_KEY": "testing",
            "AWS_SECURITY_TOKEN": "testing",
            "AWS_SESSION_TOKEN": "testing",
            "AISTACK_CONSOLE_ENABLED": "false",
        }
    )


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset the configuration singleton and configuration env vars around each test."""
    monkeypatch.delenv("AISTACK_CONFIG_PATH", raising=False)
    monkeypatch.delenv("AISTACK_REGION", raising=False)
    StackConfigManager.reset()
    yield
    StackConfigManager.reset()


@pytest.fixture
def aws_mocks():
    """Set up comprehensive AWS service mocks."""
    with mock_aws():
        yield


@pytest.fixture
def ec2_client(aws_mocks):
    """Create a mocked EC2 client."""
    return boto3.client("ec2", region_name=REGION)


@pytest.fixture
def s3_client(aws_mocks):
    """Create a mocked S3 client."""
    return boto3.client("s3", region_name=REGION)


@pytest.fixture
def secrets_client(aws_mocks):
    """Create a mocked Secrets Manager client."""
    return boto3.client("secretsmanager", region_name=REGION)


@pytest.fixture
def cloudwatch_client(aws_mocks):
    """Create a mocked CloudWatch client."""
    return boto3.client("cloudwatch", region_name=REGION)


@pytest.fixture
def stack_config() -> StackConfig:
    """Default stack configuration."""
    return StackConfig()


@pytest.fixture
def stack_handler(aws_mocks, stack_config):
    """StackHandler wired to moto-backed clients."""
    return AWSHandlerFactory.create_stack_handler(stack_config)
