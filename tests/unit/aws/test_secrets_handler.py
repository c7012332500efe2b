"""Tests for the Secrets Manager handler."""

from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.secrets.secrets_handler import SecretsHandler


@pytest.mark.aws
class TestSecretsHandler:
    """Secret calls against moto."""

    def test_create_secret_returns_arn(self, aws_mocks, secrets_client):
        handler = SecretsHandler("us-east-1")

        secret = handler.create_secret("ai-secret", description="Stack secret", secret_string="s3cr3t", tags={"RunId": "run-1"})

        assert secret.name == "ai-secret"
        assert secret.arn.startswith("arn:aws:secretsmanager:us-east-1:")
        assert secrets_client.get_secret_value(SecretId="ai-secret")["SecretString"] == "s3cr3t"

    def test_delete_schedules_secret_for_deletion(self, aws_mocks, secrets_client):
        handler = SecretsHandler("us-east-1")
        handler.create_secret("ai-secret")

        handler.release(StackResource(ResourceType.SECRET, "ai-secret"))

        assert "DeletedDate" in secrets_client.describe_secret(SecretId="ai-secret")

    def test_duplicate_secret_reraises_client_error(self, aws_mocks):
        handler = SecretsHandler("us-east-1")
        handler.create_secret("ai-secret")

        with pytest.raises(ClientError):
            handler.create_secret("ai-secret")


@pytest.mark.unit
class TestSecretDeletionPolicy:
    """The delete request follows the configured recovery policy."""

    def _handler(self, **kwargs):
        handler = SecretsHandler("us-east-1", **kwargs)
        handler.secrets_client = Mock()
        handler.secrets_client.delete_secret.return_value = {"Name": "ai-secret"}
        return handler

    def test_service_default_window(self):
        handler = self._handler()

        handler.delete_secret("ai-secret")

        handler.secrets_client.delete_secret.assert_called_once_with(SecretId="ai-secret")

    def test_explicit_recovery_window(self):
        handler = self._handler(recovery_window_days=7)

        handler.delete_secret("ai-secret")

        handler.secrets_client.delete_secret.assert_called_once_with(SecretId="ai-secret", RecoveryWindowInDays=7)

    def test_force_delete_wins_over_window(self):
        handler = self._handler(recovery_window_days=7, force_delete_without_recovery=True)

        handler.delete_secret("ai-secret")

        handler.secrets_client.delete_secret.assert_called_once_with(
            SecretId="ai-secret", ForceDeleteWithoutRecovery=True
        )
