from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from aistack.aws.base.aws_handler_interface import BaseAWSHandler
from aistack.aws.base.aws_resource import ResourceType, StackResource
from aistack.aws.secrets.secrets_model import Secret
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import dict_to_tags

logger = setup_logging()


class SecretsHandler(BaseAWSHandler):
    """
    Handler for Secrets Manager secrets.

    Deletion honours the recovery policy given at construction: an explicit recovery window,
    immediate deletion, or the service default window when neither is set.
    """

    resource_types = (ResourceType.SECRET,)

    def __init__(
        self,
        region_name: str,
        recovery_window_days: Optional[int] = None,
        force_delete_without_recovery: bool = False,
        **kwargs,
    ):
        super().__init__(region_name, **kwargs)
        self.secrets_client = self._create_client("secretsmanager")
        self.recovery_window_days = recovery_window_days
        self.force_delete_without_recovery = force_delete_without_recovery

    def create_secret(
        self,
        name: str,
        description: Optional[str] = None,
        secret_string: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None,
    ) -> Secret:
        """
        Create a secret, with an initial value when one is given.

        :param name: Secret name.
        :param description: Optional description.
        :param secret_string: Optional initial value.
        :param tags: Tags to apply.
        :return: The created secret.
        """
        kwargs: Dict[str, Any] = {"Name": name}
        if description:
            kwargs["Description"] = description
        if secret_string is not None:
            kwargs["SecretString"] = secret_string
        if tags:
            kwargs["Tags"] = dict_to_tags(tags)

        try:
            response = self.secrets_client.create_secret(**kwargs)
            secret = Secret.from_create_secret(response)
            logger.info(f"Created secret '{name}'.")
            return secret
        except ClientError as e:
            logger.error(f"Failed to create secret '{name}': {e}")
            raise

    def delete_secret(self, name: str) -> None:
        kwargs: Dict[str, Any] = {"SecretId": name}
        if self.force_delete_without_recovery:
            kwargs["ForceDeleteWithoutRecovery"] = True
        elif self.recovery_window_days is not None:
            kwargs["RecoveryWindowInDays"] = self.recovery_window_days

        try:
            response = self.secrets_client.delete_secret(**kwargs)
            logger.info(f"Deleted secret '{name}', recoverable until {response.get('DeletionDate')}.")
        except ClientError as e:
            logger.error(f"Failed to delete secret '{name}': {e}")
            raise

    def release(self, resource: StackResource) -> None:
        if resource.resourceType != ResourceType.SECRET:
            raise ValueError(f"{self.__class__.__name__} cannot release {resource}")
        self.delete_secret(resource.resourceId)
