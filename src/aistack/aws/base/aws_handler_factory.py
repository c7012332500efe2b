from typing import Any, Dict

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ProfileNotFound

from aistack.aws.base.aws_handler import StackHandler
from aistack.aws.cloudwatch.cloudwatch_handler import CloudWatchHandler
from aistack.aws.exceptions.aws_exceptions import AWSConfigurationError
from aistack.aws.s3.s3_handler import S3Handler
from aistack.aws.secrets.secrets_handler import SecretsHandler
from aistack.aws.vpc.vpc_handler import VpcHandler
from aistack.aws.vpc_endpoint.vpc_endpoint_handler import VpcEndpointHandler
from aistack.config.stack_config.stack_config_model import AwsConfig, StackConfig
from aistack.helpers.logger import setup_logging

logger = setup_logging()


class AWSHandlerFactory:
    """
    Factory class to build the boto3 session and the service-specific handlers from configuration.
    """

    @staticmethod
    def create_boto_config(aws_config: AwsConfig) -> Config:
        """
        Build the botocore client configuration: region, retry policy and timeouts.
        """
        return Config(
            region_name=aws_config.region,
            retries={
                "max_attempts": aws_config.max_attempts,
                "mode": aws_config.retry_mode,
            },
            connect_timeout=aws_config.connect_timeout,
            read_timeout=aws_config.read_timeout,
        )

    @staticmethod
    def create_session(aws_config: AwsConfig, dry_run: bool = False) -> boto3.session.Session:
        """
        Create the boto3 session every client of the run is built from.

        :param aws_config: The ``aws`` section of the stack configuration.
        :param dry_run: Ignore the configured profile; moto supplies credentials.
        :raises AWSConfigurationError: If the session cannot be created (e.g. unknown profile).
        """
        profile_name = None if dry_run else aws_config.profile
        try:
            session = boto3.session.Session(region_name=aws_config.region, profile_name=profile_name)
        except ProfileNotFound as e:
            raise AWSConfigurationError(f"AWS profile '{profile_name}' not found") from e
        except BotoCoreError as e:
            raise AWSConfigurationError(f"AWS session initialization failed: {e}") from e

        logger.info(
            f"AWS session initialized with region: {aws_config.region}, profile: {profile_name or 'default'}, "
            f"retries: {aws_config.max_attempts} ({aws_config.retry_mode}), "
            f"timeouts: connect={aws_config.connect_timeout}s, read={aws_config.read_timeout}s"
        )
        return session

    @staticmethod
    def create_stack_handler(config: StackConfig, dry_run: bool = False) -> StackHandler:
        """
        Create a StackHandler with one handler per AWS service, all bound to the configured region.

        :param config: The validated stack configuration.
        :param dry_run: Build clients for moto's backend (no profile, no endpoint override).
        :return: A ready StackHandler.
        """
        aws_config = config.aws
        session = AWSHandlerFactory.create_session(aws_config, dry_run=dry_run)
        client_kwargs: Dict[str, Any] = {
            "session": session,
            "boto_config": AWSHandlerFactory.create_boto_config(aws_config),
            "endpoint_url": None if dry_run else aws_config.endpoint_url,
        }
        region = aws_config.region

        return StackHandler(
            config=config,
            vpc_handler=VpcHandler(region, **client_kwargs),
            endpoint_handler=VpcEndpointHandler(region, **client_kwargs),
            s3_handler=S3Handler(region, **client_kwargs),
            secrets_handler=SecretsHandler(
                region,
                recovery_window_days=config.secret.recovery_window_days,
                force_delete_without_recovery=config.secret.force_delete_without_recovery,
                **client_kwargs,
            ),
            cloudwatch_handler=CloudWatchHandler(region, **client_kwargs),
        )
