from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.config import Config

from aistack.aws.base.aws_resource import ResourceType, StackResource


class BaseAWSHandler(ABC):
    """
    Abstract base class for AWS service-specific handlers.
    Defines the common interface and shared functionality for all AWS handlers.
    """

    # Resource types this handler knows how to release
    resource_types: Tuple[ResourceType, ...] = ()

    def __init__(
        self,
        region_name: str,
        session: Optional[boto3.session.Session] = None,
        boto_config: Optional[Config] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        :param region_name: The AWS region every client of this handler is bound to.
        :param session: boto3 session to build clients from; a new one when omitted.
        :param boto_config: botocore client configuration (retries, timeouts).
        :param endpoint_url: Endpoint override for the service.
        """
        self.region_name = region_name
        self.session = session or boto3.session.Session(region_name=region_name)
        self._boto_config = boto_config
        self._endpoint_url = endpoint_url

    def _create_client(self, service_name: str) -> Any:
        kwargs: Dict[str, Any] = {"region_name": self.region_name}
        if self._boto_config is not None:
            kwargs["config"] = self._boto_config
        if self._endpoint_url:
            kwargs["endpoint_url"] = self._endpoint_url
        return self.session.client(service_name, **kwargs)

    def can_release(self, resource: StackResource) -> bool:
        return resource.resourceType in self.resource_types

    @abstractmethod
    def release(self, resource: StackResource) -> None:
        """
        Release a resource this handler created: delete it, or undo the association it represents.

        :param resource: The ledger entry to release.
        :raises botocore.exceptions.ClientError: If the release call fails.
        """
        pass
