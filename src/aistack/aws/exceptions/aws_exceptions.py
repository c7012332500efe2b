"""Exceptions raised by the AWS layer of the stack runner."""

from typing import Any, Dict, List, Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)

from aistack.helpers.utils import get_error_code

AUTHORIZATION_ERROR_CODES = {
    "UnauthorizedOperation",
    "AccessDenied",
    "AccessDeniedException",
    "AuthFailure",
    "InvalidClientTokenId",
    "ExpiredToken",
    "ExpiredTokenException",
    "SignatureDoesNotMatch",
}

NETWORK_ERROR_CODES = {
    "RequestTimeout",
    "RequestTimeoutException",
    "RequestLimitExceeded",
    "Throttling",
    "ThrottlingException",
    "ServiceUnavailable",
    "SlowDown",
}


class AWSError(Exception):
    """Base class for AWS-layer errors."""

    category = "aws"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code


class AWSConfigurationError(AWSError):
    """Invalid configuration, or a client that could not be set up from it."""

    category = "configuration"


class AuthorizationError(AWSError):
    """Credentials are missing, expired, or not allowed to perform the call."""

    category = "authorization"


class NetworkError(AWSError):
    """The call timed out or was throttled by the service."""

    category = "network"


class ResourceConflictError(AWSError):
    """A resource with the configured name already exists and was not created by this run."""

    category = "conflict"


def classify_client_error(error: ClientError) -> type:
    """
    Map a botocore ClientError onto the exception class that describes it.

    :param error: The ClientError raised by a boto3 call.
    :return: AuthorizationError, NetworkError, or AWSError.
    """
    error_code = get_error_code(error)
    if error_code in AUTHORIZATION_ERROR_CODES:
        return AuthorizationError
    if error_code in NETWORK_ERROR_CODES:
        return NetworkError
    return AWSError


def classify_error(error: Exception) -> Optional[type]:
    """
    Map any error raised while talking to AWS onto an exception class.

    :param error: The raised exception.
    :return: The matching AWSError subclass, or None when the error did not come from AWS or botocore.
    """
    if isinstance(error, AWSError):
        return type(error)
    if isinstance(error, ClientError):
        return classify_client_error(error)
    if isinstance(error, NoCredentialsError):
        return AuthorizationError
    if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
        return NetworkError
    if isinstance(error, BotoCoreError):
        return AWSError
    return None


class StackProvisioningError(AWSError):
    """
    A stack step failed. Resources created before the failure have been released.

    :ivar step_number: Number of the failing step.
    :ivar step_name: Name of the failing step.
    :ivar cause_category: Category of the underlying error (see ``classify_error``).
    :ivar release_failures: Resources that could not be released, with the reason.
    :ivar run: The ProvisioningRun as it stood when the error was raised.
    """

    def __init__(
        self,
        message: str,
        step_number: int,
        step_name: str,
        cause_category: str = "aws",
        error_code: Optional[str] = None,
        release_failures: Optional[List[Dict[str, Any]]] = None,
        run: Any = None,
    ):
        super().__init__(message, error_code)
        self.step_number = step_number
        self.step_name = step_name
        self.cause_category = cause_category
        self.release_failures = release_failures or []
        self.run = run

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": str(self),
            "step": self.step_number,
            "stepName": self.step_name,
            "category": self.cause_category,
            "errorCode": self.error_code,
            "releaseFailures": self.release_failures,
        }
