"""Route every AWS call of a run to moto's in-process backend."""

from contextlib import contextmanager
from typing import Iterator

from aistack.aws.exceptions.aws_exceptions import AWSConfigurationError
from aistack.helpers.logger import setup_logging

logger = setup_logging()


@contextmanager
def aws_dry_run_context(enabled: bool = True) -> Iterator[None]:
    """
    Run the enclosed block against moto instead of AWS when ``enabled``.

    Sessions and clients must be created inside the block.
    """
    if not enabled:
        yield
        return

    try:
        from moto import mock_aws
    except ImportError as e:
        raise AWSConfigurationError("Dry run needs moto: pip install 'aistack[dry-run]'") from e

    logger.info("Dry run enabled: AWS calls are served by moto.")
    with mock_aws():
        yield
