import logging
import os
import sys
from typing import Optional

import structlog
from dynaconf import Dynaconf

from aistack.helpers.utils import ensure_directory_exists

# Load configuration
settings = Dynaconf(
    settings_files=["aistack_settings.json"],
    envvar_prefix="AISTACK",
    environments=True,
    env_switcher="AISTACK_ENV",
    load_dotenv=True,
)

LOGGER_NAME = "aistack"

_configured = False


def _build_handlers(log_dir: str, log_filename: str, log_destination: str) -> list:
    handlers = []
    if log_destination in ("file", "both"):
        ensure_directory_exists(log_dir)
        file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
        )
        handlers.append(file_handler)

    if log_destination in ("console", "both"):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=structlog.dev.ConsoleRenderer(colors=False))
        )
        handlers.append(stream_handler)

    return handlers


def setup_logging(
    log_dir: Optional[str] = None,
    log_filename: Optional[str] = None,
    log_level: Optional[str] = None,
    log_destination: Optional[str] = None,
    force: bool = False,
):
    """
    Set up structured logging for the application using structlog.

    The first call configures structlog and the stdlib root logger; later calls
    only hand back the logger unless ``force`` is set.

    :param log_dir: Directory where the log file will be stored.
    :param log_filename: Name of the log file.
    :param log_level: Logging level (e.g., DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :param log_destination: Where to send logs ("file", "console", or "both").
    :param force: Reconfigure even if logging was already set up.
    :return: Configured structlog logger instance.
    """
    global _configured

    if _configured and not force:
        return structlog.get_logger(LOGGER_NAME)

    # Use configuration values, with fallbacks to environment variables and defaults
    log_dir = log_dir or settings.get("LOG_DIR", os.environ.get("AISTACK_LOGDIR", "./logs"))
    log_filename = log_filename or settings.get("LOG_FILENAME", f"{LOGGER_NAME}.log")
    log_level = log_level or settings.get("LOG_LEVEL", "INFO")
    log_destination = log_destination or settings.get("LOG_DESTINATION", "console")

    if log_destination not in ("file", "console", "both"):
        raise ValueError(f"Unsupported log destination: {log_destination}")

    handlers = _build_handlers(log_dir, log_filename, log_destination)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configured = True
    return structlog.get_logger(LOGGER_NAME)


# Initialize a global logger instance
logger = setup_logging()
