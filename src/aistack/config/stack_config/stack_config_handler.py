import json
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from aistack.aws.exceptions.aws_exceptions import AWSConfigurationError
from aistack.config.stack_config.stack_config_model import StackConfig
from aistack.helpers.logger import setup_logging
from aistack.helpers.utils import deep_merge

logger = setup_logging()

CONFIG_PATH_ENV = "AISTACK_CONFIG_PATH"
REGION_ENV = "AISTACK_REGION"


class StackConfigManager:
    """
    Singleton class to manage the stack configuration.

    Loads configuration from an optional JSON file, applies environment and caller
    overrides, and validates the result against the StackConfig schema.
    Precedence, lowest first: schema defaults, JSON file, AISTACK_REGION, overrides, region argument.
    """
    _instance = None
    _config: StackConfig = None
    _source: Optional[str] = None

    def __new__(cls, config_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None,
                region: Optional[str] = None):
        if cls._instance is None:
            instance = super(StackConfigManager, cls).__new__(cls)
            instance._load_config(config_file, overrides, region)
            cls._instance = instance
        return cls._instance

    def _load_config(self, config_file: Optional[str], overrides: Optional[Dict[str, Any]],
                     region: Optional[str]) -> None:
        """
        Build the configuration from file, environment and overrides.

        :param config_file: Path to a JSON configuration file. Falls back to AISTACK_CONFIG_PATH.
        :param overrides: Nested dictionary merged over the file contents.
        :param region: Region that wins over every other source.
        :raises FileNotFoundError: If a configuration file was named but does not exist.
        :raises ValueError: If the file is not valid JSON.
        :raises AWSConfigurationError: If the merged configuration fails validation.
        """
        config_file = config_file or os.environ.get(CONFIG_PATH_ENV)
        config_data: Dict[str, Any] = {}

        if config_file:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file not found: {config_file}")
            try:
                with open(config_file, "r") as f:
                    config_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in configuration file {config_file}. Error: {str(e)}")
            if not isinstance(config_data, dict):
                raise ValueError(f"Configuration file {config_file} must contain a JSON object")

        env_region = os.environ.get(REGION_ENV)
        if env_region:
            config_data = deep_merge(config_data, {"aws": {"region": env_region}})

        if overrides:
            config_data = deep_merge(config_data, overrides)

        if region:
            config_data = deep_merge(config_data, {"aws": {"region": region}})

        try:
            self._config = StackConfig.model_validate(config_data)
        except ValidationError as e:
            raise AWSConfigurationError(f"Invalid stack configuration: {e}") from e

        self._source = config_file
        if config_file:
            logger.info(f"Configuration loaded successfully from {config_file}")
        else:
            logger.info("No configuration file given, using defaults")

    @classmethod
    def load(cls, config_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None,
             region: Optional[str] = None) -> StackConfig:
        """
        Discard any loaded configuration and load it again from the given sources.

        :return: The StackConfig object.
        """
        cls._instance = None
        return cls(config_file, overrides, region)._config

    @classmethod
    def get_source(cls) -> Optional[str]:
        """Path of the file the configuration came from, if any."""
        if cls._instance is None:
            return None
        return cls._instance._source

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration."""
        cls._instance = None

    def __str__(self) -> str:
        return f"StackConfigManager(config={self._config})"

    def __repr__(self) -> str:
        return self.__str__()
