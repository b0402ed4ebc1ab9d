"""Configuration manager for loading and validating .gdpr-client.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from gdpr_client.domain.config import ClientConfig, RetryPolicy, ServiceConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gdpr-client.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .gdpr-client.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .gdpr-client.yml file (searched from current directory upward)
    3. Environment variables (GDPR_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "service": {
            "base_url": None,
            "api_key": None,
            "timeout": 10.0,
            "environment": "Prod",
        },
        "retry": {
            "max_retries": 3,
            "initial_backoff": 0.1,
            "max_backoff": 10.0,
            "backoff_factor": 2.0,
            "jitter": 0.2,
            "total_timeout": None,
        },
    }

    # Environment variable -> (section, key)
    ENV_OVERRIDES = {
        "GDPR_SERVICE_URL": ("service", "base_url"),
        "GDPR_API_KEY": ("service", "api_key"),
        "GDPR_ENVIRONMENT": ("service", "environment"),
        "GDPR_MAX_RETRIES": ("retry", "max_retries"),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .gdpr-client.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: ClientConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find config file starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> ClientConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ConfigurationError: If the file cannot be parsed
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to load config from {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(config_dict)

        return ClientConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            # A bare "retry:" line parses as None; keep the defaults
            if value is None and isinstance(result.get(key), dict):
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply GDPR_* environment variable overrides"""
        for env_name, (section, key) in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                target = config.setdefault(section, {})
                if not isinstance(target, dict):
                    raise ConfigurationError(
                        f"Config section '{section}' must be a mapping to apply {env_name}"
                    )
                target[key] = value
        return config

    def get_service_config(self) -> ServiceConfig:
        """Get service endpoint configuration"""
        return self.config.service

    def get_retry_config(self) -> RetryPolicy:
        """Get retry policy

        Returns:
            Immutable retry policy
        """
        return self.config.retry

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "retry.max_retries" or "service")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
