"""Configuration loader and models."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .exceptions import ConfigError, ConfigFileNotFoundError, ConfigValidationError


class ProviderConfig(BaseModel):
    """Base provider configuration."""
    type: str
    enabled: bool = True
    config: Dict[str, Any] = Field(default_factory=dict)


class DispatcherConfig(ProviderConfig):
    """Notification dispatcher configuration."""
    type: str = "http"


class ClientConfig(BaseModel):
    """HTTP client settings."""
    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 5.0
    user_agent: str = "Sendivent-Python/1.0"
    base_url: Optional[str] = None  # derived from the API key prefix when unset


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


class Config(BaseModel):
    """Main SDK configuration."""

    # Environment
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # Credentials (loaded from environment)
    api_key: Optional[str] = None

    # Services
    client: ClientConfig = Field(default_factory=ClientConfig)
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoader:
    """Configuration loader that handles layered configuration from multiple sources.

    Configuration loading priority (highest to lowest):
    1. CLI arguments (handled externally)
    2. Environment variables (.env file or system env)
    3. Local config file (config.local.yaml - user-specific, gitignored)
    4. Project config file (config.yaml - defaults, committed to Git)
    5. Built-in defaults (hardcoded in code)
    """

    ENV_MAPPINGS = {
        'ENVIRONMENT': 'environment',
        'DEBUG': 'debug',
        'SENDIVENT_API_KEY': 'api_key',
        'SENDIVENT_BASE_URL': 'client.base_url',
        'SENDIVENT_TIMEOUT_SECONDS': 'client.timeout_seconds',
        'SENDIVENT_CONNECT_TIMEOUT_SECONDS': 'client.connect_timeout_seconds',
        'SENDIVENT_USER_AGENT': 'client.user_agent',
        'LOG_LEVEL': 'logging.level',
        'LOG_FILE_PATH': 'logging.file_path',
    }

    def __init__(self, config_file: Optional[str] = None, env_file: Optional[str] = None,
                 local_config_file: Optional[str] = "config.local.yaml", load_env_file: bool = True,
                 use_env_vars: bool = True):
        """
        Initialize config loader.

        Args:
            config_file: Path to main YAML config file (defaults)
            env_file: Path to .env file
            local_config_file: Path to local override config file (None to disable local config)
            load_env_file: Whether to automatically load .env file
            use_env_vars: Whether to use environment variables for overrides
        """
        self.config_file = config_file or "config.yaml"
        self.local_config_file = local_config_file
        self.env_file = env_file or ".env"
        self.load_env_file = load_env_file
        self.use_env_vars = use_env_vars

    def load(self) -> Config:
        """
        Load configuration from multiple sources with proper precedence.

        Returns:
            Validated Config object

        Raises:
            ConfigError: If configuration loading fails
        """
        try:
            if self.load_env_file and Path(self.env_file).exists():
                load_dotenv(self.env_file)

            config_data = self._load_layered_yaml_config()

            if self.use_env_vars:
                config_data = self._override_with_env(config_data)

            config = Config(**config_data)
            self._validate_config(config)

            return config

        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

    def _load_layered_yaml_config(self) -> Dict[str, Any]:
        """Load configuration from the base and local YAML files."""
        config_data = {}

        base_config = self._load_single_yaml_config(self.config_file)
        if base_config:
            config_data.update(base_config)

        if self.local_config_file:
            local_config = self._load_single_yaml_config(self.local_config_file)
            if local_config:
                config_data = self._deep_merge_configs(config_data, local_config)

        return config_data

    def _load_single_yaml_config(self, config_file: str) -> Dict[str, Any]:
        """Load configuration from a single YAML file."""
        config_path = Path(config_file)

        if not config_path.exists():
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in config file '{config_file}': {e}") from e
        except OSError as e:
            raise ConfigFileNotFoundError(f"Cannot read config file '{config_file}': {e}") from e

    def _deep_merge_configs(self, base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries, override wins."""
        result = copy.deepcopy(base_config)

        for key, value in override_config.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _override_with_env(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Override configuration with environment variables."""
        for env_var, config_path in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            keys = config_path.split('.')
            current = config_data
            for key in keys[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            current[keys[-1]] = self._convert_env_value(env_value, keys[-1])

        return config_data

    def _convert_env_value(self, value: str, key: str) -> Any:
        """Convert environment variable value to appropriate type."""
        if key in ['debug'] or value.lower() in ['true', 'false']:
            return value.lower() == 'true'

        if key in ['timeout_seconds', 'connect_timeout_seconds']:
            try:
                return float(value)
            except ValueError:
                return value

        return value

    def _validate_config(self, config: Config) -> None:
        """Perform additional configuration validation."""
        if config.dispatcher.enabled and config.dispatcher.type.lower() == "http":
            if not config.api_key:
                raise ConfigValidationError(
                    "Sendivent API key is required when the HTTP dispatcher is enabled. "
                    "Set SENDIVENT_API_KEY or provide api_key in configuration."
                )

            # Deferred: core.entities imports config.exceptions
            from ..core.entities import ApiKey
            ApiKey(config.api_key)

        if config.client.timeout_seconds <= 0 or config.client.connect_timeout_seconds <= 0:
            raise ConfigValidationError("Client timeouts must be positive")
