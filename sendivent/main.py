"""Application wiring for CLI usage."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from .client import Sendivent
from .config import Config, ConfigError, ConfigLoader
from .factories import ServiceFactory


def setup_logging(config: Config) -> None:
    """Setup logging configuration."""
    log_format = config.logging.format
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    formatter = logging.Formatter(log_format)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.logging.file_path:
        file_path = Path(config.logging.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=config.logging.max_file_size_mb * 1024 * 1024,
            backupCount=config.logging.backup_count
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


class SendiventApp:
    """Loads configuration and builds the configured client."""

    def __init__(self, config_file: str = "config.yaml", env_file: str = ".env",
                 local_config_file: Optional[str] = "config.local.yaml"):
        """
        Initialize the application.

        Args:
            config_file: Path to configuration file
            env_file: Path to environment file
            local_config_file: Path to local override file (None to disable)
        """
        self.config_file = config_file
        self.env_file = env_file
        self.local_config_file = local_config_file
        self.config: Optional[Config] = None
        self.client: Optional[Sendivent] = None

        self.logger = logging.getLogger(__name__)

    def initialize(self, configure_logging: bool = True) -> None:
        """
        Load configuration, configure logging and create the client.

        Raises:
            ConfigError: If configuration is missing or invalid
        """
        try:
            self.logger.info("Loading configuration...")
            config_loader = ConfigLoader(self.config_file, self.env_file, self.local_config_file)
            self.config = config_loader.load()

            if configure_logging:
                setup_logging(self.config)
            self.logger.info(f"Application initialized in {self.config.environment} environment")

            self.client = ServiceFactory(self.config).create_client()
            self.logger.info(f"Created {self.client}")

        except ConfigError as e:
            self.logger.error(f"Configuration error: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Failed to initialize application: {e}")
            raise

    def get_status(self) -> dict:
        """
        Get application status.

        Returns:
            Dictionary describing the configured environment and dispatcher
        """
        if not self.client or not self.config:
            raise RuntimeError("Application not initialized")

        return {
            "application": "Sendivent",
            "environment": self.config.environment,
            "api_environment": self.client.environment.value,
            "base_url": self.client.base_url,
            "dispatcher": str(self.client.dispatcher),
            "dispatch_enabled": self.config.dispatcher.enabled,
        }
