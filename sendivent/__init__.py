"""Python SDK for the Sendivent multi-channel notification API."""

from .client import Sendivent
from .config import ConfigError, ConfigValidationError
from .core.entities import (
    ApiKey,
    Contact,
    Environment,
    SendRequest,
    SendRequestBuilder,
    SendResponse,
)
from .core.interfaces import NotificationDispatcher
from .providers.dispatchers import HttpDispatcher, NullDispatcher
from .providers.exceptions import DispatchError, ProviderError

__version__ = "1.0.0"

__all__ = [
    "Sendivent",
    "ApiKey",
    "Contact",
    "Environment",
    "SendRequest",
    "SendRequestBuilder",
    "SendResponse",
    "NotificationDispatcher",
    "HttpDispatcher",
    "NullDispatcher",
    "ConfigError",
    "ConfigValidationError",
    "DispatchError",
    "ProviderError",
]
