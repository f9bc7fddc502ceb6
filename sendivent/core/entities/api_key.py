"""API key entity."""

import re
from dataclasses import dataclass
from enum import Enum

from ...config.exceptions import ConfigValidationError


class Environment(Enum):
    """Backend environment selected by the API key prefix."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


PRODUCTION_BASE_URL = "https://api.sendivent.com/"
SANDBOX_BASE_URL = "https://api-sandbox.sendivent.com/"

_KEY_PATTERN = re.compile(r"^(test_|live_)")


@dataclass(frozen=True)
class ApiKey:
    """Sendivent API key.

    The prefix decides which backend receives requests: ``live_`` keys talk
    to production, ``test_`` keys to the sandbox.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not _KEY_PATTERN.match(self.value):
            raise ConfigValidationError("API key must start with 'test_' or 'live_'")

    @property
    def environment(self) -> Environment:
        if self.value.startswith("live_"):
            return Environment.PRODUCTION
        return Environment.SANDBOX

    @property
    def is_live(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def base_url(self) -> str:
        if self.is_live:
            return PRODUCTION_BASE_URL
        return SANDBOX_BASE_URL

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"

    def masked(self) -> str:
        """Return the key with everything but the prefix and last 4 chars hidden."""
        prefix = self.value[:5]
        tail = self.value[5:][-4:]
        return f"{prefix}...{tail}"

    def __str__(self) -> str:
        return self.masked()

    def __repr__(self) -> str:
        return f"ApiKey({self.masked()!r})"
