"""Core entities module."""

from .api_key import PRODUCTION_BASE_URL, SANDBOX_BASE_URL, ApiKey, Environment
from .contact import Contact, serialize_contact, serialize_recipients
from .send_request import IDEMPOTENCY_HEADER, SendRequest, SendRequestBuilder
from .send_response import SendResponse

__all__ = [
    "ApiKey",
    "Environment",
    "PRODUCTION_BASE_URL",
    "SANDBOX_BASE_URL",
    "Contact",
    "serialize_contact",
    "serialize_recipients",
    "IDEMPOTENCY_HEADER",
    "SendRequest",
    "SendRequestBuilder",
    "SendResponse",
]
