"""Notification dispatchers module."""

from .http_dispatcher import DEFAULT_USER_AGENT, HttpDispatcher
from .null_dispatcher import NullDispatcher
from .raw_http import build_raw_request, fire_and_forget

__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpDispatcher",
    "NullDispatcher",
    "build_raw_request",
    "fire_and_forget",
]
