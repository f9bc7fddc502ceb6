"""Core interfaces module."""

from .notification_dispatcher import NotificationDispatcher

__all__ = [
    "NotificationDispatcher",
]
