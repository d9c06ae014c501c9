"""Operator notifications for the volume backup job."""

from .telegram import TelegramNotifier, NotificationError

__all__ = [
    'TelegramNotifier',
    'NotificationError',
]
