"""Notification module."""

from .line_channel import INotificationChannel, LineNotifier
from .messages import choices_message, image_message, rating_choices

__all__ = [
    "INotificationChannel",
    "LineNotifier",
    "choices_message",
    "image_message",
    "rating_choices",
]
