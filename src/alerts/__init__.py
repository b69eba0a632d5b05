"""
PetAlert - Notifications
Found-pet notification intents and delivery via email.
"""

from src.alerts.notification import (
    NotificationIntent,
    MockNotifier,
    get_notifier,
)
from src.alerts.email_sender import (
    EmailConfig,
    EmailSender,
    EmailNotifier,
)

__all__ = [
    "NotificationIntent",
    "MockNotifier",
    "get_notifier",
    "EmailConfig",
    "EmailSender",
    "EmailNotifier",
]
