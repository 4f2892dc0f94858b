"""Notification engine: alert rules, deduplicating store and desktop delivery."""

from nexus_flow.notifications.desktop import DesktopNotifier
from nexus_flow.notifications.rules import (
    NotificationCategory,
    NotificationDraft,
    NotificationThresholds,
    NotificationType,
)
from nexus_flow.notifications.store import Notification, NotificationStore

__all__ = [
    "DesktopNotifier",
    "Notification",
    "NotificationCategory",
    "NotificationDraft",
    "NotificationStore",
    "NotificationThresholds",
    "NotificationType",
]
