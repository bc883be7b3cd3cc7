"""Unread message and notification counters for the signed-in user."""
from __future__ import annotations

import logging

from brixxo.api import marketplace
from brixxo.errors import BackendError

logger = logging.getLogger(__name__)


class NotificationCenter:
    def __init__(self, auth) -> None:
        self.auth = auth
        self.unread_count = 0
        self.notification_count = 0
        self.active = False

    def start(self) -> None:
        """Load both counters and reset them if this ``auth`` logs out."""
        if not self.auth.user:
            return
        self.active = True
        self.auth.on_logout(self.reset)
        self.refresh_unread_count()
        self.refresh_notification_count()

    def reset(self) -> None:
        self.active = False
        self.unread_count = 0
        self.notification_count = 0

    def refresh_unread_count(self) -> int:
        if not self.auth.user:
            return self.unread_count
        try:
            conversations = marketplace.list_conversations(self.auth.client())
        except BackendError as e:
            logger.warning('Error fetching unread count: %s', e)
            return self.unread_count
        self.unread_count = sum(int(c.get('unreadCount') or 0) for c in conversations)
        return self.unread_count

    def refresh_notification_count(self) -> int:
        if not self.auth.user:
            return self.notification_count
        try:
            self.notification_count = marketplace.unread_notification_count(self.auth.client())
        except BackendError as e:
            logger.warning('Error fetching notification count: %s', e)
        return self.notification_count
