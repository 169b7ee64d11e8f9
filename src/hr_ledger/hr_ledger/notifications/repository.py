from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationCategory, NotificationPriority
from .model import Notification


class NotificationRepository(Protocol):
    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        raise NotImplementedError

    def list_for(
        self,
        *,
        recipient_id: int,
        category: Optional[NotificationCategory] = None,
        priority: Optional[NotificationPriority] = None,
        unread_only: bool = False,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """Return one page (newest first) and the total matching count."""

        raise NotImplementedError

    def unread_count(self, *, recipient_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, recipient_id: int, at: datetime) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, recipient_id: int, at: datetime) -> int:
        raise NotImplementedError

    def delete(self, *, notification_id: int, recipient_id: int) -> bool:
        raise NotImplementedError
