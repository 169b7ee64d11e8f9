from __future__ import annotations

from typing import Any, Iterable, Optional

from ..common.datetime_utils import Clock, now_local
from ..common.validators import page_limit, require_enum, require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_PAGE_SIZE
from ..core.enums import NotificationCategory, NotificationPriority
from ..core.exceptions import NotFoundError
from .model import Notification, NotificationPage
from .repository import NotificationRepository


class NotificationService:
    """Per-recipient notices; ledgers reach it only through the dispatcher."""

    def __init__(self, notifications: NotificationRepository, *, clock: Clock = now_local):
        self._notifications = notifications
        self._clock = clock

    def notify(
        self,
        *,
        recipient_id: int,
        title: str,
        message: str,
        category,
        priority=NotificationPriority.MEDIUM,
        sender_id: Optional[int] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> Notification:
        return self.broadcast(
            recipient_ids=[recipient_id],
            title=title,
            message=message,
            category=category,
            priority=priority,
            sender_id=sender_id,
            payload=payload,
        )[0]

    def broadcast(
        self,
        *,
        recipient_ids: Iterable[int],
        title: str,
        message: str,
        category,
        priority=NotificationPriority.MEDIUM,
        sender_id: Optional[int] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> list[Notification]:
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        category = require_enum(NotificationCategory, category, "Type")
        priority = require_enum(NotificationPriority, priority, "Priority")
        now = self._clock()

        # dict.fromkeys keeps order and drops duplicate recipients
        recipients = list(dict.fromkeys(int(r) for r in recipient_ids))
        if not recipients:
            return []

        return self._notifications.create_many(
            [
                Notification(
                    notification_id=None,
                    recipient_id=r,
                    sender_id=sender_id,
                    title=title,
                    message=message,
                    category=category,
                    priority=priority,
                    payload=dict(payload or {}),
                    created_at=now,
                )
                for r in recipients
            ]
        )

    def list_for(
        self,
        recipient_id: int,
        *,
        page=1,
        limit=None,
        category=None,
        priority=None,
        unread_only: bool = False,
    ) -> NotificationPage:
        page, limit = page_limit(page, limit, default_limit=DEFAULT_NOTIFICATION_PAGE_SIZE)
        items, total = self._notifications.list_for(
            recipient_id=int(recipient_id),
            category=require_enum(NotificationCategory, category, "Type") if category else None,
            priority=require_enum(NotificationPriority, priority, "Priority") if priority else None,
            unread_only=bool(unread_only),
            offset=(page - 1) * limit,
            limit=limit,
        )
        return NotificationPage(
            items=items,
            page=page,
            limit=limit,
            total=total,
            unread_count=self._notifications.unread_count(recipient_id=int(recipient_id)),
        )

    def unread_count(self, recipient_id: int) -> int:
        return self._notifications.unread_count(recipient_id=int(recipient_id))

    def mark_read(self, *, notification_id: int, recipient_id: int) -> None:
        ok = self._notifications.mark_read(
            notification_id=int(notification_id), recipient_id=int(recipient_id), at=self._clock()
        )
        if not ok:
            raise NotFoundError("Notification not found")

    def mark_all_read(self, recipient_id: int) -> int:
        return self._notifications.mark_all_read(recipient_id=int(recipient_id), at=self._clock())

    def delete(self, *, notification_id: int, recipient_id: int) -> None:
        if not self._notifications.delete(notification_id=int(notification_id), recipient_id=int(recipient_id)):
            raise NotFoundError("Notification not found")
