from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..common.paging import Page
from ..core.enums import NotificationCategory, NotificationPriority


@dataclass(frozen=True)
class Notification:
    notification_id: Optional[int]
    recipient_id: int
    title: str
    message: str
    category: NotificationCategory
    priority: NotificationPriority = NotificationPriority.MEDIUM
    sender_id: Optional[int] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NotificationPage(Page[Notification]):
    unread_count: int = 0
