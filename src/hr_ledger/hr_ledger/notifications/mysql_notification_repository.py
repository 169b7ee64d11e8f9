from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationCategory, NotificationPriority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, where_clause
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = """
    notification_id, recipient_id, sender_id, title, message, category, priority,
    is_read, read_at, payload, created_at
"""


def _row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        recipient_id=int(r["recipient_id"]),
        sender_id=int(r["sender_id"]) if r.get("sender_id") is not None else None,
        title=r["title"],
        message=r["message"],
        category=NotificationCategory(r["category"]),
        priority=NotificationPriority(r["priority"]),
        is_read=bool(r["is_read"]),
        read_at=r.get("read_at"),
        payload=load_json(r.get("payload")) or {},
        created_at=r.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        created: list[Notification] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for n in notifications:
                cur.execute(
                    """
                    INSERT INTO notifications(
                        recipient_id, sender_id, title, message, category, priority, is_read, payload, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(n.recipient_id),
                        n.sender_id,
                        n.title,
                        n.message,
                        n.category.value,
                        n.priority.value,
                        1 if n.is_read else 0,
                        dump_json(n.payload),
                        n.created_at,
                    ),
                )
                created.append(replace(n, notification_id=int(cur.lastrowid)))
        return created

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
        clauses = ["recipient_id=%s"]
        params: list[object] = [int(recipient_id)]

        if category is not None:
            clauses.append("category=%s")
            params.append(category.value)
        if priority is not None:
            clauses.append("priority=%s")
            params.append(priority.value)
        if unread_only:
            clauses.append("is_read=0")

        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM notifications WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_notification(r) for r in fetchall(cur)], total

    def unread_count(self, *, recipient_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM notifications WHERE recipient_id=%s AND is_read=0",
                (int(recipient_id),),
            )
            return int(fetchone(cur)["n"])

    def mark_read(self, *, notification_id: int, recipient_id: int, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, read_at=COALESCE(read_at, %s)
                WHERE notification_id=%s AND recipient_id=%s
                """,
                (at, int(notification_id), int(recipient_id)),
            )
            if cur.rowcount > 0:
                return True
            # Already read rows report 0 affected rows; check existence.
            cur.execute(
                "SELECT 1 FROM notifications WHERE notification_id=%s AND recipient_id=%s",
                (int(notification_id), int(recipient_id)),
            )
            return fetchone(cur) is not None

    def mark_all_read(self, *, recipient_id: int, at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE recipient_id=%s AND is_read=0",
                (at, int(recipient_id)),
            )
            return int(cur.rowcount)

    def delete(self, *, notification_id: int, recipient_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND recipient_id=%s",
                (int(notification_id), int(recipient_id)),
            )
            return cur.rowcount > 0
