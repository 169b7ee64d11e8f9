from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, int_arg, json_body, login_required, ok, page_meta
from ..container import Container
from ..core.actor import require_reviewer
from ..core.enums import NotificationCategory
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notification_list")
    @login_required
    def list_notifications():
        args = request.args
        page = service.list_for(
            current_actor(container.employees_repo).user_id,
            page=args.get("page"),
            limit=args.get("limit"),
            category=args.get("type"),
            priority=args.get("priority"),
            unread_only=args.get("unreadOnly", "").lower() in {"1", "true", "yes"},
        )
        return ok(page.items, unreadCount=page.unread_count, **page_meta(page))

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="notification_unread_count")
    @login_required
    def unread_count():
        return ok({"unreadCount": service.unread_count(current_actor(container.employees_repo).user_id)})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PUT"], endpoint="notification_read")
    @login_required
    def mark_read(notification_id: int):
        service.mark_read(notification_id=notification_id, recipient_id=current_actor(container.employees_repo).user_id)
        return ok({"id": notification_id, "isRead": True})

    @app.route("/api/notifications/read-all", methods=["PUT"], endpoint="notification_read_all")
    @login_required
    def mark_all_read():
        return ok({"updated": service.mark_all_read(current_actor(container.employees_repo).user_id)})

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="notification_delete")
    @login_required
    def delete(notification_id: int):
        service.delete(notification_id=notification_id, recipient_id=current_actor(container.employees_repo).user_id)
        return ok({"id": notification_id})

    @app.route("/api/notifications/broadcast", methods=["POST"], endpoint="notification_broadcast")
    @login_required
    def broadcast():
        actor = current_actor(container.employees_repo)
        require_reviewer(actor)
        body = json_body()
        recipients = body.get("recipientIds") or []
        if not isinstance(recipients, list) or not recipients:
            raise ValidationError("recipientIds must be a non-empty list")

        created = service.broadcast(
            recipient_ids=[int_arg(r, "Recipient") for r in recipients],
            sender_id=actor.user_id,
            title=body.get("title") or "",
            message=body.get("message") or "",
            category=body.get("type") or NotificationCategory.ANNOUNCEMENT,
            priority=body.get("priority") or "Medium",
        )
        return ok({"sent": len(created)}, status=201)
