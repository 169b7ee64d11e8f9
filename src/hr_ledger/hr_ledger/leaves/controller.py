from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, date_arg, json_body, login_required, ok, page_meta
from ..container import Container
from ..core.actor import require_employee, require_owner_or_reviewer, scoped_employee_id
from ..core.exceptions import ValidationError
from .model import LeaveBalance


def _balance_json(balance: LeaveBalance) -> dict:
    return {
        "employeeId": balance.employee_id,
        "year": balance.year,
        "balance": {
            t.value: {"total": b.total, "used": b.used, "remaining": b.remaining} for t, b in balance.by_type.items()
        },
        "totalUsed": balance.total_used,
    }


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_apply")
    @login_required
    def apply_leave():
        body = json_body()
        documents = body.get("documents") or []
        if not isinstance(documents, list):
            raise ValidationError("documents must be a list of URLs")

        leave = service.apply(
            current_actor(container.employees_repo),
            leave_type=body.get("leaveType"),
            start_date=date_arg(body.get("startDate"), "Start date"),
            end_date=date_arg(body.get("endDate"), "End date"),
            reason=body.get("reason") or "",
            team_email=body.get("teamEmail"),
            handover_notes=body.get("handoverNotes"),
            documents=[str(d) for d in documents],
        )
        return ok(leave, status=201)

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_list")
    @login_required
    def list_leaves():
        actor = current_actor(container.employees_repo)
        args = request.args
        page = service.list_requests(
            employee_id=scoped_employee_id(actor, args.get("employeeId")),
            status=args.get("status"),
            leave_type=args.get("leaveType"),
            start_date=date_arg(args.get("startDate"), "Start date"),
            end_date=date_arg(args.get("endDate"), "End date"),
            page=args.get("page"),
            limit=args.get("limit"),
        )
        return ok(page.items, **page_meta(page))

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def balance():
        actor = current_actor(container.employees_repo)
        employee_id = scoped_employee_id(actor, request.args.get("employeeId"))
        if employee_id is None:
            employee_id = require_employee(actor)
        year = request.args.get("year", container.clock().year)
        return ok(_balance_json(service.balance(employee_id, year=year)))

    @app.route("/api/leaves/statistics", methods=["GET"], endpoint="leave_statistics")
    @login_required
    def statistics():
        year = request.args.get("year", container.clock().year)
        return ok(service.statistics(current_actor(container.employees_repo), year=year))

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="leave_get")
    @login_required
    def get_leave(leave_id: int):
        leave = service.get(leave_id)
        require_owner_or_reviewer(current_actor(container.employees_repo), leave.employee_id)
        return ok(leave)

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PUT"], endpoint="leave_review")
    @login_required
    def review(leave_id: int):
        body = json_body()
        leave = service.review(
            current_actor(container.employees_repo),
            leave_id=leave_id,
            decision=body.get("status"),
            rejection_reason=body.get("rejectionReason"),
        )
        return ok(leave)

    @app.route("/api/leaves/<int:leave_id>/cancel", methods=["PUT"], endpoint="leave_cancel")
    @login_required
    def cancel(leave_id: int):
        return ok(service.cancel(current_actor(container.employees_repo), leave_id=leave_id))
