from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, date_arg, datetime_arg, int_arg, json_body, login_required, ok, page_meta
from ..container import Container
from ..core.actor import require_employee, scoped_employee_id


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def checkin():
        employee_id = require_employee(current_actor(container.employees_repo))
        body = json_body()
        record = service.check_in(employee_id, location=body.get("location"))
        return ok(record, status=201)

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @login_required
    def checkout():
        employee_id = require_employee(current_actor(container.employees_repo))
        body = json_body()
        record = service.check_out(employee_id, location=body.get("location"))
        return ok(record)

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def mark():
        body = json_body()
        record = service.mark_attendance(
            current_actor(container.employees_repo),
            employee_id=int_arg(body.get("employeeId"), "Employee"),
            work_date=date_arg(body.get("date"), "Date") or container.clock().date(),
            status=body.get("status"),
            check_in=datetime_arg(body.get("checkIn"), "Check-in"),
            check_out=datetime_arg(body.get("checkOut"), "Check-out"),
            notes=body.get("notes"),
        )
        return ok(record)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def list_records():
        actor = current_actor(container.employees_repo)
        args = request.args
        page = service.list_records(
            employee_id=scoped_employee_id(actor, args.get("employeeId")),
            start_date=date_arg(args.get("startDate"), "Start date"),
            end_date=date_arg(args.get("endDate"), "End date"),
            status=args.get("status"),
            page=args.get("page"),
            limit=args.get("limit"),
        )
        return ok(page.items, **page_meta(page))

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def summary():
        actor = current_actor(container.employees_repo)
        now = container.clock()
        employee_id = scoped_employee_id(actor, request.args.get("employeeId"))
        if employee_id is None:
            employee_id = require_employee(actor)
        data = service.summary(
            employee_id,
            month=request.args.get("month", now.month),
            year=request.args.get("year", now.year),
        )
        return ok(data)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        employee_id = require_employee(current_actor(container.employees_repo))
        return ok(service.today(employee_id))
