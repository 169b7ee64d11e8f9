from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, int_arg, json_body, login_required, ok, page_meta
from ..container import Container
from ..core.actor import require_owner_or_reviewer, scoped_employee_id


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="payroll_generate")
    @login_required
    def generate():
        body = json_body()
        record = service.generate(
            current_actor(container.employees_repo),
            employee_id=int_arg(body.get("employeeId"), "Employee"),
            month=body.get("month"),
            year=body.get("year"),
        )
        return ok(record, status=201)

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @login_required
    def list_payroll():
        actor = current_actor(container.employees_repo)
        args = request.args
        page = service.list_records(
            employee_id=scoped_employee_id(actor, args.get("employeeId")),
            month=args.get("month"),
            year=args.get("year"),
            status=args.get("status"),
            page=args.get("page"),
            limit=args.get("limit"),
        )
        return ok(page.items, **page_meta(page))

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @login_required
    def summary():
        actor = current_actor(container.employees_repo)
        data = service.summary(
            year=request.args.get("year", container.clock().year),
            employee_id=scoped_employee_id(actor, request.args.get("employeeId")),
        )
        return ok(data)

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @login_required
    def get_payroll(payroll_id: int):
        record = service.get(payroll_id)
        require_owner_or_reviewer(current_actor(container.employees_repo), record.employee_id)
        return ok(record)

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @login_required
    def update(payroll_id: int):
        return ok(service.update(current_actor(container.employees_repo), payroll_id=payroll_id, patch=json_body()))

    @app.route("/api/payroll/<int:payroll_id>/process", methods=["PUT"], endpoint="payroll_process")
    @login_required
    def process(payroll_id: int):
        return ok(service.process(current_actor(container.employees_repo), payroll_id=payroll_id))

    @app.route("/api/payroll/<int:payroll_id>/pay", methods=["PUT"], endpoint="payroll_pay")
    @login_required
    def pay(payroll_id: int):
        return ok(service.pay(current_actor(container.employees_repo), payroll_id=payroll_id))
