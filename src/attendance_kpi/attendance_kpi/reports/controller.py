from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user_id, date_arg, json_endpoint, login_required, manager_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports", methods=["GET"], endpoint="api_team_report")
    @manager_required
    @json_endpoint
    def team_report():
        return ok(
            container.report_service.build_team_report(
                manager_id=current_user_id(),
                report_type=request.args.get("type", "team"),
                team_id=request.args.get("team_id", type=int),
                start=date_arg("start"),
                end=date_arg("end"),
            )
        )

    @app.route("/api/reports/employee/<int:employee_id>", methods=["GET"], endpoint="api_employee_report")
    @login_required
    @json_endpoint
    def employee_report(employee_id: int):
        return ok(
            container.report_service.build_employee_report(
                requester_id=current_user_id(),
                employee_id=employee_id,
                start=date_arg("start"),
                end=date_arg("end"),
            )
        )
