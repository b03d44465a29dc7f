from __future__ import annotations

from datetime import datetime

from flask import Flask, request

from ..common.http import current_user_id, date_arg, json_endpoint, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clocks", methods=["POST"], endpoint="api_clock_punch")
    @login_required
    @json_endpoint
    def punch():
        data = request.get_json(silent=True) or {}
        clock_time = None
        if data.get("clock_time"):
            try:
                clock_time = datetime.fromisoformat(str(data["clock_time"]))
            except ValueError:
                raise ValidationError("clock_time must be an ISO-8601 timestamp")

        event = container.clock_service.punch(current_user_id(), str(data.get("status") or ""), clock_time=clock_time)
        return ok(event.to_dict(), 201)

    @app.route("/api/clocks", methods=["GET"], endpoint="api_clock_list")
    @login_required
    @json_endpoint
    def list_clocks():
        return ok(
            container.clock_service.list_with_hours(current_user_id(), start=date_arg("start"), end=date_arg("end"))
        )

    @app.route("/api/clocks/status", methods=["GET"], endpoint="api_clock_status")
    @login_required
    @json_endpoint
    def clock_status():
        return ok(container.clock_service.get_status(current_user_id()))

    @app.route("/api/clocks/detect-issues", methods=["GET"], endpoint="api_clock_issues")
    @login_required
    @json_endpoint
    def detect_issues():
        return ok(
            container.absence_service.detect_issues(current_user_id(), start=date_arg("start"), end=date_arg("end"))
        )
