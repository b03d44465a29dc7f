from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user_id, date_arg, json_endpoint, login_required, manager_required, ok
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.absence_service

    @app.route("/api/absences", methods=["POST"], endpoint="api_absence_declare")
    @login_required
    @json_endpoint
    def declare():
        data = request.get_json(silent=True) or {}
        day = date_arg("date", data)
        if day is None:
            raise ValidationError("date is required")
        record = service.declare(user_id=current_user_id(), day=day, type=data.get("type"), reason=data.get("reason"))
        return ok(record.to_dict(), 201)

    @app.route("/api/absences", methods=["GET"], endpoint="api_absence_list")
    @login_required
    @json_endpoint
    def list_own():
        records = service.list_for_user(
            current_user_id(), start=date_arg("start"), end=date_arg("end"), status=request.args.get("status")
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/absences/team", methods=["GET"], endpoint="api_absence_team")
    @manager_required
    @json_endpoint
    def list_team():
        records = service.list_for_team(
            manager_id=current_user_id(),
            start=date_arg("start"),
            end=date_arg("end"),
            status=request.args.get("status"),
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/absences/stats", methods=["GET"], endpoint="api_absence_stats")
    @login_required
    @json_endpoint
    def stats():
        return ok(service.stats([current_user_id()], start=date_arg("start"), end=date_arg("end")))

    @app.route("/api/absences/potential", methods=["GET"], endpoint="api_absence_potential")
    @login_required
    @json_endpoint
    def potential():
        return ok(service.potential_absences(current_user_id(), start=date_arg("start"), end=date_arg("end")))

    @app.route("/api/absences/auto-mark", methods=["POST"], endpoint="api_absence_auto_mark")
    @manager_required
    @json_endpoint
    def auto_mark():
        data = request.get_json(silent=True) or {}
        start, end = date_arg("start", data), date_arg("end", data)
        if start is None or end is None:
            raise ValidationError("start and end are required")
        created = service.auto_mark_team(manager_id=current_user_id(), start=start, end=end)
        return ok({"created": len(created), "absences": [r.to_dict() for r in created]})

    @app.route("/api/absences/<int:absence_id>", methods=["GET"], endpoint="api_absence_get")
    @login_required
    @json_endpoint
    def get(absence_id: int):
        return ok(service.get(requester_id=current_user_id(), absence_id=absence_id).to_dict())

    @app.route("/api/absences/<int:absence_id>", methods=["PUT"], endpoint="api_absence_update")
    @login_required
    @json_endpoint
    def update(absence_id: int):
        data = request.get_json(silent=True) or {}
        record = service.update(
            user_id=current_user_id(), absence_id=absence_id, type=data.get("type"), reason=data.get("reason")
        )
        return ok(record.to_dict())

    @app.route("/api/absences/<int:absence_id>", methods=["DELETE"], endpoint="api_absence_delete")
    @login_required
    @json_endpoint
    def delete(absence_id: int):
        service.delete(user_id=current_user_id(), absence_id=absence_id)
        return ok({"id": absence_id})

    @app.route("/api/absences/<int:absence_id>/approve", methods=["POST"], endpoint="api_absence_approve")
    @manager_required
    @json_endpoint
    def approve(absence_id: int):
        return ok(service.approve(manager_id=current_user_id(), absence_id=absence_id).to_dict())

    @app.route("/api/absences/<int:absence_id>/reject", methods=["POST"], endpoint="api_absence_reject")
    @manager_required
    @json_endpoint
    def reject(absence_id: int):
        return ok(service.reject(manager_id=current_user_id(), absence_id=absence_id).to_dict())
