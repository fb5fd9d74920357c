from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.request_utils import json_body
from ..container import Container
from ..users.guards import Guards, current_profile
from .export import export_filename, report_to_csv


def _flag(value, default: bool) -> bool:
    if value is None or value == "":
        return default
    return str(value).lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container, guards: Guards) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @guards.token_required
    def list_attendance():
        records = container.attendance_service.list_for(
            current_profile(),
            day=request.args.get("date") or None,
            group_id=request.args.get("group_id") or None,
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @guards.token_required
    def mark_attendance():
        data = json_body()
        record = container.attendance_service.mark(
            current_profile(),
            student_id=data.get("student_id"),
            day=data.get("date"),
            status=data.get("status"),
            comment=data.get("comment"),
            group_id=data.get("group_id") or None,
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/export", methods=["GET"], endpoint="export_attendance")
    @guards.token_required
    def export_attendance():
        report = container.attendance_service.build_report(
            current_profile(),
            start=request.args.get("from"),
            end=request.args.get("to"),
            group_id=request.args.get("group_id") or None,
            collapse_late=_flag(request.args.get("collapse"), bool(app.config.get("EXPORT_COLLAPSE_LATE", False))),
        )
        return app.response_class(
            report_to_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={export_filename(report)}"},
        )
