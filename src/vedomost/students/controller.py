from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.request_utils import json_body
from ..container import Container
from ..users.guards import Guards, current_profile


def register(app: Flask, container: Container, guards: Guards) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @guards.token_required
    def list_students():
        students = container.student_service.list_for(current_profile(), group_id=request.args.get("group_id") or None)
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @guards.admin_required
    def create_student():
        data = json_body()
        student = container.student_service.create_student(
            full_name=data.get("full_name"),
            group_id=data.get("group_id"),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @guards.admin_required
    def delete_student(student_id: str):
        container.student_service.delete_student(student_id)
        return jsonify({"deleted": student_id})
