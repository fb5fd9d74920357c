from __future__ import annotations

from flask import Flask, jsonify

from ..common.request_utils import json_body
from ..container import Container
from .guards import Guards, current_profile


def register(app: Flask, container: Container, guards: Guards) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        result = container.auth_service.login(data.get("username"), data.get("password"))
        return jsonify(result.to_dict())

    @app.route("/api/profile", methods=["GET"], endpoint="profile")
    @guards.token_required
    def profile():
        return jsonify(current_profile().to_dict())

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @guards.admin_required
    def admin_users():
        return jsonify([row.to_dict() for row in container.user_service.list_admin_view()])

    @app.route("/api/admin/users", methods=["POST"], endpoint="create_user")
    @guards.admin_required
    def create_user():
        data = json_body()
        profile = container.user_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            full_name=data.get("full_name"),
            role=data.get("role"),
            group_id=data.get("group_id"),
        )
        body = profile.to_dict()
        body["username"] = (data.get("username") or "").strip()
        return jsonify(body), 201

    @app.route("/api/admin/users/<user_id>", methods=["PATCH"], endpoint="update_user")
    @guards.admin_required
    def update_user(user_id: str):
        data = json_body()
        profile = container.user_service.update_user(user_id, data)
        return jsonify(profile.to_dict())

    @app.route("/api/admin/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @guards.admin_required
    def delete_user(user_id: str):
        container.user_service.delete_user(current=current_profile(), profile_id=user_id)
        return jsonify({"deleted": user_id})
