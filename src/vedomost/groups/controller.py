from __future__ import annotations

from flask import Flask, jsonify

from ..common.request_utils import json_body
from ..container import Container
from ..users.guards import Guards


def register(app: Flask, container: Container, guards: Guards) -> None:
    @app.route("/api/groups", methods=["GET"], endpoint="list_groups")
    @guards.token_required
    def list_groups():
        return jsonify([g.to_dict() for g in container.group_service.list_groups()])

    @app.route("/api/groups", methods=["POST"], endpoint="create_group")
    @guards.admin_required
    def create_group():
        data = json_body()
        group = container.group_service.create_group(data.get("name"))
        return jsonify(group.to_dict()), 201

    @app.route("/api/groups/<group_id>", methods=["DELETE"], endpoint="delete_group")
    @guards.admin_required
    def delete_group(group_id: str):
        container.group_service.delete_group(group_id)
        return jsonify({"deleted": group_id})
