from __future__ import annotations

from flask import Flask

from ..common.web import (
    bad_request,
    current_user_id,
    data_response,
    json_body,
    login_required,
    not_found,
    query_int,
    result_response,
    roles_required,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/materials", methods=["GET"], endpoint="list_materials")
    @login_required
    def list_materials():
        try:
            coordinator_id = query_int("coordinator_id")
        except ValueError:
            return bad_request("coordinator_id must be an integer")
        if coordinator_id is not None:
            return data_response(container.material_service.list_by_coordinator(coordinator_id))
        return data_response(container.material_service.list_all())

    @app.route("/api/materials/<int:material_id>", methods=["GET"], endpoint="get_material")
    @login_required
    def get_material(material_id: int):
        material = container.material_service.get(material_id)
        if not material:
            return not_found("Material not found")
        return data_response(material)

    @app.route("/api/materials", methods=["POST"], endpoint="create_material")
    @roles_required(Role.COORDINATOR)
    def create_material():
        return result_response(container.material_service.create(current_user_id(), json_body()), created=True)

    @app.route("/api/materials/<int:material_id>", methods=["PATCH"], endpoint="update_material")
    @roles_required(Role.COORDINATOR)
    def update_material(material_id: int):
        return result_response(container.material_service.update(material_id, json_body()))

    @app.route("/api/materials/<int:material_id>", methods=["DELETE"], endpoint="delete_material")
    @roles_required(Role.COORDINATOR)
    def delete_material(material_id: int):
        return result_response(container.material_service.delete(material_id))
