from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    bad_request,
    data_response,
    json_body,
    login_required,
    not_found,
    result_response,
    roles_required,
    start_session,
)
from ..container import Container
from ..core.enums import Role
from ..teachers.model import SessionUser


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/generus/login", methods=["POST"], endpoint="login_generus")
    def login_generus():
        data = json_body()
        result = container.member_service.login(
            full_name=data.get("full_name", ""),
            level=data.get("level"),
            sambung_group=data.get("sambung_group", ""),
        )
        if result.success:
            member = result.data
            start_session(SessionUser(user_id=member.member_id, name=member.full_name, role=Role.GENERUS.value))
        return result_response(result)

    @app.route("/api/generus", methods=["GET"], endpoint="list_generus")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def list_generus():
        include_inactive = request.args.get("include_inactive", "").lower() in ("1", "true", "yes")
        group = request.args.get("sambung_group")
        if group:
            members = container.member_service.list_by_group(group, include_inactive=include_inactive)
        else:
            members = container.member_service.list_all(include_inactive=include_inactive)
        return data_response(members)

    @app.route("/api/generus/<int:member_id>", methods=["GET"], endpoint="get_generus")
    @login_required
    def get_generus(member_id: int):
        member = container.member_service.find_by_id(member_id)
        if not member:
            return not_found("Member not found")
        return data_response(member)

    @app.route("/api/generus/barcode/<path:barcode>", methods=["GET"], endpoint="get_generus_by_barcode")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def get_generus_by_barcode(barcode: str):
        member = container.member_service.find_by_barcode(barcode)
        if not member:
            return not_found("Member not found")
        return data_response(member)

    @app.route("/api/generus/profile", methods=["POST"], endpoint="upsert_generus_profile")
    def upsert_generus_profile():
        result = container.member_service.upsert_profile(json_body())
        return result_response(result)

    @app.route("/api/generus", methods=["POST"], endpoint="create_generus")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def create_generus():
        return result_response(container.member_service.create(json_body()), created=True)

    @app.route("/api/generus/<int:member_id>", methods=["PATCH"], endpoint="update_generus")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def update_generus(member_id: int):
        data = json_body()
        if not data:
            return bad_request("Nothing to update")
        return result_response(container.member_service.update(member_id, data))

    @app.route("/api/generus/<int:member_id>/barcode", methods=["POST"], endpoint="assign_generus_barcode")
    @login_required
    def assign_generus_barcode(member_id: int):
        return result_response(container.member_service.assign_barcode(member_id))

    @app.route("/api/generus/<int:member_id>", methods=["DELETE"], endpoint="deactivate_generus")
    @roles_required(Role.COORDINATOR)
    def deactivate_generus(member_id: int):
        return result_response(container.member_service.deactivate(member_id))
