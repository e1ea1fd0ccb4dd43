from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    bad_request,
    current_user_id,
    data_response,
    json_body,
    not_found,
    query_date,
    query_int,
    result_response,
    roles_required,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _filters() -> dict:
        return {
            "teacher_id": query_int("teacher_id"),
            "sambung_group": request.args.get("sambung_group") or None,
            "start": query_date("start"),
            "end": query_date("end"),
        }

    @app.route("/api/kbm", methods=["POST"], endpoint="create_kbm_report")
    @roles_required(Role.TEACHER)
    def create_kbm_report():
        data = json_body()
        result = container.kbm_service.create_session(
            session_date=data.get("session_date"),
            sambung_group=data.get("sambung_group", ""),
            teacher_id=current_user_id(),
            teacher_name=data.get("teacher_name"),
            level=data.get("level"),
            material=data.get("material", ""),
            notes=data.get("notes"),
            attendance=data.get("attendance") or [],
            require_attendees=bool(data.get("require_attendees")),
        )
        return result_response(result, created=True)

    @app.route("/api/kbm", methods=["GET"], endpoint="list_kbm_reports")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def list_kbm_reports():
        try:
            filters = _filters()
        except ValueError:
            return bad_request("Filters must be valid numbers and YYYY-MM-DD dates")
        return data_response(container.kbm_service.search(**filters))

    @app.route("/api/kbm/mine", methods=["GET"], endpoint="list_my_kbm_reports")
    @roles_required(Role.TEACHER)
    def list_my_kbm_reports():
        return data_response(container.kbm_service.list_by_teacher(current_user_id()))

    @app.route("/api/kbm/<int:session_id>", methods=["GET"], endpoint="get_kbm_report")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def get_kbm_report(session_id: int):
        details = container.kbm_service.get_details(session_id)
        if not details:
            return not_found("KBM report not found")
        return data_response(details)

    @app.route("/api/kbm/<int:session_id>", methods=["PATCH"], endpoint="update_kbm_report")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def update_kbm_report(session_id: int):
        return result_response(container.kbm_service.update_session(session_id, json_body()))

    @app.route("/api/kbm/<int:session_id>", methods=["DELETE"], endpoint="delete_kbm_report")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def delete_kbm_report(session_id: int):
        return result_response(container.kbm_service.delete_session(session_id))

    @app.route("/api/kbm/export", methods=["GET"], endpoint="export_kbm_reports")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def export_kbm_reports():
        try:
            filters = _filters()
        except ValueError:
            return bad_request("Filters must be valid numbers and YYYY-MM-DD dates")
        csv_bytes = container.kbm_service.export_csv(**filters)
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=kbm_reports.csv"},
        )
