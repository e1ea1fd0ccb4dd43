from __future__ import annotations

from flask import Flask

from ..common.web import bad_request, data_response, json_body, query_date, result_response, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="correct_attendance")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def correct_attendance(attendance_id: int):
        data = json_body()
        return result_response(container.attendance_service.update_status(attendance_id, data.get("status")))

    @app.route("/api/attendance/sessions/<int:session_id>", methods=["GET"], endpoint="attendance_by_session")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def attendance_by_session(session_id: int):
        return data_response(container.attendance_service.list_by_session(session_id))

    @app.route("/api/attendance/generus/<int:member_id>", methods=["GET"], endpoint="attendance_by_member")
    @roles_required(Role.TEACHER, Role.COORDINATOR, Role.GENERUS)
    def attendance_by_member(member_id: int):
        return data_response(container.attendance_service.list_by_member(member_id))

    @app.route("/api/attendance/generus/<int:member_id>/stats", methods=["GET"], endpoint="attendance_member_stats")
    @roles_required(Role.TEACHER, Role.COORDINATOR, Role.GENERUS)
    def attendance_member_stats(member_id: int):
        return data_response(container.attendance_service.stats_for_member(member_id))

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def attendance_summary():
        return data_response(container.attendance_service.system_summary())

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_by_date_range")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def attendance_by_date_range():
        try:
            start, end = query_date("start"), query_date("end")
        except ValueError:
            return bad_request("Dates must use YYYY-MM-DD")
        if not start or not end:
            return bad_request("Both start and end are required")
        return data_response(container.attendance_service.list_by_date_range(start, end))
