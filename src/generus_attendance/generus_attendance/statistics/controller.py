from __future__ import annotations

from flask import Flask, request

from ..common.web import bad_request, current_user_id, data_response, not_found, roles_required
from ..container import Container
from ..core.constants import DEFAULT_RECENT_ACTIVITY_LIMIT
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    stats = container.statistics_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard_stats")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def dashboard_stats():
        return data_response(stats.dashboard_stats())

    @app.route("/api/dashboard/monthly", methods=["GET"], endpoint="monthly_attendance")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def monthly_attendance():
        year = request.args.get("year", type=int)
        if year is not None and not 1900 <= year <= 9999:
            return bad_request("Year is not valid")
        return data_response(stats.monthly_attendance(year))

    @app.route("/api/dashboard/teacher", methods=["GET"], endpoint="my_teacher_stats")
    @roles_required(Role.TEACHER)
    def my_teacher_stats():
        return data_response(stats.teacher_stats(current_user_id()))

    @app.route("/api/dashboard/teachers/<int:teacher_id>", methods=["GET"], endpoint="teacher_stats")
    @roles_required(Role.COORDINATOR)
    def teacher_stats(teacher_id: int):
        return data_response(stats.teacher_stats(teacher_id))

    @app.route("/api/dashboard/generus/<int:member_id>", methods=["GET"], endpoint="member_stats")
    @roles_required(Role.TEACHER, Role.COORDINATOR, Role.GENERUS)
    def member_stats(member_id: int):
        result = stats.member_stats(member_id)
        if not result:
            return not_found("Member not found")
        return data_response(result)

    @app.route("/api/dashboard/activities", methods=["GET"], endpoint="recent_activities")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def recent_activities():
        limit = request.args.get("limit", default=DEFAULT_RECENT_ACTIVITY_LIMIT, type=int)
        return data_response(stats.recent_activities(limit))
