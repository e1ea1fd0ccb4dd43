from __future__ import annotations

from flask import Flask, request, session

from ..common.web import (
    bad_request,
    current_user_id,
    data_response,
    json_body,
    login_required,
    query_date,
    result_response,
    roles_required,
)
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/feedback", methods=["POST"], endpoint="submit_feedback")
    @login_required
    def submit_feedback():
        result = container.feedback_service.submit(
            user_type=session.get("role"),
            user_id=current_user_id(),
            user_name=session.get("name", ""),
            message=json_body().get("message", ""),
        )
        return result_response(result, created=True)

    @app.route("/api/feedback/mine", methods=["GET"], endpoint="my_feedback")
    @login_required
    def my_feedback():
        return data_response(container.feedback_service.list_by_user(session.get("role"), current_user_id()))

    @app.route("/api/feedback", methods=["GET"], endpoint="list_feedback")
    @roles_required(Role.COORDINATOR)
    def list_feedback():
        user_type = request.args.get("user_type")
        try:
            start, end = query_date("start"), query_date("end")
        except ValueError:
            return bad_request("Dates must use YYYY-MM-DD")

        if start and end:
            rows = container.feedback_service.list_by_date_range(start, end)
        elif user_type:
            rows = container.feedback_service.list_by_user_type(user_type)
        else:
            rows = container.feedback_service.list_all()
        return data_response(rows)

    @app.route("/api/feedback/unread-count", methods=["GET"], endpoint="unread_feedback_count")
    @roles_required(Role.COORDINATOR)
    def unread_feedback_count():
        return data_response({"unread": container.feedback_service.unread_count()})

    @app.route("/api/feedback/<int:feedback_id>/read", methods=["PATCH"], endpoint="mark_feedback_read")
    @roles_required(Role.COORDINATOR)
    def mark_feedback_read(feedback_id: int):
        return result_response(container.feedback_service.mark_as_read(feedback_id))

    @app.route("/api/feedback/<int:feedback_id>", methods=["DELETE"], endpoint="delete_feedback")
    @roles_required(Role.COORDINATOR)
    def delete_feedback(feedback_id: int):
        return result_response(container.feedback_service.delete(feedback_id))
