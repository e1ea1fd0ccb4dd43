from __future__ import annotations

from flask import Flask, request

from ..common.web import bad_request, current_user_id, data_response, json_body, result_response, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tests", methods=["POST"], endpoint="record_test_result")
    @roles_required(Role.TEACHER)
    def record_test_result():
        data = json_body()
        try:
            member_id = int(data.get("member_id"))
        except (TypeError, ValueError):
            return bad_request("Member is required")
        result = container.testing_service.record_result(
            member_id=member_id,
            teacher_id=current_user_id(),
            test_type=data.get("test_type"),
            score=data.get("score"),
            notes=data.get("notes"),
        )
        return result_response(result, created=True)

    @app.route("/api/tests", methods=["GET"], endpoint="list_test_results")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def list_test_results():
        member_id = request.args.get("member_id", type=int)
        teacher_id = request.args.get("teacher_id", type=int)
        test_type = request.args.get("test_type")
        if member_id is not None:
            rows = container.testing_service.list_by_member(member_id)
        elif teacher_id is not None:
            rows = container.testing_service.list_by_teacher(teacher_id)
        elif test_type:
            rows = container.testing_service.list_by_type(test_type)
        else:
            rows = container.testing_service.list_all()
        return data_response(rows)

    @app.route("/api/tests/generus/<int:member_id>/summary", methods=["GET"], endpoint="test_score_summary")
    @roles_required(Role.TEACHER, Role.COORDINATOR, Role.GENERUS)
    def test_score_summary(member_id: int):
        return data_response(container.testing_service.score_summary(member_id))

    @app.route("/api/tests/summary", methods=["GET"], endpoint="test_summary")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def test_summary():
        return data_response(container.testing_service.test_summary())

    @app.route("/api/tests/<int:test_id>", methods=["PATCH"], endpoint="update_test_result")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def update_test_result(test_id: int):
        return result_response(container.testing_service.update_result(test_id, json_body()))

    @app.route("/api/tests/<int:test_id>", methods=["DELETE"], endpoint="delete_test_result")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def delete_test_result(test_id: int):
        return result_response(container.testing_service.delete_result(test_id))
