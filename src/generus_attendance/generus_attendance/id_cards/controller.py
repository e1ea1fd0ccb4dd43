from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import (
    bad_request,
    current_user_id,
    data_response,
    json_body,
    login_required,
    result_response,
    roles_required,
)
from ..container import Container
from ..core.enums import ErrorCode, Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/id-cards/generus/<int:member_id>", methods=["POST"], endpoint="generate_id_card")
    @login_required
    def generate_id_card(member_id: int):
        if session.get("role") == Role.GENERUS.value and current_user_id() != member_id:
            return jsonify({"success": False, "message": "You can only print your own card",
                            "error": ErrorCode.FORBIDDEN.value}), 403
        return result_response(container.id_card_service.generate(member_id))

    @app.route("/api/id-cards/validate", methods=["POST"], endpoint="validate_id_card")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def validate_id_card():
        return data_response(container.id_card_service.validate(json_body().get("card_data")))

    @app.route("/api/id-cards", methods=["GET"], endpoint="list_id_cards")
    @roles_required(Role.COORDINATOR)
    def list_id_cards():
        return data_response(container.id_card_service.list_issued())

    @app.route("/api/id-cards/bulk", methods=["POST"], endpoint="bulk_generate_id_cards")
    @roles_required(Role.COORDINATOR)
    def bulk_generate_id_cards():
        member_ids = json_body().get("member_ids")
        if not isinstance(member_ids, list):
            return bad_request("member_ids must be a list")
        return result_response(container.id_card_service.bulk_generate(member_ids))
