from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.web import bad_request, current_user_id, data_response, json_body, result_response, roles_required
from ..container import Container
from ..core.enums import Role

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/checkins/scan", methods=["POST"], endpoint="scan_checkin")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def scan_checkin():
        barcode = (json_body().get("barcode") or "").strip()
        if not barcode:
            return bad_request("Barcode is required")

        # teacher_id references teachers; coordinator scans are stored without one
        teacher_id = current_user_id() if session.get("role") == Role.TEACHER.value else None
        result = container.checkin_service.scan(barcode, teacher_id)
        if not result.success:
            logger.info("scan of %r rejected with %s", barcode, result.error.value)
        return result_response(result, created=True)

    @app.route("/api/checkins", methods=["GET"], endpoint="list_checkins")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def list_checkins():
        group = request.args.get("sambung_group")
        member_id = request.args.get("member_id", type=int)
        if group:
            rows = container.checkin_service.list_by_sambung_group(group)
        elif member_id is not None:
            rows = container.checkin_service.list_by_member(member_id)
        else:
            rows = container.checkin_service.list_all()
        return data_response(rows)
