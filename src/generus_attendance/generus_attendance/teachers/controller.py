from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.web import (
    current_user_id,
    data_response,
    json_body,
    login_required,
    not_found,
    result_response,
    roles_required,
    start_session,
)
from ..container import Container
from ..core.enums import ErrorCode, Role
from ..core.result import Result
from .model import Teacher

logger = logging.getLogger(__name__)


def _public(teacher: Teacher) -> dict:
    # password_hash never leaves the server
    return {
        "teacher_id": teacher.teacher_id,
        "full_name": teacher.full_name,
        "email": teacher.email,
        "username": teacher.username,
        "is_active": teacher.is_active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/teachers/register", methods=["POST"], endpoint="register_teacher")
    def register_teacher():
        data = json_body()
        result = container.auth_service.register_teacher(
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
        )
        return result_response(result, created=True)

    @app.route("/api/auth/teachers/login", methods=["POST"], endpoint="login_teacher")
    def login_teacher():
        data = json_body()
        result = container.auth_service.login_teacher(email=data.get("email", ""), password=data.get("password", ""))
        if result.success:
            start_session(result.data, remember=bool(data.get("remember_me")))
        return result_response(result)

    @app.route("/api/auth/coordinators/login", methods=["POST"], endpoint="login_coordinator")
    def login_coordinator():
        data = json_body()
        result = container.auth_service.login_coordinator(
            name=data.get("name", ""), access_code=data.get("access_code", "")
        )
        if result.success:
            start_session(result.data, remember=bool(data.get("remember_me")))
        return result_response(result)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"}), 200

    @app.route("/api/auth/me", methods=["GET"], endpoint="whoami")
    @login_required
    def whoami():
        return data_response({"user_id": session["user_id"], "name": session.get("name"), "role": session.get("role")})

    @app.route("/api/teachers", methods=["GET"], endpoint="list_teachers")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def list_teachers():
        return data_response([_public(t) for t in container.teacher_service.list_active()])

    @app.route("/api/teachers/<int:teacher_id>", methods=["GET"], endpoint="get_teacher")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def get_teacher(teacher_id: int):
        teacher = container.teacher_service.get(teacher_id)
        if not teacher:
            return not_found("Teacher not found")
        return data_response(_public(teacher))

    @app.route("/api/teachers/<int:teacher_id>/status", methods=["PATCH"], endpoint="set_teacher_status")
    @roles_required(Role.COORDINATOR)
    def set_teacher_status(teacher_id: int):
        data = json_body()
        result = container.teacher_service.set_active(teacher_id, bool(data.get("is_active", True)))
        if result.success:
            logger.info("teacher %s active=%s set by coordinator %s", teacher_id, result.data.is_active, session["user_id"])
            return result_response(Result.ok(result.message, _public(result.data)))
        return result_response(result)

    @app.route("/api/teachers/<int:teacher_id>", methods=["PATCH"], endpoint="update_teacher")
    @roles_required(Role.TEACHER, Role.COORDINATOR)
    def update_teacher(teacher_id: int):
        is_self = session.get("role") == Role.TEACHER.value and current_user_id() == teacher_id
        if session.get("role") != Role.COORDINATOR.value and not is_self:
            return jsonify({"success": False, "message": "You can only edit your own profile",
                            "error": ErrorCode.FORBIDDEN.value}), 403

        result = container.teacher_service.update_profile(teacher_id, json_body())
        if not result.success:
            return result_response(result)
        if is_self:
            session["name"] = result.data.full_name
        return result_response(Result.ok(result.message, _public(result.data)))

    @app.route("/api/auth/teachers/password", methods=["POST"], endpoint="change_teacher_password")
    @roles_required(Role.TEACHER)
    def change_teacher_password():
        data = json_body()
        result = container.auth_service.change_password(
            current_user_id(),
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
        )
        return result_response(result)
