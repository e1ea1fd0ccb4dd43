from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, InactiveError, NotFoundError, ValidationError
from ..core.result import as_result
from .model import PROFILE_FIELDS, SessionUser, Teacher
from .repository import CoordinatorRepository, TeacherRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _matches(secret_hash: str, secret: str) -> bool:
    try:
        return check_password_hash(secret_hash, secret or "")
    except ValueError:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


def _clean_email(value: Any) -> str:
    email = require_non_empty(value, "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


def _clean_username(value: Any) -> str:
    return require_min_length(require_non_empty(value, "Username"), "Username", 3)


class AuthService:
    """Use cases: teacher registration, the secret-based logins and password changes."""

    def __init__(self, teachers: TeacherRepository, coordinators: CoordinatorRepository):
        self._teachers = teachers
        self._coordinators = coordinators

    @as_result("Registration successful")
    def register_teacher(self, *, full_name: str, email: str, username: str, password: str) -> SessionUser:
        full_name = require_non_empty(full_name, "Full name")
        email = _clean_email(email)
        username = _clean_username(username)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._teachers.get_by_email(email):
            raise ValidationError("Email is already registered")
        if self._teachers.get_by_username(username):
            raise ValidationError("Username is already taken")

        teacher_id = self._teachers.create(
            full_name=full_name,
            email=email,
            username=username,
            password_hash=generate_password_hash(password),
        )
        logger.info("teacher %s registered", teacher_id)
        return SessionUser(user_id=teacher_id, name=full_name, role=Role.TEACHER.value)

    @as_result("Login successful")
    def login_teacher(self, *, email: str, password: str) -> SessionUser:
        teacher = self._teachers.get_by_email((email or "").strip().lower())
        if not teacher or not _matches(teacher.password_hash, password):
            logger.warning("failed teacher login for %r", email)
            raise AuthenticationError("Wrong email or password")
        if not teacher.is_active:
            raise InactiveError("Teacher account is inactive")
        return SessionUser(user_id=teacher.teacher_id, name=teacher.full_name, role=Role.TEACHER.value)

    @as_result("Login successful")
    def login_coordinator(self, *, name: str, access_code: str) -> SessionUser:
        coordinator = self._coordinators.get_by_name((name or "").strip())
        if not coordinator or not _matches(coordinator.access_code_hash, access_code):
            logger.warning("failed coordinator login for %r", name)
            raise AuthenticationError("Wrong name or access code")
        if not coordinator.is_active:
            raise InactiveError("Coordinator account is inactive")
        return SessionUser(user_id=coordinator.coordinator_id, name=coordinator.name, role=Role.COORDINATOR.value)

    @as_result("Password changed")
    def change_password(self, teacher_id: int, *, current_password: str, new_password: str) -> None:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        if not _matches(teacher.password_hash, current_password):
            logger.warning("failed password change for teacher %s", teacher_id)
            raise AuthenticationError("Current password is wrong")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        self._teachers.set_password_hash(int(teacher_id), generate_password_hash(new_password))
        logger.info("teacher %s changed their password", teacher_id)


class TeacherService:
    """Teacher directory lookups used by the KBM registry and dashboards."""

    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def get(self, teacher_id: int) -> Optional[Teacher]:
        return self._teachers.get_by_id(int(teacher_id))

    def list_active(self) -> Sequence[Teacher]:
        return self._teachers.list_active()

    @as_result("Teacher profile updated")
    def update_profile(self, teacher_id: int, data: Mapping[str, Any]) -> Teacher:
        """Partial update of name, email and username; both stay unique."""

        if not self._teachers.get_by_id(int(teacher_id)):
            raise NotFoundError("Teacher not found")

        fields: dict = {}
        if "full_name" in data:
            fields["full_name"] = require_non_empty(data["full_name"], "Full name")
        if "email" in data:
            fields["email"] = _clean_email(data["email"])
            owner = self._teachers.get_by_email(fields["email"])
            if owner and owner.teacher_id != int(teacher_id):
                raise ValidationError("Email is already registered")
        if "username" in data:
            fields["username"] = _clean_username(data["username"])
            owner = self._teachers.get_by_username(fields["username"])
            if owner and owner.teacher_id != int(teacher_id):
                raise ValidationError("Username is already taken")

        if fields:
            self._teachers.update_fields(int(teacher_id), {k: fields[k] for k in PROFILE_FIELDS if k in fields})
        return self._teachers.get_by_id(int(teacher_id))

    @as_result("Teacher status updated")
    def set_active(self, teacher_id: int, is_active: bool) -> Teacher:
        if not self._teachers.get_by_id(int(teacher_id)):
            raise NotFoundError("Teacher not found")
        self._teachers.set_active(int(teacher_id), is_active=bool(is_active))
        return self._teachers.get_by_id(int(teacher_id))
