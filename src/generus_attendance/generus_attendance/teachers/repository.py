from __future__ import annotations

from typing import AbstractSet, Any, Mapping, Optional, Protocol, Sequence

from .model import Coordinator, Teacher


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create(self, *, full_name: str, email: str, username: str, password_hash: str) -> int:
        raise NotImplementedError

    def update_fields(self, teacher_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_password_hash(self, teacher_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def set_active(self, teacher_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_active(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def active_ids(self) -> AbstractSet[int]:
        raise NotImplementedError


class CoordinatorRepository(Protocol):
    def get_by_id(self, coordinator_id: int) -> Optional[Coordinator]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Coordinator]:
        raise NotImplementedError
