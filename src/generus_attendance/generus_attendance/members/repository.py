from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Level
from .model import Member


class MemberRepository(Protocol):
    """Repository interface for members.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def get_by_barcode(self, barcode: str) -> Optional[Member]:
        raise NotImplementedError

    def get_many(self, member_ids: Sequence[int]) -> Sequence[Member]:
        raise NotImplementedError

    def find_active_by_name_and_group(self, *, full_name: str, sambung_group: str) -> Optional[Member]:
        raise NotImplementedError

    def find_active_for_login(self, *, full_name: str, level: Level, sambung_group: str) -> Optional[Member]:
        raise NotImplementedError

    def create(self, fields: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update_fields(self, member_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_barcode(self, member_id: int, barcode: str) -> bool:
        raise NotImplementedError

    def set_active(self, member_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_members(self, *, sambung_group: Optional[str] = None, include_inactive: bool = False) -> Sequence[Member]:
        raise NotImplementedError

    def count(self, *, active_only: bool = False) -> int:
        raise NotImplementedError

    def count_active_in_groups(self, groups: Sequence[str]) -> int:
        raise NotImplementedError
