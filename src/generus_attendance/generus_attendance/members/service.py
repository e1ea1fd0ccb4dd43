from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.constants import DEFAULT_BARCODE_PREFIX
from ..core.enums import Gender, Level
from ..core.exceptions import NotFoundError, ValidationError
from ..core.result import as_result
from .model import PROFILE_FIELDS, Member
from .repository import MemberRepository

logger = logging.getLogger(__name__)

_REQUIRED = ("full_name", "sambung_group", "level")


def _parse_birth_date(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("Birth date must use YYYY-MM-DD")


def clean_profile(data: Mapping[str, Any], *, partial: bool = False) -> dict:
    """Validate and normalise profile input.

    With ``partial=True`` only the keys present in ``data`` are returned and the
    required fields are only checked when supplied.
    """

    out: dict = {}
    for field in PROFILE_FIELDS:
        if field not in data:
            if not partial and field in _REQUIRED:
                raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required")
            continue

        value = data[field]
        if field == "full_name":
            out[field] = require_non_empty(value, "Full name")
        elif field == "sambung_group":
            out[field] = require_non_empty(value, "Sambung group")
        elif field == "level":
            out[field] = require_enum(Level, value, "Level")
        elif field == "gender":
            out[field] = require_enum(Gender, value, "Gender") if value else None
        elif field == "birth_date":
            out[field] = _parse_birth_date(value)
        else:
            out[field] = optional_text(value)
    return out


def make_barcode(prefix: str, member_id: int, when: datetime) -> str:
    """``{prefix}{member_id}_{epoch_ms}``; unique per member and assignment."""

    return f"{prefix}{int(member_id)}_{int(when.timestamp() * 1000)}"


class MemberService:
    """Use cases of the member registry."""

    def __init__(
        self,
        members: MemberRepository,
        *,
        barcode_prefix: str = DEFAULT_BARCODE_PREFIX,
        clock: Callable[[], datetime] = now_local,
    ):
        self._members = members
        self._barcode_prefix = barcode_prefix
        self._clock = clock

    def _require(self, member_id: int) -> Member:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")
        return member

    @as_result("Profile saved")
    def upsert_profile(self, data: Mapping[str, Any]) -> Member:
        """Members have no password: the same (full name, group) pair always
        resolves to the same active row, so repeated submissions edit in place."""

        fields = clean_profile(data)
        existing = self._members.find_active_by_name_and_group(
            full_name=fields["full_name"], sambung_group=fields["sambung_group"]
        )
        if existing:
            self._members.update_fields(existing.member_id, fields)
            return self._require(existing.member_id)

        member_id = self._members.create(fields)
        logger.info("member %s created from profile submission", member_id)
        return self._require(member_id)

    @as_result("Member added")
    def create(self, data: Mapping[str, Any]) -> Member:
        member_id = self._members.create(clean_profile(data))
        return self._require(member_id)

    @as_result("Member updated")
    def update(self, member_id: int, data: Mapping[str, Any]) -> Member:
        self._require(member_id)
        fields = clean_profile(data, partial=True)
        if fields:
            self._members.update_fields(int(member_id), fields)
        return self._require(member_id)

    def generate_barcode(self, member_id: int) -> str:
        return make_barcode(self._barcode_prefix, member_id, self._clock())

    @as_result("Barcode generated")
    def assign_barcode(self, member_id: int) -> Member:
        """Generate and persist a new barcode, replacing any previous one."""

        self._require(member_id)
        barcode = self.generate_barcode(member_id)
        self._members.set_barcode(int(member_id), barcode)
        logger.info("barcode assigned to member %s", member_id)
        return self._require(member_id)

    def find_by_barcode(self, barcode: str) -> Optional[Member]:
        barcode = (barcode or "").strip()
        if not barcode:
            return None
        return self._members.get_by_barcode(barcode)

    def find_by_id(self, member_id: int) -> Optional[Member]:
        return self._members.get_by_id(int(member_id))

    @as_result("Member deactivated")
    def deactivate(self, member_id: int) -> Member:
        self._require(member_id)
        self._members.set_active(int(member_id), is_active=False)
        logger.info("member %s deactivated", member_id)
        return self._require(member_id)

    def list_by_group(self, sambung_group: str, *, include_inactive: bool = False) -> Sequence[Member]:
        return self._members.list_members(sambung_group=sambung_group, include_inactive=include_inactive)

    def list_all(self, *, include_inactive: bool = False) -> Sequence[Member]:
        return self._members.list_members(include_inactive=include_inactive)

    @as_result("Login successful")
    def login(self, *, full_name: str, level: Any, sambung_group: str) -> Member:
        """Identity-free member login: a lookup by name, level and group."""

        member = self._members.find_active_for_login(
            full_name=require_non_empty(full_name, "Full name"),
            level=require_enum(Level, level, "Level"),
            sambung_group=require_non_empty(sambung_group, "Sambung group"),
        )
        if not member:
            raise NotFoundError("No active member matches that name, level and group")
        return member
