from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateCheckInTodayError, MemberNotFoundOrInactiveError, NotFoundError
from ..core.result import as_result
from ..members.repository import MemberRepository
from ..teachers.repository import TeacherRepository
from .model import OnlineCheckIn, ScanOutcome
from .repository import CheckInRepository

logger = logging.getLogger(__name__)


class CheckInService:
    """Barcode-based online check-in, at most once per member per local day."""

    def __init__(
        self,
        checkins: CheckInRepository,
        members: MemberRepository,
        teachers: TeacherRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._checkins = checkins
        self._members = members
        self._teachers = teachers
        self._clock = clock

    @as_result("Check-in recorded")
    def scan(self, barcode: str, teacher_id: Optional[int], *, now: Optional[datetime] = None) -> ScanOutcome:
        code = (barcode or "").strip()
        member = self._members.get_by_barcode(code) if code else None
        # existence/active first: an unknown barcode must never read as "duplicate"
        if not member or not member.is_active:
            logger.info("scan rejected, barcode %r unknown or inactive", code)
            raise MemberNotFoundOrInactiveError("Member not found or inactive")

        scanned_at = now or self._clock()
        if self._checkins.exists_for_member_on(member.member_id, scanned_at.date()):
            raise DuplicateCheckInTodayError(f"{member.full_name} has already checked in today")

        # None for coordinator scans
        if teacher_id is not None and not self._teachers.get_by_id(int(teacher_id)):
            raise NotFoundError("Teacher not found")

        checkin_id = self._checkins.create(
            member_id=member.member_id,
            barcode=code,
            teacher_id=teacher_id,
            sambung_group=member.sambung_group,
            scanned_at=scanned_at,
        )
        logger.info("check-in %s accepted for member %s", checkin_id, member.member_id)
        return ScanOutcome(
            checkin=OnlineCheckIn(
                checkin_id=checkin_id,
                member_id=member.member_id,
                barcode=code,
                teacher_id=teacher_id,
                sambung_group=member.sambung_group,
                scanned_at=scanned_at,
                checkin_date=scanned_at.date(),
                member_name=member.full_name,
            ),
            member=member,
        )

    def list_by_sambung_group(self, sambung_group: str) -> Sequence[OnlineCheckIn]:
        return self._checkins.list_checkins(sambung_group=sambung_group)

    def list_by_member(self, member_id: int) -> Sequence[OnlineCheckIn]:
        return self._checkins.list_checkins(member_id=int(member_id))

    def list_all(self) -> Sequence[OnlineCheckIn]:
        return self._checkins.list_checkins()
