from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceEntry
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import AttendanceStatus, Level
from ..core.exceptions import InactiveError, NotFoundError, ValidationError
from ..core.result import as_result
from ..members.repository import MemberRepository
from ..teachers.repository import TeacherRepository
from .model import SESSION_FIELDS, KbmSession, KbmSessionDetails
from .repository import KbmRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "session_id",
    "session_date",
    "sambung_group",
    "level",
    "teacher_name",
    "material",
    "notes",
]


def _as_date(value: Any, field_name: str = "Date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or ""))
    except ValueError:
        raise ValidationError(f"{field_name} must use YYYY-MM-DD")


def _as_entry(raw: Any) -> AttendanceEntry:
    if isinstance(raw, AttendanceEntry):
        entry = raw
    else:
        try:
            member_id = int(raw.get("member_id"))
        except (TypeError, ValueError, AttributeError):
            raise ValidationError("Each attendance entry needs a member_id")
        entry = AttendanceEntry(
            member_id=member_id,
            status=raw.get("status"),
            member_name=optional_text(raw.get("member_name")),
        )
    return AttendanceEntry(
        member_id=int(entry.member_id),
        status=require_enum(AttendanceStatus, entry.status, "Attendance status"),
        member_name=entry.member_name,
    )


class KbmService:
    """Use cases of the KBM session registry."""

    def __init__(
        self,
        sessions: KbmRepository,
        attendance: AttendanceRepository,
        members: MemberRepository,
        teachers: TeacherRepository,
    ):
        self._sessions = sessions
        self._attendance = attendance
        self._members = members
        self._teachers = teachers

    def _clean_fields(self, data: Mapping[str, Any], *, partial: bool) -> dict:
        out: dict = {}
        if not partial or "session_date" in data:
            out["session_date"] = _as_date(data.get("session_date"), "Session date")
        if not partial or "sambung_group" in data:
            out["sambung_group"] = require_non_empty(data.get("sambung_group"), "Sambung group")
        if not partial or "level" in data:
            out["level"] = require_enum(Level, data.get("level"), "Level")
        if not partial or "material" in data:
            out["material"] = require_non_empty(data.get("material"), "Material")
        if "teacher_name" in data:
            out["teacher_name"] = optional_text(data.get("teacher_name"))
        if "notes" in data:
            out["notes"] = optional_text(data.get("notes"))
        if "teacher_id" in data:
            try:
                out["teacher_id"] = int(data["teacher_id"])
            except (TypeError, ValueError):
                raise ValidationError("Teacher is not valid")
        return out

    def _resolve_entries(self, raw_entries: Iterable[Any]) -> list[AttendanceEntry]:
        entries = [_as_entry(raw) for raw in raw_entries]

        member_ids = [e.member_id for e in entries]
        if len(set(member_ids)) != len(member_ids):
            raise ValidationError("A member can only be listed once per session")

        members = {m.member_id: m for m in self._members.get_many(member_ids)}
        resolved: list[AttendanceEntry] = []
        for e in entries:
            member = members.get(e.member_id)
            if not member:
                raise NotFoundError(f"Member {e.member_id} not found")
            if not member.is_active:
                raise InactiveError(f"Member {member.full_name} is inactive")
            resolved.append(
                AttendanceEntry(member_id=e.member_id, status=e.status, member_name=e.member_name or member.full_name)
            )
        return resolved

    @as_result("KBM report saved")
    def create_session(
        self,
        *,
        session_date: Any,
        sambung_group: str,
        teacher_id: int,
        level: Any,
        material: str,
        teacher_name: Optional[str] = None,
        notes: Optional[str] = None,
        attendance: Iterable[Any] = (),
        require_attendees: bool = False,
    ) -> KbmSessionDetails:
        """Create a session together with one attendance mark per entry.

        An empty attendance list is allowed (e.g. a cancelled class still logged
        for material tracking) unless ``require_attendees`` is set.
        """

        fields = self._clean_fields(
            {
                "session_date": session_date,
                "sambung_group": sambung_group,
                "teacher_id": teacher_id,
                "teacher_name": teacher_name,
                "level": level,
                "material": material,
                "notes": notes,
            },
            partial=False,
        )

        teacher = self._teachers.get_by_id(fields["teacher_id"])
        if not teacher:
            raise NotFoundError("Teacher not found")
        fields["teacher_name"] = fields.get("teacher_name") or teacher.full_name

        entries = self._resolve_entries(attendance)
        if require_attendees and not entries:
            raise ValidationError("At least one attendee is required")

        session_id = self._sessions.create_with_attendance(fields=fields, attendance=entries)
        logger.info("KBM session %s created by teacher %s with %d marks", session_id, teacher.teacher_id, len(entries))
        return self.get_details(session_id)

    @as_result("KBM report updated")
    def update_session(self, session_id: int, data: Mapping[str, Any]) -> KbmSession:
        """Partial update of session-level fields; attendance marks are untouched."""

        if not self._sessions.get_by_id(int(session_id)):
            raise NotFoundError("KBM report not found")

        fields = self._clean_fields({k: v for k, v in data.items() if k in SESSION_FIELDS}, partial=True)
        if "teacher_id" in fields and not self._teachers.get_by_id(fields["teacher_id"]):
            raise NotFoundError("Teacher not found")
        if "teacher_name" in fields and not fields["teacher_name"]:
            raise ValidationError("Teacher name is required")

        if fields:
            self._sessions.update_fields(int(session_id), fields)
        return self._sessions.get_by_id(int(session_id))

    @as_result("KBM report deleted")
    def delete_session(self, session_id: int) -> None:
        if not self._sessions.get_by_id(int(session_id)):
            raise NotFoundError("KBM report not found")
        self._sessions.delete_with_attendance(int(session_id))
        logger.info("KBM session %s deleted with its attendance", session_id)

    def get_details(self, session_id: int) -> Optional[KbmSessionDetails]:
        session = self._sessions.get_by_id(int(session_id))
        if not session:
            return None
        return KbmSessionDetails(session=session, attendance=tuple(self._attendance.list_by_session(int(session_id))))

    def list_all(self) -> Sequence[KbmSession]:
        return self._sessions.list_sessions()

    def list_by_teacher(self, teacher_id: int) -> Sequence[KbmSession]:
        return self._sessions.list_sessions(teacher_id=int(teacher_id))

    def list_by_group(self, sambung_group: str) -> Sequence[KbmSession]:
        return self._sessions.list_sessions(sambung_group=sambung_group)

    def list_by_date_range(self, start: date, end: date) -> Sequence[KbmSession]:
        """Sessions with ``start <= session_date <= end``."""

        if start > end:
            return []
        return self._sessions.list_sessions(start=start, end=end)

    def search(
        self,
        *,
        teacher_id: Optional[int] = None,
        sambung_group: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[KbmSession]:
        if start and end and start > end:
            return []
        return self._sessions.list_sessions(teacher_id=teacher_id, sambung_group=sambung_group, start=start, end=end)

    def export_csv(
        self,
        *,
        teacher_id: Optional[int] = None,
        sambung_group: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> bytes:
        sessions = self.search(teacher_id=teacher_id, sambung_group=sambung_group, start=start, end=end)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        for s in sessions:
            writer.writerow(
                {
                    "session_id": s.session_id,
                    "session_date": s.session_date.strftime("%Y-%m-%d"),
                    "sambung_group": s.sambung_group,
                    "level": s.level.value,
                    "teacher_name": s.teacher_name,
                    "material": s.material,
                    "notes": s.notes or "",
                }
            )
        return out.getvalue().encode("utf-8-sig")
