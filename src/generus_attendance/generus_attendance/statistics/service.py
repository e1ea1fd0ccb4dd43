from __future__ import annotations

from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import month_bounds, now_local
from ..core.constants import DEFAULT_RECENT_ACTIVITY_LIMIT, MONTH_LABELS
from ..kbm.repository import KbmRepository
from ..members.repository import MemberRepository
from ..teachers.repository import TeacherRepository
from ..testing.service import TestingService
from .model import Activity, DashboardStats, MemberStats, MonthlyAttendance, TeacherStats
from .rounding import percentage


class StatisticsService:
    """Read-only aggregates computed fresh from the ledgers on every call."""

    def __init__(
        self,
        *,
        members: MemberRepository,
        teachers: TeacherRepository,
        sessions: KbmRepository,
        attendance: AttendanceRepository,
        checkins: CheckInRepository,
        testing: TestingService,
        clock: Callable[[], datetime] = now_local,
    ):
        self._members = members
        self._teachers = teachers
        self._sessions = sessions
        self._attendance = attendance
        self._checkins = checkins
        self._testing = testing
        self._attendance_service = AttendanceService(attendance)
        self._clock = clock

    def _this_month(self) -> tuple[date, date]:
        today = self._clock().date()
        return month_bounds(today.year, today.month)

    def dashboard_stats(self) -> DashboardStats:
        start, end = self._this_month()
        summary = self._attendance_service.system_summary()
        return DashboardStats(
            total_reports=self._sessions.count(),
            this_month_reports=self._sessions.count(start=start, end=end),
            average_attendance=summary.average_attendance_rate,
            active_teachers=self._teachers.count_active(),
            total_generus=self._members.count(),
            active_generus=self._members.count(active_only=True),
        )

    def monthly_attendance(self, year: Optional[int] = None) -> Sequence[MonthlyAttendance]:
        """Twelve rows, January first.

        ``generus_attendance`` is present marks over all marks of sessions dated
        in the month; ``teacher_attendance`` is currently active teachers who
        reported at least once in the month over all currently active teachers.
        """

        year = int(year or self._clock().year)
        active = set(self._teachers.active_ids())

        rows = []
        for month in range(1, 13):
            start, end = month_bounds(year, month)
            counts = self._attendance.count_by_status(start=start, end=end)
            reporting = active & set(self._sessions.teacher_ids_between(start=start, end=end))
            rows.append(
                MonthlyAttendance(
                    month=month,
                    label=MONTH_LABELS[month - 1],
                    generus_attendance=percentage(counts.present, counts.total),
                    teacher_attendance=percentage(len(reporting), len(active)),
                    sessions=self._sessions.count(start=start, end=end),
                    check_ins=self._checkins.count(start=start, end=end),
                )
            )
        return rows

    def teacher_stats(self, teacher_id: int) -> TeacherStats:
        start, end = self._this_month()
        groups = self._sessions.groups_for_teacher(int(teacher_id))
        return TeacherStats(
            teacher_id=int(teacher_id),
            my_reports=self._sessions.count(teacher_id=int(teacher_id)),
            this_month_my_reports=self._sessions.count(teacher_id=int(teacher_id), start=start, end=end),
            my_attendance_records=self._attendance.count_by_status(teacher_id=int(teacher_id)).total,
            active_generus_in_groups=self._members.count_active_in_groups(groups) if groups else 0,
        )

    def member_stats(self, member_id: int) -> Optional[MemberStats]:
        if not self._members.get_by_id(int(member_id)):
            return None
        scores = self._testing.score_summary(int(member_id))
        return MemberStats(
            attendance=self._attendance_service.stats_for_member(int(member_id)),
            tests_taken=scores.tests_taken,
            average_score=scores.average_score,
            check_ins=self._checkins.count(member_id=int(member_id)),
        )

    def recent_activities(self, limit: int = DEFAULT_RECENT_ACTIVITY_LIMIT) -> Sequence[Activity]:
        limit = max(int(limit), 0)
        if not limit:
            return []

        feed: list[Activity] = []
        for s in self._sessions.recent(limit):
            feed.append(
                Activity(
                    kind="kbm_report",
                    ref_id=s.session_id,
                    occurred_at=s.created_at or datetime.combine(s.session_date, time.min),
                    description=f"{s.teacher_name} reported KBM for {s.sambung_group}: {s.material}",
                    sambung_group=s.sambung_group,
                )
            )
        for c in self._checkins.recent(limit):
            feed.append(
                Activity(
                    kind="checkin",
                    ref_id=c.checkin_id,
                    occurred_at=c.scanned_at,
                    description=f"{c.member_name or f'Member {c.member_id}'} checked in",
                    sambung_group=c.sambung_group,
                )
            )

        feed.sort(key=lambda a: a.occurred_at, reverse=True)
        return feed[:limit]
