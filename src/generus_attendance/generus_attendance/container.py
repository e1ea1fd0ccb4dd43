from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .checkins.repository import CheckInRepository
from .checkins.service import CheckInService
from .core.constants import DEFAULT_BARCODE_PREFIX
from .database.connection import DBConfig, DatabaseConnection
from .feedback.mysql_feedback_repository import MySQLFeedbackRepository
from .feedback.repository import FeedbackRepository
from .feedback.service import FeedbackService
from .id_cards.service import IdCardService
from .kbm.mysql_kbm_repository import MySQLKbmRepository
from .kbm.repository import KbmRepository
from .kbm.service import KbmService
from .materials.mysql_material_repository import MySQLMaterialRepository
from .materials.repository import MaterialRepository
from .materials.service import MaterialService
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .statistics.service import StatisticsService
from .teachers.mysql_teacher_repository import MySQLCoordinatorRepository, MySQLTeacherRepository
from .teachers.repository import CoordinatorRepository, TeacherRepository
from .teachers.service import AuthService, TeacherService
from .testing.mysql_test_repository import MySQLTestResultRepository
from .testing.repository import TestResultRepository
from .testing.service import TestingService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    teachers_repo: TeacherRepository
    coordinators_repo: CoordinatorRepository
    kbm_repo: KbmRepository
    attendance_repo: AttendanceRepository
    checkins_repo: CheckInRepository
    tests_repo: TestResultRepository
    materials_repo: MaterialRepository
    feedback_repo: FeedbackRepository

    auth_service: AuthService
    teacher_service: TeacherService
    member_service: MemberService
    kbm_service: KbmService
    attendance_service: AttendanceService
    checkin_service: CheckInService
    testing_service: TestingService
    material_service: MaterialService
    feedback_service: FeedbackService
    id_card_service: IdCardService
    statistics_service: StatisticsService


def assemble_container(
    *,
    members_repo: MemberRepository,
    teachers_repo: TeacherRepository,
    coordinators_repo: CoordinatorRepository,
    kbm_repo: KbmRepository,
    attendance_repo: AttendanceRepository,
    checkins_repo: CheckInRepository,
    tests_repo: TestResultRepository,
    materials_repo: MaterialRepository,
    feedback_repo: FeedbackRepository,
    conn: Optional[DatabaseConnection] = None,
    barcode_prefix: str = DEFAULT_BARCODE_PREFIX,
) -> Container:
    """Wire services on top of any set of repositories (MySQL or in-memory)."""

    testing_service = TestingService(tests_repo, members_repo, teachers_repo)

    return Container(
        conn=conn,
        members_repo=members_repo,
        teachers_repo=teachers_repo,
        coordinators_repo=coordinators_repo,
        kbm_repo=kbm_repo,
        attendance_repo=attendance_repo,
        checkins_repo=checkins_repo,
        tests_repo=tests_repo,
        materials_repo=materials_repo,
        feedback_repo=feedback_repo,
        auth_service=AuthService(teachers_repo, coordinators_repo),
        teacher_service=TeacherService(teachers_repo),
        member_service=MemberService(members_repo, barcode_prefix=barcode_prefix),
        kbm_service=KbmService(kbm_repo, attendance_repo, members_repo, teachers_repo),
        attendance_service=AttendanceService(attendance_repo),
        checkin_service=CheckInService(checkins_repo, members_repo, teachers_repo),
        testing_service=testing_service,
        material_service=MaterialService(materials_repo, coordinators_repo),
        feedback_service=FeedbackService(feedback_repo),
        id_card_service=IdCardService(members_repo, barcode_prefix=barcode_prefix),
        statistics_service=StatisticsService(
            members=members_repo,
            teachers=teachers_repo,
            sessions=kbm_repo,
            attendance=attendance_repo,
            checkins=checkins_repo,
            testing=testing_service,
        ),
    )


def build_container(*, db_config: dict, barcode_prefix: str = DEFAULT_BARCODE_PREFIX) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        conn=conn,
        members_repo=MySQLMemberRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        coordinators_repo=MySQLCoordinatorRepository(conn),
        kbm_repo=MySQLKbmRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        checkins_repo=MySQLCheckInRepository(conn),
        tests_repo=MySQLTestResultRepository(conn),
        materials_repo=MySQLMaterialRepository(conn),
        feedback_repo=MySQLFeedbackRepository(conn),
        barcode_prefix=barcode_prefix,
    )
