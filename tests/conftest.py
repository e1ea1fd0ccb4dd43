from __future__ import annotations

import copy
from dataclasses import replace
from datetime import datetime, time
from decimal import Decimal

import pytest

from generus_attendance.attendance.model import AttendanceMark, StatusCounts
from generus_attendance.checkins.model import OnlineCheckIn
from generus_attendance.container import assemble_container
from generus_attendance.core.enums import AttendanceStatus, Level
from generus_attendance.core.exceptions import DuplicateCheckInTodayError
from generus_attendance.feedback.model import Feedback
from generus_attendance.kbm.model import SESSION_FIELDS, KbmSession
from generus_attendance.materials.model import MATERIAL_FIELDS, Material
from generus_attendance.members.model import PROFILE_FIELDS, Member
from generus_attendance.teachers.model import Coordinator, Teacher
from generus_attendance.testing.model import TestResult

FIXED_NOW = datetime(2024, 1, 15, 9, 30, 0)


class FakeMemberRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Member] = {}

    def add(self, full_name, sambung_group="A1", level=Level.TEEN, **extra) -> Member:
        member_id = self.create({"full_name": full_name, "sambung_group": sambung_group, "level": level, **extra})
        return self.rows[member_id]

    def get_by_id(self, member_id):
        return self.rows.get(int(member_id))

    def get_by_barcode(self, barcode):
        return next((m for m in self.rows.values() if m.barcode == barcode), None)

    def get_many(self, member_ids):
        return [self.rows[i] for i in member_ids if i in self.rows]

    def find_active_by_name_and_group(self, *, full_name, sambung_group):
        return next(
            (m for m in self.rows.values() if m.is_active and m.full_name == full_name and m.sambung_group == sambung_group),
            None,
        )

    def find_active_for_login(self, *, full_name, level, sambung_group):
        return next(
            (
                m
                for m in self.rows.values()
                if m.is_active and m.full_name == full_name and m.level == level and m.sambung_group == sambung_group
            ),
            None,
        )

    def create(self, fields):
        member_id = self._next_id
        self._next_id += 1
        self.rows[member_id] = Member(member_id=member_id, **{k: v for k, v in fields.items() if k in PROFILE_FIELDS or k == "barcode"})
        return member_id

    def update_fields(self, member_id, fields):
        if member_id not in self.rows:
            return False
        self.rows[member_id] = replace(self.rows[member_id], **{k: v for k, v in fields.items() if k in PROFILE_FIELDS})
        return True

    def set_barcode(self, member_id, barcode):
        # UNIQUE (barcode)
        owner = self.get_by_barcode(barcode)
        assert owner is None or owner.member_id == member_id, "barcode already taken"
        self.rows[member_id] = replace(self.rows[member_id], barcode=barcode)
        return True

    def set_active(self, member_id, *, is_active):
        if member_id not in self.rows:
            return False
        self.rows[member_id] = replace(self.rows[member_id], is_active=is_active)
        return True

    def list_members(self, *, sambung_group=None, include_inactive=False):
        return [
            m
            for m in self.rows.values()
            if (include_inactive or m.is_active) and (sambung_group is None or m.sambung_group == sambung_group)
        ]

    def count(self, *, active_only=False):
        return len([m for m in self.rows.values() if m.is_active or not active_only])

    def count_active_in_groups(self, groups):
        return len([m for m in self.rows.values() if m.is_active and m.sambung_group in set(groups)])


class FakeTeacherRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Teacher] = {}

    def add(self, full_name="Guru A", *, email=None, username=None, password_hash="x", is_active=True) -> Teacher:
        teacher_id = self.create(
            full_name=full_name,
            email=email or f"teacher{self._next_id}@example.com",
            username=username or f"teacher{self._next_id}",
            password_hash=password_hash,
        )
        self.set_active(teacher_id, is_active=is_active)
        return self.rows[teacher_id]

    def get_by_id(self, teacher_id):
        return self.rows.get(int(teacher_id))

    def get_by_email(self, email):
        return next((t for t in self.rows.values() if t.email == email), None)

    def get_by_username(self, username):
        return next((t for t in self.rows.values() if t.username == username), None)

    def create(self, *, full_name, email, username, password_hash):
        teacher_id = self._next_id
        self._next_id += 1
        self.rows[teacher_id] = Teacher(
            teacher_id=teacher_id,
            full_name=full_name,
            email=email,
            username=username,
            password_hash=password_hash,
        )
        return teacher_id

    def set_active(self, teacher_id, *, is_active):
        if teacher_id not in self.rows:
            return False
        self.rows[teacher_id] = replace(self.rows[teacher_id], is_active=is_active)
        return True

    def update_fields(self, teacher_id, fields):
        if teacher_id not in self.rows:
            return False
        self.rows[teacher_id] = replace(self.rows[teacher_id], **fields)
        return True

    def set_password_hash(self, teacher_id, password_hash):
        return self.update_fields(teacher_id, {"password_hash": password_hash})

    def list_active(self):
        return [t for t in self.rows.values() if t.is_active]

    def count_active(self):
        return len(self.list_active())

    def active_ids(self):
        return {t.teacher_id for t in self.rows.values() if t.is_active}


class FakeCoordinatorRepo:
    def __init__(self):
        self.rows: dict[int, Coordinator] = {}

    def add(self, name, access_code_hash, *, is_active=True) -> Coordinator:
        coordinator = Coordinator(
            coordinator_id=len(self.rows) + 1, name=name, access_code_hash=access_code_hash, is_active=is_active
        )
        self.rows[coordinator.coordinator_id] = coordinator
        return coordinator

    def get_by_id(self, coordinator_id):
        return self.rows.get(int(coordinator_id))

    def get_by_name(self, name):
        return next((c for c in self.rows.values() if c.name == name), None)


class FakeLedger:
    """Sessions and their marks, shared by the KBM and attendance fakes like two tables of one DB."""

    def __init__(self):
        self.next_session_id = 1
        self.next_mark_id = 1
        self.sessions: dict[int, KbmSession] = {}
        self.marks: dict[int, AttendanceMark] = {}
        # member id whose mark insert blows up, to exercise rollback
        self.fail_on_member = None

    def session_date(self, session_id):
        return self.sessions[session_id].session_date


class FakeKbmRepo:
    def __init__(self, ledger: FakeLedger):
        self.ledger = ledger

    def create_with_attendance(self, *, fields, attendance):
        snapshot = copy.deepcopy((self.ledger.sessions, self.ledger.marks, self.ledger.next_session_id, self.ledger.next_mark_id))
        try:
            session_id = self.ledger.next_session_id
            self.ledger.next_session_id += 1
            self.ledger.sessions[session_id] = KbmSession(
                session_id=session_id,
                session_date=fields["session_date"],
                sambung_group=fields["sambung_group"],
                teacher_id=fields["teacher_id"],
                teacher_name=fields["teacher_name"],
                level=fields["level"],
                material=fields["material"],
                notes=fields.get("notes"),
                created_at=datetime.combine(fields["session_date"], time(8, 0)),
            )
            for entry in attendance:
                if entry.member_id == self.ledger.fail_on_member:
                    raise RuntimeError("connection lost")
                mark_id = self.ledger.next_mark_id
                self.ledger.next_mark_id += 1
                self.ledger.marks[mark_id] = AttendanceMark(
                    attendance_id=mark_id,
                    session_id=session_id,
                    member_id=entry.member_id,
                    member_name=entry.member_name,
                    status=entry.status,
                    session_date=fields["session_date"],
                )
            return session_id
        except Exception:
            self.ledger.sessions, self.ledger.marks, self.ledger.next_session_id, self.ledger.next_mark_id = snapshot
            raise

    def get_by_id(self, session_id):
        return self.ledger.sessions.get(int(session_id))

    def update_fields(self, session_id, fields):
        if session_id not in self.ledger.sessions:
            return False
        self.ledger.sessions[session_id] = replace(
            self.ledger.sessions[session_id], **{k: v for k, v in fields.items() if k in SESSION_FIELDS}
        )
        if "session_date" in fields:
            for mark_id, mark in list(self.ledger.marks.items()):
                if mark.session_id == session_id:
                    self.ledger.marks[mark_id] = replace(mark, session_date=fields["session_date"])
        return True

    def delete_with_attendance(self, session_id):
        self.ledger.marks = {k: m for k, m in self.ledger.marks.items() if m.session_id != session_id}
        return self.ledger.sessions.pop(session_id, None) is not None

    def _match(self, s, teacher_id=None, sambung_group=None, start=None, end=None):
        return (
            (teacher_id is None or s.teacher_id == teacher_id)
            and (sambung_group is None or s.sambung_group == sambung_group)
            and (start is None or s.session_date >= start)
            and (end is None or s.session_date <= end)
        )

    def list_sessions(self, *, teacher_id=None, sambung_group=None, start=None, end=None):
        rows = [s for s in self.ledger.sessions.values() if self._match(s, teacher_id, sambung_group, start, end)]
        return sorted(rows, key=lambda s: (s.session_date, s.session_id), reverse=True)

    def count(self, *, teacher_id=None, start=None, end=None):
        return len(self.list_sessions(teacher_id=teacher_id, start=start, end=end))

    def groups_for_teacher(self, teacher_id):
        return sorted({s.sambung_group for s in self.ledger.sessions.values() if s.teacher_id == teacher_id})

    def teacher_ids_between(self, *, start, end):
        return {s.teacher_id for s in self.ledger.sessions.values() if start <= s.session_date <= end}

    def recent(self, limit):
        return sorted(self.ledger.sessions.values(), key=lambda s: (s.created_at, s.session_id), reverse=True)[:limit]


class FakeAttendanceRepo:
    def __init__(self, ledger: FakeLedger):
        self.ledger = ledger

    def get_by_id(self, attendance_id):
        return self.ledger.marks.get(int(attendance_id))

    def update_status(self, attendance_id, status):
        self.ledger.marks[attendance_id] = replace(self.ledger.marks[attendance_id], status=status)
        return True

    def list_by_session(self, session_id):
        return [m for m in self.ledger.marks.values() if m.session_id == session_id]

    def list_by_member(self, member_id):
        return [m for m in self.ledger.marks.values() if m.member_id == member_id]

    def list_by_date_range(self, *, start, end):
        return [m for m in self.ledger.marks.values() if start <= m.session_date <= end]

    def count_by_status(self, *, member_id=None, teacher_id=None, start=None, end=None):
        counts = {s: 0 for s in AttendanceStatus}
        for m in self.ledger.marks.values():
            session = self.ledger.sessions[m.session_id]
            if member_id is not None and m.member_id != member_id:
                continue
            if teacher_id is not None and session.teacher_id != teacher_id:
                continue
            if start is not None and session.session_date < start:
                continue
            if end is not None and session.session_date > end:
                continue
            counts[m.status] += 1
        return StatusCounts(
            present=counts[AttendanceStatus.PRESENT],
            sick=counts[AttendanceStatus.SICK],
            permitted=counts[AttendanceStatus.PERMITTED],
            absent=counts[AttendanceStatus.ABSENT],
        )


class FakeCheckInRepo:
    def __init__(self, members: FakeMemberRepo):
        self._members = members
        self._next_id = 1
        self.rows: dict[int, OnlineCheckIn] = {}
        # simulate a concurrent scan slipping past the application-level pre-check
        self.blind_precheck = False

    def exists_for_member_on(self, member_id, day):
        if self.blind_precheck:
            return False
        return any(c.member_id == member_id and c.checkin_date == day for c in self.rows.values())

    def create(self, *, member_id, barcode, teacher_id, sambung_group, scanned_at):
        # UNIQUE (member_id, checkin_date)
        if any(c.member_id == member_id and c.checkin_date == scanned_at.date() for c in self.rows.values()):
            raise DuplicateCheckInTodayError("Member has already checked in today")
        checkin_id = self._next_id
        self._next_id += 1
        self.rows[checkin_id] = OnlineCheckIn(
            checkin_id=checkin_id,
            member_id=member_id,
            barcode=barcode,
            teacher_id=teacher_id,
            sambung_group=sambung_group,
            scanned_at=scanned_at,
            checkin_date=scanned_at.date(),
        )
        return checkin_id

    def _with_name(self, c):
        member = self._members.get_by_id(c.member_id)
        return replace(c, member_name=member.full_name if member else None)

    def list_checkins(self, *, sambung_group=None, member_id=None):
        rows = [
            self._with_name(c)
            for c in self.rows.values()
            if (sambung_group is None or c.sambung_group == sambung_group) and (member_id is None or c.member_id == member_id)
        ]
        return sorted(rows, key=lambda c: (c.scanned_at, c.checkin_id), reverse=True)

    def count(self, *, member_id=None, start=None, end=None):
        return len(
            [
                c
                for c in self.rows.values()
                if (member_id is None or c.member_id == member_id)
                and (start is None or c.checkin_date >= start)
                and (end is None or c.checkin_date <= end)
            ]
        )

    def recent(self, limit):
        return self.list_checkins()[:limit]


class FakeTestResultRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, TestResult] = {}

    def create(self, *, member_id, teacher_id, test_type, score, notes):
        test_id = self._next_id
        self._next_id += 1
        self.rows[test_id] = TestResult(
            test_id=test_id, member_id=member_id, teacher_id=teacher_id, test_type=test_type, score=Decimal(score), notes=notes
        )
        return test_id

    def get_by_id(self, test_id):
        return self.rows.get(int(test_id))

    def update_fields(self, test_id, fields):
        self.rows[test_id] = replace(self.rows[test_id], **fields)
        return True

    def delete(self, test_id):
        return self.rows.pop(int(test_id), None) is not None

    def list_results(self, *, member_id=None, teacher_id=None, test_type=None):
        return [
            r
            for r in self.rows.values()
            if (member_id is None or r.member_id == member_id)
            and (teacher_id is None or r.teacher_id == teacher_id)
            and (test_type is None or r.test_type == test_type)
        ]

    def scores_for_member(self, member_id):
        return [r.score for r in self.rows.values() if r.member_id == member_id]

    def totals_by_type(self):
        totals = {}
        for r in self.rows.values():
            count, total = totals.get(r.test_type, (0, Decimal(0)))
            totals[r.test_type] = (count + 1, total + r.score)
        return totals


class FakeMaterialRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Material] = {}

    def create(self, *, coordinator_id, fields):
        material_id = self._next_id
        self._next_id += 1
        self.rows[material_id] = Material(
            material_id=material_id,
            coordinator_id=coordinator_id,
            **{k: fields.get(k) for k in MATERIAL_FIELDS},
        )
        return material_id

    def get_by_id(self, material_id):
        return self.rows.get(int(material_id))

    def update_fields(self, material_id, fields):
        self.rows[material_id] = replace(self.rows[material_id], **fields)
        return True

    def delete(self, material_id):
        return self.rows.pop(int(material_id), None) is not None

    def list_all(self):
        return list(self.rows.values())

    def list_by_coordinator(self, coordinator_id):
        return [m for m in self.rows.values() if m.coordinator_id == coordinator_id]


class FakeFeedbackRepo:
    def __init__(self, clock=lambda: FIXED_NOW):
        self._next_id = 1
        self.rows: dict[int, Feedback] = {}
        self.clock = clock

    def create(self, *, user_type, user_id, user_name, message):
        feedback_id = self._next_id
        self._next_id += 1
        self.rows[feedback_id] = Feedback(
            feedback_id=feedback_id,
            user_type=user_type,
            user_id=user_id,
            user_name=user_name,
            message=message,
            created_at=self.clock(),
        )
        return feedback_id

    def get_by_id(self, feedback_id):
        return self.rows.get(int(feedback_id))

    def mark_read(self, feedback_id):
        row = self.rows.get(int(feedback_id))
        if row is None or row.is_read:
            return False
        self.rows[row.feedback_id] = replace(row, is_read=True)
        return True

    def count_unread(self):
        return sum(1 for f in self.rows.values() if not f.is_read)

    def delete(self, feedback_id):
        return self.rows.pop(int(feedback_id), None) is not None

    def list_feedback(self, *, user_type=None, user_id=None, start=None, end=None):
        return [
            f
            for f in self.rows.values()
            if (user_type is None or f.user_type == user_type)
            and (user_id is None or f.user_id == user_id)
            and (start is None or f.created_at.date() >= start)
            and (end is None or f.created_at.date() <= end)
        ]


@pytest.fixture
def members_repo():
    return FakeMemberRepo()


@pytest.fixture
def teachers_repo():
    return FakeTeacherRepo()


@pytest.fixture
def coordinators_repo():
    return FakeCoordinatorRepo()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def kbm_repo(ledger):
    return FakeKbmRepo(ledger)


@pytest.fixture
def attendance_repo(ledger):
    return FakeAttendanceRepo(ledger)


@pytest.fixture
def checkins_repo(members_repo):
    return FakeCheckInRepo(members_repo)


@pytest.fixture
def container(members_repo, teachers_repo, coordinators_repo, kbm_repo, attendance_repo, checkins_repo):
    return assemble_container(
        members_repo=members_repo,
        teachers_repo=teachers_repo,
        coordinators_repo=coordinators_repo,
        kbm_repo=kbm_repo,
        attendance_repo=attendance_repo,
        checkins_repo=checkins_repo,
        tests_repo=FakeTestResultRepo(),
        materials_repo=FakeMaterialRepo(),
        feedback_repo=FakeFeedbackRepo(),
    )


@pytest.fixture
def teacher(teachers_repo):
    return teachers_repo.add("Guru Budi")


@pytest.fixture
def ahmad(members_repo):
    return members_repo.add("Ahmad", "A1", Level.TEEN)
