from datetime import date, datetime
from decimal import Decimal

import pytest

from generus_attendance.statistics.service import StatisticsService

NOW = datetime(2024, 3, 20, 10, 0, 0)


@pytest.fixture
def stats(container, members_repo, teachers_repo, kbm_repo, attendance_repo, checkins_repo):
    return StatisticsService(
        members=members_repo,
        teachers=teachers_repo,
        sessions=kbm_repo,
        attendance=attendance_repo,
        checkins=checkins_repo,
        testing=container.testing_service,
        clock=lambda: NOW,
    )


def _session(container, teacher, day, marks, group="A1"):
    return container.kbm_service.create_session(
        session_date=day,
        sambung_group=group,
        teacher_id=teacher.teacher_id,
        level="remaja",
        material="Materi",
        attendance=[{"member_id": m.member_id, "status": s} for m, s in marks],
    ).data


def test_scenario_c_dashboard_on_empty_store_is_all_zero(stats):
    d = stats.dashboard_stats()

    assert (d.total_reports, d.this_month_reports, d.average_attendance) == (0, 0, 0)
    assert (d.active_teachers, d.total_generus, d.active_generus) == (0, 0, 0)


def test_dashboard_counts(stats, container, teacher, teachers_repo, members_repo, ahmad):
    teachers_repo.add("Guru Nonaktif", is_active=False)
    siti = members_repo.add("Siti", "A1")
    gone = members_repo.add("Lama", "A1")
    members_repo.set_active(gone.member_id, is_active=False)

    _session(container, teacher, "2024-02-10", [(ahmad, "present"), (siti, "absent")])
    _session(container, teacher, "2024-03-05", [(ahmad, "present"), (siti, "present")])

    d = stats.dashboard_stats()

    assert d.total_reports == 2
    assert d.this_month_reports == 1
    assert d.average_attendance == 75
    assert d.active_teachers == 1
    assert d.total_generus == 3
    assert d.active_generus == 2


def test_monthly_attendance_reports_twelve_months_with_zero_for_empty(stats, container, teacher, teachers_repo, members_repo, ahmad, checkins_repo):
    teachers_repo.add("Guru Dua")
    siti = members_repo.add("Siti", "A1")
    _session(container, teacher, "2024-01-15", [(ahmad, "present"), (siti, "present")])
    _session(container, teacher, "2024-01-20", [(ahmad, "present"), (siti, "absent")])
    code = container.member_service.assign_barcode(ahmad.member_id).data.barcode
    container.checkin_service.scan(code, teacher.teacher_id, now=datetime(2024, 1, 21, 7, 0))

    rows = stats.monthly_attendance(2024)

    assert [r.label for r in rows] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    jan = rows[0]
    assert jan.generus_attendance == 75
    assert jan.teacher_attendance == 50
    assert jan.sessions == 2
    assert jan.check_ins == 1
    for empty in rows[1:]:
        assert (empty.generus_attendance, empty.teacher_attendance, empty.sessions, empty.check_ins) == (0, 0, 0, 0)


def test_monthly_teacher_attendance_counts_only_active_teachers(stats, container, teacher, teachers_repo, ahmad):
    teachers_repo.add("Guru B")
    gone = teachers_repo.add("Guru C")
    _session(container, teacher, "2024-03-04", [(ahmad, "present")])
    _session(container, gone, "2024-03-06", [(ahmad, "present")])
    teachers_repo.set_active(gone.teacher_id, is_active=False)

    march = stats.monthly_attendance(2024)[2]

    assert march.sessions == 2
    assert march.teacher_attendance == 50


def test_monthly_attendance_defaults_to_current_year(stats, container, teacher, ahmad):
    _session(container, teacher, "2023-03-01", [(ahmad, "present")])

    assert stats.monthly_attendance()[2].sessions == 0
    assert stats.monthly_attendance(2023)[2].sessions == 1


def test_teacher_stats(stats, container, teacher, teachers_repo, members_repo, ahmad):
    other = teachers_repo.add("Guru Lain")
    siti = members_repo.add("Siti", "B2")
    members_repo.add("Dewi", "C3")
    gone = members_repo.add("Lama", "A1")
    members_repo.set_active(gone.member_id, is_active=False)

    _session(container, teacher, "2024-01-10", [(ahmad, "present")], group="A1")
    _session(container, teacher, "2024-03-10", [(siti, "sick")], group="B2")
    _session(container, other, "2024-03-11", [(ahmad, "absent")], group="A1")

    t = stats.teacher_stats(teacher.teacher_id)

    assert t.my_reports == 2
    assert t.this_month_my_reports == 1
    assert t.my_attendance_records == 2
    assert t.active_generus_in_groups == 2


def test_teacher_without_sessions_has_zero_stats(stats, teacher):
    t = stats.teacher_stats(teacher.teacher_id)
    assert (t.my_reports, t.this_month_my_reports, t.my_attendance_records, t.active_generus_in_groups) == (0, 0, 0, 0)


def test_member_stats_wraps_attendance_scores_and_check_ins(stats, container, teacher, ahmad):
    _session(container, teacher, "2024-01-10", [(ahmad, "present")])
    _session(container, teacher, "2024-01-11", [(ahmad, "absent")])
    _session(container, teacher, "2024-01-12", [(ahmad, "present")])
    for score in ("80", "85.5", "90"):
        container.testing_service.record_result(
            member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="alquran", score=score
        )

    m = stats.member_stats(ahmad.member_id)

    assert m.attendance.total_sessions == 3
    assert m.attendance.attendance_percentage == 67
    assert m.tests_taken == 3
    assert m.average_score == Decimal("85.17")
    assert m.check_ins == 0
    assert stats.member_stats(999) is None


def test_recent_activities_merges_reports_and_check_ins_newest_first(stats, container, teacher, ahmad, members_repo, checkins_repo):
    _session(container, teacher, "2024-03-01", [(ahmad, "present")])
    code = container.member_service.assign_barcode(ahmad.member_id).data.barcode
    container.checkin_service.scan(code, teacher.teacher_id, now=datetime(2024, 3, 2, 7, 0))
    _session(container, teacher, "2024-03-03", [(ahmad, "present")])

    feed = stats.recent_activities(limit=2)

    assert [a.kind for a in feed] == ["kbm_report", "checkin"]
    assert feed[0].occurred_at.date() == date(2024, 3, 3)
    assert "Ahmad" in feed[1].description
    assert stats.recent_activities(limit=0) == []
