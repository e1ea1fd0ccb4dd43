from decimal import Decimal

import pytest

from generus_attendance.core.enums import ErrorCode, TestType


def test_record_result_and_listings(container, teacher, ahmad, members_repo):
    siti = members_repo.add("Siti", "A1")
    svc = container.testing_service

    first = svc.record_result(member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="hadits", score=88, notes=" bagus ")
    svc.record_result(member_id=siti.member_id, teacher_id=teacher.teacher_id, test_type="tilawati", score="70.5")

    assert first.success
    assert first.data.test_type is TestType.HADITS
    assert first.data.score == Decimal("88")
    assert first.data.notes == "bagus"
    assert [r.member_id for r in svc.list_by_member(ahmad.member_id)] == [ahmad.member_id]
    assert [r.member_id for r in svc.list_by_type("tilawati")] == [siti.member_id]
    assert svc.list_by_type("unknown") == []
    assert len(svc.list_by_teacher(teacher.teacher_id)) == 2
    assert len(svc.list_all()) == 2


@pytest.mark.parametrize("score", [-1, 100.01, "abc", None, "NaN"])
def test_score_must_be_a_number_between_0_and_100(container, teacher, ahmad, score):
    result = container.testing_service.record_result(
        member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="alquran", score=score
    )
    assert result.error is ErrorCode.VALIDATION_ERROR


@pytest.mark.parametrize("score", [0, 100, "99.99"])
def test_score_bounds_are_inclusive(container, teacher, ahmad, score):
    assert container.testing_service.record_result(
        member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="alquran", score=score
    ).success


def test_member_and_teacher_must_exist(container, teacher, ahmad):
    svc = container.testing_service
    assert svc.record_result(member_id=404, teacher_id=teacher.teacher_id, test_type="alquran", score=50).error is ErrorCode.NOT_FOUND
    assert svc.record_result(member_id=ahmad.member_id, teacher_id=404, test_type="alquran", score=50).error is ErrorCode.NOT_FOUND
    assert svc.record_result(member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="fiqih", score=50).error is ErrorCode.VALIDATION_ERROR


def test_score_summary_is_zero_without_results(container, ahmad):
    summary = container.testing_service.score_summary(ahmad.member_id)
    assert summary.tests_taken == 0
    assert summary.average_score == Decimal("0.00")


def test_update_result_validates_changed_fields(container, teacher, ahmad, members_repo):
    svc = container.testing_service
    siti = members_repo.add("Siti", "A1")
    result = svc.record_result(member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="alquran", score=60).data

    updated = svc.update_result(result.test_id, {"score": "75.5", "test_type": "tilawati", "member_id": siti.member_id, "notes": " "})

    assert updated.success
    assert updated.data.score == Decimal("75.5")
    assert updated.data.test_type is TestType.TILAWATI
    assert updated.data.member_id == siti.member_id
    assert updated.data.notes is None
    assert updated.data.teacher_id == teacher.teacher_id

    assert svc.update_result(result.test_id, {"score": 101}).error is ErrorCode.VALIDATION_ERROR
    assert svc.update_result(result.test_id, {"member_id": 404}).error is ErrorCode.NOT_FOUND
    assert svc.update_result(result.test_id, {"teacher_id": "x"}).error is ErrorCode.VALIDATION_ERROR
    assert svc.update_result(404, {"score": 50}).error is ErrorCode.NOT_FOUND
    assert svc.list_all()[0].score == Decimal("75.5")


def test_delete_result(container, teacher, ahmad):
    svc = container.testing_service
    result = svc.record_result(member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type="hadits", score=90).data

    assert svc.delete_result(result.test_id).success
    assert svc.list_all() == []
    assert svc.delete_result(result.test_id).error is ErrorCode.NOT_FOUND


def test_summary_covers_every_test_type(container, teacher, ahmad):
    svc = container.testing_service
    for kind, score in [("alquran", 80), ("alquran", "85.5"), ("hadits", 71)]:
        svc.record_result(member_id=ahmad.member_id, teacher_id=teacher.teacher_id, test_type=kind, score=score)

    summary = svc.test_summary()

    assert summary.total_tests == 3
    assert summary.average_score == Decimal("78.83")
    by_type = {d.test_type: (d.count, d.average) for d in summary.distribution}
    assert by_type == {
        TestType.ALQURAN: (2, Decimal("82.75")),
        TestType.HADITS: (1, Decimal("71.00")),
        TestType.TILAWATI: (0, Decimal("0.00")),
    }


def test_summary_on_empty_store_is_zero(container):
    summary = container.testing_service.test_summary()

    assert summary.total_tests == 0
    assert summary.average_score == Decimal("0.00")
    assert all(d.count == 0 for d in summary.distribution)
