from datetime import date

import pytest

from schoolsync.academics.services import promote_student, review_academics
from schoolsync.attendance.services import (
    monthly_summary,
    record_attendance,
    record_bulk_attendance,
    update_attendance,
    yearly_series
)
from schoolsync.errors import ConflictError, NotFound, ValidationError
from schoolsync.models import Attendance
from schoolsync.utils.academic import attendance_percentage, grade_from_marks, month_bounds


def mark(storage, school, day, status, user_id=None, month=9):
    return record_attendance(
        storage,
        user_id=user_id or school.student,
        subject_id=school.math,
        class_level_id=school.grade5,
        date=date(2024, month, day),
        status=status,
        marked_by=school.teacher
    )


# ---------------- ATTENDANCE ---------------- #

def test_attendance_percentage():
    assert attendance_percentage(18, 2, 0) == 90.0
    assert attendance_percentage(0, 0, 0) == 0
    assert attendance_percentage(1, 0, 1) == 50.0


def test_record_attendance_upserts_one_row_per_day(storage, school):
    first = mark(storage, school, 2, "absent")
    second = record_attendance(
        storage,
        user_id=school.student,
        subject_id=school.math,
        class_level_id=school.grade5,
        date=date(2024, 9, 2),
        status="late",
        marked_by=school.admin,
        notes="Bus delay"
    )

    assert second.id == first.id
    rows = storage.session.query(Attendance).filter_by(user_id=school.student).all()
    assert len(rows) == 1
    assert rows[0].status == "late"
    assert rows[0].marked_by == school.admin
    assert rows[0].notes == "Bus delay"


def test_record_attendance_refreshes_stats(storage, school):
    mark(storage, school, 2, "present")
    mark(storage, school, 3, "present")
    mark(storage, school, 4, "absent")
    mark(storage, school, 4, "late")

    stats = storage.get_attendance_stats(school.student, school.math, 9, 2024)

    assert (stats.present_days, stats.absent_days, stats.late_days) == (2, 0, 1)


def test_record_attendance_checks_references(storage, school):
    with pytest.raises(NotFound):
        mark(storage, school, 2, "present", user_id=9999)

    with pytest.raises(ValidationError):
        record_attendance(
            storage,
            user_id=school.student,
            subject_id=school.science,
            class_level_id=school.grade5,
            date=date(2024, 9, 2),
            status="present",
            marked_by=school.teacher
        )

    assert storage.list_attendance_by_user(school.student) == []


def test_bulk_attendance_is_all_or_nothing(storage, school):
    with pytest.raises(NotFound):
        record_bulk_attendance(
            storage,
            student_ids=[school.student, 9999],
            subject_id=school.math,
            class_level_id=school.grade5,
            date=date(2024, 9, 2),
            status="present",
            marked_by=school.teacher
        )

    assert storage.session.query(Attendance).count() == 0

    records = record_bulk_attendance(
        storage,
        student_ids=[school.student, school.other_student, school.student],
        subject_id=school.math,
        class_level_id=school.grade5,
        date=date(2024, 9, 2),
        status="present",
        marked_by=school.teacher
    )

    assert sorted(r.user_id for r in records) == [school.student, school.other_student]
    assert [r.status for r in storage.list_attendance_by_class(school.grade5, date(2024, 9, 2))] == [
        "present", "present"
    ]


def test_update_attendance_refreshes_stats(storage, school):
    record = mark(storage, school, 2, "absent")

    updated = update_attendance(storage, record.id, marked_by=school.admin, status="present")

    assert updated.status == "present"
    stats = storage.get_attendance_stats(school.student, school.math, 9, 2024)
    assert (stats.present_days, stats.absent_days) == (1, 0)

    with pytest.raises(NotFound):
        update_attendance(storage, 9999, marked_by=school.admin, status="present")


def test_monthly_summary(storage, school):
    for day in range(1, 19):
        mark(storage, school, day, "present")
    mark(storage, school, 19, "absent")
    mark(storage, school, 20, "absent")
    mark(storage, school, 1, "late", month=10)

    summary = monthly_summary(storage, school.student, 2024, 9)

    assert summary["stats"] == {
        "present_days": 18,
        "absent_days": 2,
        "late_days": 0,
        "attendance_percentage": 90.0
    }

    empty = monthly_summary(storage, school.student, 2024, 11)
    assert empty["stats"]["attendance_percentage"] == 0


def test_yearly_series(storage, school):
    mark(storage, school, 2, "present")
    mark(storage, school, 3, "absent")
    mark(storage, school, 1, "late", month=10)

    series = yearly_series(storage, school.student, 2024)

    assert [entry["month"] for entry in series] == [9, 10]
    assert series[0]["stats"]["attendance_percentage"] == 50.0
    assert series[1]["stats"]["late_days"] == 1
    assert series[0]["subjects"] == [{
        "subject_id": school.math,
        "present_days": 1,
        "absent_days": 1,
        "late_days": 0,
        "attendance_percentage": 50.0
    }]
    assert yearly_series(storage, school.student, 2023) == []


# ---------------- PROMOTION ---------------- #

def test_promote_student(storage, school):
    student, record = promote_student(
        storage, school.student, school.grade6, 2025, remarks="Ready"
    )

    assert student.current_class_id == school.grade6
    assert student.academic_year == 2025
    assert record.to_dict() == {
        "id": record.id,
        "student_id": school.student,
        "class_level_id": school.grade6,
        "academic_year": 2025,
        "overall_grade": None,
        "promotion_status": "pending",
        "remarks": "Ready"
    }


def test_promotion_into_same_class_is_allowed(storage, school):
    student, record = promote_student(storage, school.student, school.grade5, 2025)

    assert student.current_class_id == school.grade5
    assert record.class_level_id == school.grade5


def test_promotion_preconditions(storage, school):
    with pytest.raises(NotFound):
        promote_student(storage, 9999, school.grade6, 2025)

    with pytest.raises(ValidationError):
        promote_student(storage, school.teacher, school.grade6, 2025)

    with pytest.raises(NotFound):
        promote_student(storage, school.student, 9999, 2025)

    assert storage.list_student_academics(school.student) == []


def test_second_promotion_for_same_year_conflicts(storage, school):
    promote_student(storage, school.student, school.grade6, 2025)

    with pytest.raises(ConflictError):
        promote_student(storage, school.student, school.grade5, 2025)

    assert storage.get_user(school.student).current_class_id == school.grade6
    assert len(storage.list_student_academics(school.student)) == 1


def test_promotion_is_atomic(storage, school, monkeypatch):

    def fail(**fields):
        raise RuntimeError("disk full")

    monkeypatch.setattr(storage, "create_student_academics", fail)

    with pytest.raises(RuntimeError):
        promote_student(storage, school.student, school.grade6, 2025)

    student = storage.get_user(school.student)
    assert student.current_class_id == school.grade5
    assert student.academic_year == 2024
    assert storage.list_student_academics(school.student) == []


def test_review_academics(storage, school):
    _, record = promote_student(storage, school.student, school.grade6, 2025)

    reviewed = review_academics(
        storage, record.id, overall_grade="B", promotion_status="promoted"
    )

    assert reviewed.overall_grade == "B"
    assert reviewed.promotion_status == "promoted"

    with pytest.raises(NotFound):
        review_academics(storage, 9999, remarks="Missing")


# ---------------- HELPERS ---------------- #

def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


@pytest.mark.parametrize("marks, grade", [
    (100, "A"), (75, "A"), (70, "B"), (55, "C"), (45, "D"), (10, "F"),
])
def test_grade_from_marks(marks, grade):
    assert grade_from_marks(marks) == grade
