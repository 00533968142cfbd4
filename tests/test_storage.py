from datetime import date, datetime, timedelta, timezone

import pytest

from schoolsync.errors import ConflictError, NotFound
from schoolsync.models import Attendance, ExamResult


def test_create_then_get_returns_input_plus_id(storage, school):
    fields = {
        "name": "Grade 7",
        "description": "Lower secondary",
        "academic_year": 2026
    }

    created = storage.create_class_level(**fields)
    fetched = storage.get_class_level(created.id)

    assert fetched.to_dict() == {"id": created.id, **fields}


def test_create_ignores_client_supplied_id(storage, school):
    created = storage.create_class_level(id=999, name="Grade 8", academic_year=2026)

    assert created.id != 999
    assert storage.get_class_level(999) is None


def test_missing_ids(storage, school):
    assert storage.get_user(9999) is None
    assert storage.get_subject(9999) is None

    with pytest.raises(NotFound):
        storage.update_user(9999, full_name="Nobody")

    with pytest.raises(NotFound):
        storage.delete_user(9999)

    with pytest.raises(NotFound):
        storage.update_class_level(9999, name="Nowhere")

    with pytest.raises(NotFound):
        storage.delete_subject(9999)


def test_update_never_changes_identifier(storage, school):
    updated = storage.update_subject(school.math, id=12345, name="Mathematics")

    assert updated.id == school.math
    assert storage.get_subject(school.math).name == "Mathematics"
    assert storage.get_subject(12345) is None

    user = storage.update_user(school.student, id=777, full_name="Sam S.")
    assert user.id == school.student
    assert storage.get_user(777) is None


def test_duplicate_username_is_rejected(storage, school):
    original = storage.get_user(school.student).to_dict()

    with pytest.raises(ConflictError) as exc_info:
        storage.create_user(
            "Passw0rd1", username="STUDENT", role="admin",
            full_name="Impostor", email="impostor@example.com"
        )

    assert exc_info.value.fields[0]["field"] == "username"
    assert storage.get_user(school.student).to_dict() == original
    assert len(storage.list_users()) == 5


def test_password_is_hashed_and_never_serialized(storage, school):
    user = storage.get_user(school.teacher)

    assert user.password_hash != "Passw0rd1"
    assert user.check_password("Passw0rd1")
    assert "password_hash" not in user.to_dict()


def test_filtered_listings(storage, school):
    assert [u.id for u in storage.list_users_by_role("teacher")] == [
        school.teacher, school.other_teacher
    ]
    assert [u.id for u in storage.list_users_by_class(school.grade5)] == [
        school.student, school.other_student
    ]
    assert [s.id for s in storage.list_subjects_by_class(school.grade6)] == [school.science]
    assert [s.id for s in storage.list_subjects_by_teacher(school.teacher)] == [school.math]


def test_attendance_range_query(storage, school):
    for day, status in [(2, "present"), (3, "absent"), (30, "late")]:
        storage.create_attendance(
            user_id=school.student,
            subject_id=school.math,
            class_level_id=school.grade5,
            date=date(2024, 9, day),
            status=status,
            marked_by=school.teacher
        )

    records = storage.list_attendance_in_range(
        school.student, date(2024, 9, 1), date(2024, 9, 15)
    )

    assert [r.status for r in records] == ["present", "absent"]
    assert records[0].notification_sent is False


def test_delete_user_leaves_dependent_rows(storage, school):
    storage.create_attendance(
        user_id=school.student,
        subject_id=school.math,
        class_level_id=school.grade5,
        date=date(2024, 9, 2),
        status="present",
        marked_by=school.teacher
    )
    storage.create_exam_result(
        student_id=school.student,
        subject_id=school.math,
        academic_year=2024,
        term=1,
        marks=80,
        grade="A",
        exam_date=date(2024, 12, 1)
    )

    storage.delete_user(school.student)

    assert storage.get_user(school.student) is None
    assert storage.session.query(Attendance).filter_by(user_id=school.student).count() == 1
    assert storage.session.query(ExamResult).filter_by(student_id=school.student).count() == 1


def test_transaction_rolls_back_every_write(storage, school):
    with pytest.raises(RuntimeError):
        with storage.transaction():
            storage.create_class_level(name="Grade 9", academic_year=2026)
            storage.update_user(school.student, full_name="Changed")
            raise RuntimeError("boom")

    assert [c.name for c in storage.list_class_levels()] == ["Grade 5", "Grade 6"]
    assert storage.get_user(school.student).full_name == "Sam Student"


def test_created_at_is_assigned_in_utc(storage, school):
    announcement = storage.create_announcement(
        title="Exams", content="Start Monday", author_id=school.admin,
        created_at=datetime(2000, 1, 1)
    )

    now = datetime.now(timezone.utc).replace(tzinfo=None)
    assert abs(now - announcement.created_at.replace(tzinfo=None)) < timedelta(minutes=1)


def test_current_academic_year(storage, school):
    assert storage.get_current_academic_year(school.student) == 2024
    assert storage.get_current_academic_year(school.teacher) is None
    assert storage.get_current_academic_year(9999) is None
