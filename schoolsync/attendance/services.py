import logging

from schoolsync.errors import NotFound, ValidationError
from schoolsync.utils.academic import attendance_percentage, month_bounds


logger = logging.getLogger(__name__)


def _check_references(storage, user_id, subject_id, class_level_id):
    if storage.get_user(user_id) is None:
        raise NotFound(f"User {user_id} not found")

    subject = storage.get_subject(subject_id)
    if subject is None:
        raise NotFound(f"Subject {subject_id} not found")

    if storage.get_class_level(class_level_id) is None:
        raise NotFound(f"ClassLevel {class_level_id} not found")

    if subject.class_level_id != class_level_id:
        raise ValidationError(fields=[{
            "field": "subject_id",
            "message": "Subject does not belong to this class level"
        }])


def _upsert(storage, user_id, subject_id, class_level_id, date, status, marked_by, notes=None):
    record = storage.find_attendance(user_id, subject_id, date)

    if record is None:
        record = storage.create_attendance(
            user_id=user_id,
            subject_id=subject_id,
            class_level_id=class_level_id,
            date=date,
            status=status,
            marked_by=marked_by,
            notes=notes
        )
    else:
        record = storage.update_attendance(
            record.id,
            class_level_id=class_level_id,
            status=status,
            marked_by=marked_by,
            notes=notes
        )

    refresh_attendance_stats(storage, user_id, subject_id, date.month, date.year)
    return record


def record_attendance(storage, user_id, subject_id, class_level_id, date, status, marked_by, notes=None):
    """
    Create or replace the single attendance record for (user, subject, date).

    A second mark for the same day overwrites status, notes, class level and
    marker of the existing row. The month's stats row is refreshed in the
    same transaction.
    """
    _check_references(storage, user_id, subject_id, class_level_id)

    with storage.transaction():
        record = _upsert(
            storage, user_id, subject_id, class_level_id,
            date, status, marked_by, notes
        )

    logger.info(
        "Attendance %s for user %s subject %s on %s marked by %s",
        status, user_id, subject_id, date, marked_by
    )
    return record


def record_bulk_attendance(storage, student_ids, subject_id, class_level_id, date, status, marked_by, notes=None):
    """Mark many students with one status; all or nothing."""
    for student_id in student_ids:
        _check_references(storage, student_id, subject_id, class_level_id)

    records = []
    with storage.transaction():
        for student_id in dict.fromkeys(student_ids):
            records.append(_upsert(
                storage, student_id, subject_id, class_level_id,
                date, status, marked_by, notes
            ))

    logger.info(
        "Bulk attendance %s for %d students, subject %s on %s",
        status, len(records), subject_id, date
    )
    return records


def count_statuses(records):
    counts = {"present_days": 0, "absent_days": 0, "late_days": 0}

    for record in records:
        counts[f"{record.status}_days"] += 1

    return counts


def refresh_attendance_stats(storage, user_id, subject_id, month, year):
    start, end = month_bounds(year, month)
    records = storage.list_attendance_in_range(user_id, start, end, subject_id=subject_id)

    return storage.upsert_attendance_stats(
        user_id, subject_id, month, year, **count_statuses(records)
    )


def summarize(counts):
    return {
        **counts,
        "attendance_percentage": attendance_percentage(
            counts["present_days"],
            counts["absent_days"],
            counts["late_days"]
        )
    }


def monthly_summary(storage, user_id, year, month):
    """Present/absent/late counts and attendance percentage for one month."""
    start, end = month_bounds(year, month)
    records = storage.list_attendance_in_range(user_id, start, end)

    return {
        "user_id": user_id,
        "month": month,
        "year": year,
        "stats": summarize(count_statuses(records))
    }


def subject_breakdown(storage, user_id, year):
    """Stored per-subject stats for a year, grouped by month."""
    breakdown = {}

    for stats in storage.list_attendance_stats(user_id, year):
        breakdown.setdefault(stats.month, []).append({
            "subject_id": stats.subject_id,
            **summarize({
                "present_days": stats.present_days,
                "absent_days": stats.absent_days,
                "late_days": stats.late_days
            })
        })

    return breakdown


def yearly_series(storage, user_id, year):
    """One summary per month that has attendance records, split by subject."""
    months = {}
    breakdown = subject_breakdown(storage, user_id, year)

    for month, status, total in storage.count_attendance_by_month(user_id, year):
        counts = months.setdefault(
            int(month),
            {"present_days": 0, "absent_days": 0, "late_days": 0}
        )
        counts[f"{status}_days"] += total

    return [
        {
            "user_id": user_id,
            "month": month,
            "year": year,
            "stats": summarize(counts),
            "subjects": breakdown.get(month, [])
        }
        for month, counts in sorted(months.items())
    ]


def update_attendance(storage, id, marked_by, **changes):
    record = storage.get_attendance(id)
    if record is None:
        raise NotFound(f"Attendance {id} not found")

    with storage.transaction():
        record = storage.update_attendance(id, marked_by=marked_by, **changes)
        refresh_attendance_stats(
            storage, record.user_id, record.subject_id,
            record.date.month, record.date.year
        )

    return record
