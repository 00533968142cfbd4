import logging

from schoolsync.errors import ConflictError, NotFound, ValidationError
from schoolsync.schemas import StudentAcademicsCreate, parse


logger = logging.getLogger(__name__)


def promote_student(storage, student_id, new_class_id, academic_year, remarks=None):
    """
    Move a student to ``new_class_id`` for ``academic_year``.

    Both writes, the user's placement and the new pending academic record,
    commit together or not at all. Moving into the same or a lower class is
    allowed.
    """
    student = storage.get_user(student_id)
    if student is None:
        raise NotFound(f"User {student_id} not found")

    if student.role != "student":
        raise ValidationError(fields=[{
            "field": "student_id",
            "message": "Only students can be promoted"
        }])

    if storage.get_class_level(new_class_id) is None:
        raise NotFound(f"ClassLevel {new_class_id} not found")

    existing = [
        record for record in storage.list_student_academics(student_id)
        if record.academic_year == academic_year
    ]
    if existing:
        raise ConflictError(
            f"Student already has an academic record for {academic_year}",
            fields=[{
                "field": "academic_year",
                "message": "Academic record already exists for this year"
            }]
        )

    data = parse(StudentAcademicsCreate, {
        "student_id": student_id,
        "class_level_id": new_class_id,
        "academic_year": academic_year,
        "promotion_status": "pending",
        "remarks": remarks
    })

    old_class_id = student.current_class_id

    with storage.transaction():
        student = storage.update_user(
            student_id,
            current_class_id=new_class_id,
            academic_year=academic_year
        )
        record = storage.create_student_academics(**data.model_dump())

    logger.info(
        "Promoted student %s from class %s to class %s for %s",
        student_id, old_class_id, new_class_id, academic_year
    )
    return student, record


def review_academics(storage, record_id, **changes):
    record = storage.update_student_academics(record_id, **changes)

    logger.info(
        "Academic record %s reviewed: %s",
        record_id, ", ".join(sorted(changes)) or "no changes"
    )
    return record
