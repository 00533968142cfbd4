from flask import jsonify, request
from schoolsync.errors import NotFound, ValidationError
from schoolsync.schemas import SubjectCreate, SubjectUpdate, changes, parse
from schoolsync.utils.decorators import requires
from schoolsync.utils.session import get_storage
from . import subjects_bp


def check_subject_references(storage, fields):
    class_level_id = fields.get("class_level_id")
    if class_level_id is not None and storage.get_class_level(class_level_id) is None:
        raise NotFound(f"ClassLevel {class_level_id} not found")

    teacher_id = fields.get("teacher_id")
    if teacher_id is not None:
        teacher = storage.get_user(teacher_id)
        if teacher is None:
            raise NotFound(f"User {teacher_id} not found")
        if teacher.role != "teacher":
            raise ValidationError(fields=[{
                "field": "teacher_id",
                "message": "Assigned user must be a teacher"
            }])


@subjects_bp.route("/subjects", methods=["GET"])
@requires("subjects.read")
def list_subjects():
    subjects = get_storage().list_subjects()
    return jsonify([s.to_dict() for s in subjects])


@subjects_bp.route("/subjects/class/<int:class_id>", methods=["GET"])
@requires("subjects.read")
def list_subjects_by_class(class_id):
    subjects = get_storage().list_subjects_by_class(class_id)
    return jsonify([s.to_dict() for s in subjects])


@subjects_bp.route("/subjects/teacher/<int:teacher_id>", methods=["GET"])
@requires("subjects.read")
def list_subjects_by_teacher(teacher_id):
    subjects = get_storage().list_subjects_by_teacher(teacher_id)
    return jsonify([s.to_dict() for s in subjects])


@subjects_bp.route("/subjects", methods=["POST"])
@requires("subjects.manage")
def create_subject():
    data = parse(SubjectCreate, request.get_json(silent=True))

    storage = get_storage()
    fields = data.model_dump()
    check_subject_references(storage, fields)

    subject = storage.create_subject(**fields)
    return jsonify(subject.to_dict()), 201


@subjects_bp.route("/subjects/<int:id>", methods=["PATCH"])
@requires("subjects.manage")
def update_subject(id):
    data = parse(SubjectUpdate, request.get_json(silent=True))

    storage = get_storage()
    fields = changes(data)
    check_subject_references(storage, fields)

    subject = storage.update_subject(id, **fields)
    return jsonify(subject.to_dict())


@subjects_bp.route("/subjects/<int:id>", methods=["DELETE"])
@requires("subjects.manage")
def delete_subject(id):
    get_storage().delete_subject(id)
    return jsonify({"message": "Subject deleted"})
