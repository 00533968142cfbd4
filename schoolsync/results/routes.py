from flask import jsonify, request
from schoolsync.errors import NotFound, ValidationError
from schoolsync.schemas import ExamResultCreate, ExamResultUpdate, changes, parse
from schoolsync.utils.academic import grade_from_marks
from schoolsync.utils.decorators import requires
from schoolsync.utils.session import get_storage
from . import results_bp


@results_bp.route("/students/<int:id>/results", methods=["GET"])
@requires("results.read", target_arg="id")
def list_results(id):
    results = get_storage().list_exam_results(id)
    return jsonify([r.to_dict() for r in results])


@results_bp.route("/results", methods=["POST"])
@requires("results.create")
def create_result():
    data = parse(ExamResultCreate, request.get_json(silent=True))

    storage = get_storage()

    student = storage.get_user(data.student_id)
    if student is None:
        raise NotFound(f"User {data.student_id} not found")
    if student.role != "student":
        raise ValidationError(fields=[{
            "field": "student_id",
            "message": "Exam results can only be recorded for students"
        }])

    if storage.get_subject(data.subject_id) is None:
        raise NotFound(f"Subject {data.subject_id} not found")

    fields = data.model_dump()
    if fields["grade"] is None:
        fields["grade"] = grade_from_marks(fields["marks"])

    result = storage.create_exam_result(**fields)
    return jsonify(result.to_dict()), 201


@results_bp.route("/results/<int:id>", methods=["PATCH"])
@requires("results.update")
def update_result(id):
    data = parse(ExamResultUpdate, request.get_json(silent=True))

    fields = changes(data)
    # A new mark without an explicit grade regrades the result
    if "marks" in fields and "grade" not in fields:
        fields["grade"] = grade_from_marks(fields["marks"])

    result = get_storage().update_exam_result(id, **fields)
    return jsonify(result.to_dict())
