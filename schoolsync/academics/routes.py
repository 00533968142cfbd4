from flask import jsonify, request
from schoolsync.errors import NotFound
from schoolsync.schemas import PromotionRequest, StudentAcademicsUpdate, changes, parse
from schoolsync.utils.decorators import requires
from schoolsync.utils.session import get_storage
from . import academics_bp
from . import services


@academics_bp.route("/students/<int:id>/academics", methods=["GET"])
@requires("academics.read", target_arg="id")
def list_academics(id):
    records = get_storage().list_student_academics(id)
    return jsonify([r.to_dict() for r in records])


@academics_bp.route("/students/<int:id>/academic-year", methods=["GET"])
@requires("academics.read", target_arg="id")
def current_academic_year(id):
    storage = get_storage()

    if storage.get_user(id) is None:
        raise NotFound("User not found")

    return jsonify({
        "student_id": id,
        "academic_year": storage.get_current_academic_year(id)
    })


@academics_bp.route("/students/<int:id>/promote", methods=["POST"])
@requires("students.promote")
def promote(id):
    data = parse(PromotionRequest, request.get_json(silent=True))

    student, record = services.promote_student(
        get_storage(),
        id,
        data.new_class_id,
        data.academic_year,
        remarks=data.remarks
    )

    return jsonify({
        "student": student.to_dict(),
        "academics": record.to_dict()
    })


@academics_bp.route("/academics/<int:id>", methods=["PATCH"])
@requires("academics.update")
def review(id):
    data = parse(StudentAcademicsUpdate, request.get_json(silent=True))

    record = services.review_academics(get_storage(), id, **changes(data))
    return jsonify(record.to_dict())
