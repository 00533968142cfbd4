from flask import jsonify, request
from schoolsync.schemas import (
    AttendanceCreate,
    AttendanceMonthlyQuery,
    AttendanceQuery,
    AttendanceSummaryQuery,
    AttendanceUpdate,
    BulkAttendanceCreate,
    changes,
    parse
)
from schoolsync.utils.decorators import authorize, login_required, requires
from schoolsync.utils.session import current_role, current_user, get_storage
from . import attendance_bp
from . import services


@attendance_bp.route("/attendance", methods=["GET"])
@requires("attendance.read")
def list_attendance():
    storage = get_storage()

    if current_role() == "student":
        records = storage.list_attendance_by_user(current_user().id)
        return jsonify([r.to_dict() for r in records])

    authorize("attendance.read_class")

    # Staff see nothing until they pick a class and a date
    if "class_id" not in request.args or "date" not in request.args:
        return jsonify([])

    query = parse(AttendanceQuery, request.args.to_dict())
    records = storage.list_attendance_by_class(query.class_id, query.date)

    return jsonify([r.to_dict() for r in records])


@attendance_bp.route("/attendance", methods=["POST"])
@requires("attendance.record")
def create_attendance():
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = {**payload, "marked_by": current_user().id}

    data = parse(AttendanceCreate, payload)
    record = services.record_attendance(get_storage(), **data.model_dump())

    return jsonify(record.to_dict()), 201


@attendance_bp.route("/attendance/bulk", methods=["POST"])
@requires("attendance.record")
def create_bulk_attendance():
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = {**payload, "marked_by": current_user().id}

    data = parse(BulkAttendanceCreate, payload)
    records = services.record_bulk_attendance(get_storage(), **data.model_dump())

    return jsonify([r.to_dict() for r in records]), 201


@attendance_bp.route("/attendance/<int:id>", methods=["PATCH"])
@requires("attendance.update")
def update_attendance(id):
    data = parse(AttendanceUpdate, request.get_json(silent=True))

    record = services.update_attendance(
        get_storage(), id, marked_by=current_user().id, **changes(data)
    )
    return jsonify(record.to_dict())


@attendance_bp.route("/attendance/summary", methods=["GET"])
@login_required
def attendance_summary():
    query = parse(AttendanceSummaryQuery, request.args.to_dict())
    authorize("attendance.stats", query.user_id)

    summary = services.monthly_summary(
        get_storage(), query.user_id, query.year, query.month
    )
    return jsonify(summary)


@attendance_bp.route("/attendance/monthly", methods=["GET"])
@login_required
def attendance_monthly():
    query = parse(AttendanceMonthlyQuery, request.args.to_dict())
    authorize("attendance.stats", query.user_id)

    series = services.yearly_series(get_storage(), query.user_id, query.year)
    return jsonify(series)
