from flask import jsonify, request
from schoolsync.errors import NotFound, ValidationError
from schoolsync.models import ROLES
from schoolsync.schemas import (
    ProfileUpdate,
    UserCreate,
    UserUpdate,
    changes,
    parse
)
from schoolsync.utils.decorators import requires
from schoolsync.utils.permissions import policy
from schoolsync.utils.session import current_user, get_storage
from . import users_bp


def check_class_reference(storage, fields):
    class_id = fields.get("current_class_id")
    if class_id is not None and storage.get_class_level(class_id) is None:
        raise NotFound(f"ClassLevel {class_id} not found")


@users_bp.route("/users", methods=["GET"])
@requires("users.list")
def list_users():
    users = get_storage().list_users()
    return jsonify([u.to_dict() for u in users])


@users_bp.route("/users", methods=["POST"])
@requires("users.create")
def create_user():
    data = parse(UserCreate, request.get_json(silent=True))

    fields = data.model_dump()
    password = fields.pop("password")

    storage = get_storage()
    check_class_reference(storage, fields)

    user = storage.create_user(password, **fields)
    return jsonify(user.to_dict()), 201


@users_bp.route("/users/<role>", methods=["GET"])
@requires("users.list")
def list_users_by_role(role):
    if role not in ROLES:
        raise ValidationError(
            "Invalid role",
            fields=[{"field": "role", "message": f"Must be one of {', '.join(ROLES)}"}]
        )

    users = get_storage().list_users_by_role(role)
    return jsonify([u.to_dict() for u in users])


@users_bp.route("/users/class/<int:class_id>", methods=["GET"])
@requires("users.list_by_class")
def list_students_by_class(class_id):
    users = get_storage().list_users_by_class(class_id)
    return jsonify([u.to_dict() for u in users])


@users_bp.route("/users/<int:id>", methods=["PATCH"])
@requires("users.update", target_arg="id")
def update_user(id):
    actor = current_user()

    # Only admins may touch role and placement fields
    if policy.can_perform("users.change_role", actor):
        contract = UserUpdate
    else:
        contract = ProfileUpdate

    data = parse(contract, request.get_json(silent=True))

    storage = get_storage()
    if storage.get_user(id) is None:
        raise NotFound("User not found")

    fields = changes(data)
    check_class_reference(storage, fields)

    user = storage.update_user(id, **fields)
    return jsonify(user.to_dict())


@users_bp.route("/users/<int:id>", methods=["DELETE"])
@requires("users.delete")
def delete_user(id):
    get_storage().delete_user(id)
    return jsonify({"message": "User deleted"})
