from flask import jsonify, request
from schoolsync.errors import NotFound
from schoolsync.schemas import ClassLevelCreate, ClassLevelUpdate, changes, parse
from schoolsync.utils.decorators import requires
from schoolsync.utils.session import get_storage
from . import classes_bp


@classes_bp.route("/class-levels", methods=["GET"])
@requires("class_levels.read")
def list_class_levels():
    class_levels = get_storage().list_class_levels()
    return jsonify([c.to_dict() for c in class_levels])


@classes_bp.route("/class-levels/<int:id>", methods=["GET"])
@requires("class_levels.read")
def get_class_level(id):
    class_level = get_storage().get_class_level(id)

    if class_level is None:
        raise NotFound("Class level not found")

    return jsonify(class_level.to_dict())


@classes_bp.route("/class-levels", methods=["POST"])
@requires("class_levels.manage")
def create_class_level():
    data = parse(ClassLevelCreate, request.get_json(silent=True))

    class_level = get_storage().create_class_level(**data.model_dump())
    return jsonify(class_level.to_dict()), 201


@classes_bp.route("/class-levels/<int:id>", methods=["PATCH"])
@requires("class_levels.manage")
def update_class_level(id):
    data = parse(ClassLevelUpdate, request.get_json(silent=True))

    class_level = get_storage().update_class_level(id, **changes(data))
    return jsonify(class_level.to_dict())
