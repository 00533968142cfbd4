from flask import jsonify, request
from schoolsync.errors import NotFound
from schoolsync.schemas import MaterialCreate, parse
from schoolsync.utils.decorators import authorize, login_required, requires
from schoolsync.utils.session import current_user, get_storage
from . import materials_bp


@materials_bp.route("/materials", methods=["GET"])
@requires("materials.read")
def list_materials():
    materials = get_storage().list_materials()
    return jsonify([m.to_dict() for m in materials])


@materials_bp.route("/materials/subject/<int:subject_id>", methods=["GET"])
@requires("materials.read")
def list_materials_by_subject(subject_id):
    materials = get_storage().list_materials_by_subject(subject_id)
    return jsonify([m.to_dict() for m in materials])


@materials_bp.route("/materials", methods=["POST"])
@requires("materials.create")
def create_material():
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = {**payload, "uploaded_by": current_user().id}

    data = parse(MaterialCreate, payload)

    storage = get_storage()
    if storage.get_subject(data.subject_id) is None:
        raise NotFound(f"Subject {data.subject_id} not found")

    material = storage.create_material(**data.model_dump())
    return jsonify(material.to_dict()), 201


@materials_bp.route("/materials/<int:id>", methods=["DELETE"])
@login_required
def delete_material(id):
    storage = get_storage()

    material = storage.get_material(id)
    if material is None:
        raise NotFound("Material not found")

    authorize("materials.delete", material)

    storage.delete_material(id)
    return jsonify({"message": "Material deleted"})
