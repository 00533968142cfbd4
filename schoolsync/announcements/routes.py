from flask import jsonify, request
from schoolsync.errors import NotFound
from schoolsync.schemas import AnnouncementCreate, parse
from schoolsync.utils.decorators import authorize, login_required, requires
from schoolsync.utils.session import current_user, get_storage
from . import announcements_bp


@announcements_bp.route("/announcements", methods=["GET"])
@requires("announcements.read")
def list_announcements():
    announcements = get_storage().list_announcements()
    return jsonify([a.to_dict() for a in announcements])


@announcements_bp.route("/announcements", methods=["POST"])
@requires("announcements.create")
def create_announcement():
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        payload = {**payload, "author_id": current_user().id}

    data = parse(AnnouncementCreate, payload)

    announcement = get_storage().create_announcement(**data.model_dump())
    return jsonify(announcement.to_dict()), 201


@announcements_bp.route("/announcements/<int:id>", methods=["DELETE"])
@login_required
def delete_announcement(id):
    storage = get_storage()

    announcement = storage.get_announcement(id)
    if announcement is None:
        raise NotFound("Announcement not found")

    authorize("announcements.delete", announcement)

    storage.delete_announcement(id)
    return jsonify({"message": "Announcement deleted"})
