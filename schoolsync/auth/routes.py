from flask import current_app, jsonify, request
from flask_login import login_user, logout_user
from schoolsync.errors import Unauthorized
from schoolsync.schemas import LoginRequest, parse
from schoolsync.utils.decorators import login_required
from schoolsync.utils.session import current_user, get_storage
from .loaders import load_user  # noqa: F401
from . import auth_bp


@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse(LoginRequest, request.get_json(silent=True))

    user = get_storage().get_user_by_username(data.username)

    if not user or not user.check_password(data.password):
        current_app.logger.warning("Failed login for %s", data.username)
        raise Unauthorized("Invalid credentials")

    login_user(user)

    return jsonify(user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "You have been logged out"})


@auth_bp.route("/user", methods=["GET"])
@login_required
def me():
    return jsonify(current_user().to_dict())
