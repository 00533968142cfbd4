from flask import Blueprint

academics_bp = Blueprint("academics", __name__, url_prefix="/api")

from . import routes  # noqa: E402,F401
