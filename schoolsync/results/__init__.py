from flask import Blueprint

results_bp = Blueprint("results", __name__, url_prefix="/api")

from . import routes  # noqa: E402,F401
