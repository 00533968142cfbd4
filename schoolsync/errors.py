from flask import jsonify
from werkzeug.exceptions import HTTPException
from schoolsync.extensions import db


class SchoolSyncError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    error = "internal_error"
    message = "An unexpected error occurred"

    def __init__(self, message=None, fields=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.fields = fields or []

    def to_dict(self):
        payload = {
            "error": self.error,
            "message": self.message
        }
        if self.fields:
            payload["fields"] = self.fields
        return payload


class ValidationError(SchoolSyncError):
    status_code = 400
    error = "validation_error"
    message = "Invalid input"


class Unauthorized(SchoolSyncError):
    status_code = 401
    error = "unauthorized"
    message = "Authentication required"


class Forbidden(SchoolSyncError):
    status_code = 403
    error = "forbidden"
    message = "You do not have permission"


class NotFound(SchoolSyncError):
    status_code = 404
    error = "not_found"
    message = "Not found"


class ConflictError(SchoolSyncError):
    status_code = 409
    error = "conflict"
    message = "Conflicts with existing data"


class InternalError(SchoolSyncError):
    pass


def register_error_handlers(app):

    @app.errorhandler(SchoolSyncError)
    def handle_schoolsync_error(exc):
        if exc.status_code >= 500:
            app.logger.error("Request failed: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({
            "error": exc.name.lower().replace(" ", "_"),
            "message": exc.description
        }), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        app.logger.exception("Unexpected error: %s", exc)
        return jsonify(InternalError().to_dict()), 500
