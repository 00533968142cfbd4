from flask import g
from flask_login import current_user as _current_user
from schoolsync.extensions import db
from schoolsync.storage import Storage


def get_storage():
    """Per-request persistence handle bound to the request's session."""

    if "storage" not in g:
        g.storage = Storage(db.session)

    return g.storage


def current_user():

    if not _current_user.is_authenticated:
        return None

    return _current_user._get_current_object()


def current_role():
    user = current_user()
    return user.role if user else None
