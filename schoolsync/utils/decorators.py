from functools import wraps
from flask_login import current_user
from schoolsync.errors import Forbidden, Unauthorized
from schoolsync.utils.permissions import policy


def authorize(operation, target=None):
    """Raise unless the current user may perform ``operation`` on ``target``."""

    if policy.can_perform(operation, current_user, target):
        return

    if not current_user.is_authenticated:
        raise Unauthorized()

    raise Forbidden()


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):

        if not current_user.is_authenticated:
            raise Unauthorized()

        return f(*args, **kwargs)

    return wrapper


def requires(operation, target_arg=None):
    """
    Gate a view on an access-policy operation.

    ``target_arg`` names the URL argument handed to the rule as its target,
    for operations a user may perform on their own id.
    """

    def decorator(f):

        @wraps(f)
        def wrapper(*args, **kwargs):

            target = kwargs.get(target_arg) if target_arg else None
            authorize(operation, target)

            return f(*args, **kwargs)

        return wrapper

    return decorator
