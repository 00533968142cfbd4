from schoolsync.extensions import login_manager
from schoolsync.errors import Unauthorized
from schoolsync.utils.session import get_storage


@login_manager.user_loader
def load_user(user_id):
    return get_storage().get_user(int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    raise Unauthorized()
