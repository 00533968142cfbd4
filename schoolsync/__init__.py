from flask import Flask
from schoolsync.extensions import db, login_manager, migrate
from schoolsync.config import Config
from schoolsync.log import configure_logging
from schoolsync.errors import register_error_handlers
from schoolsync.blueprints import register_blueprints
from schoolsync.seeds import initialize_data, register_commands


def create_app(config=None):

    app = Flask(__name__)

    app.config.from_object(Config)

    if isinstance(config, dict):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)

    configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    register_error_handlers(app)
    register_blueprints(app)
    register_commands(app)

    initialize_data(app)

    return app
