import os


class Config:

    SECRET_KEY = os.environ.get(
        "SECRET_KEY",
        "schoolsync_secret_key"
    )

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///schoolsync.db"
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rotating file handler is only attached when a path is given
    LOG_FILE = os.environ.get("LOG_FILE")


class TestConfig(Config):

    TESTING = True

    SECRET_KEY = "schoolsync_test_key"

    SQLALCHEMY_DATABASE_URI = "sqlite://"

    LOG_LEVEL = "WARNING"

    LOG_FILE = None
