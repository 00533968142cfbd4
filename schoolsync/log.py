import logging.config


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    log_file = app.config.get("LOG_FILE")

    handlers = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    }

    if log_file:
        handlers["file"] = {
            "level": level,
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 1024 * 1024 * 5,  # 5 MB
            "backupCount": 5,
            "formatter": "verbose",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
                "style": "{",
            },
            "simple": {
                "format": "{levelname} {name} {message}",
                "style": "{",
            },
        },
        "handlers": handlers,
        "loggers": {
            "schoolsync": {
                "handlers": list(handlers),
                "level": level,
                "propagate": False,
            },
        },
    })

    app.logger.setLevel(level)
