import logging.config

from .consts import LOG_FILE_DEFAULT
from .utils import canonicalify, ensure_path

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s [%(levelname)s] [%(name)s] [%(threadName)s] - %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": logging.INFO,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": logging.DEBUG,
            "formatter": "default",
            "filename": LOG_FILE_DEFAULT,
            "maxBytes": 5 * 1024 * 1024,  # 5MB
            "backupCount": 10,
        },
    },
    "loggers": {
        "formrules": {
            "handlers": ["console", "file"],
            "level": logging.DEBUG,
            "propagate": True,
        }
    },
}


def setup(logfile=None):
    """Configure the ``formrules`` logger for a hosting application.

    The library itself never calls this; it only logs through
    ``logging.getLogger(__name__)``.
    """
    config = {**LOGGING_CONFIG, "handlers": dict(LOGGING_CONFIG["handlers"])}
    file_handler = dict(config["handlers"]["file"])
    if logfile:
        file_handler["filename"] = str(logfile)
    config["handlers"]["file"] = file_handler

    p = canonicalify(file_handler["filename"])
    if len(p.parts) > 1:
        ensure_path(p.parent)
    file_handler["filename"] = str(p)

    logging.config.dictConfig(config)


logger = logging.getLogger("formrules")
