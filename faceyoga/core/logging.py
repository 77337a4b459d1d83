import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

from faceyoga.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Payment and grant decisions also go to payments.log.
PAYMENT_LOGGERS = ("faceyoga.services.purchase", "faceyoga.services.stripe")


def _rotating(filename: str, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "default",
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": 10485760,
        "backupCount": 5,
    }


def build_logging_config(level: str, to_file: bool) -> Dict[str, Any]:
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    }
    app_handlers = ["console"]
    payment_handlers = ["console"]
    if to_file:
        handlers["file"] = _rotating("faceyoga.log", level)
        handlers["error_file"] = _rotating("error.log", "ERROR")
        handlers["payments_file"] = _rotating("payments.log", "INFO")
        app_handlers = ["console", "file", "error_file"]
        payment_handlers = app_handlers + ["payments_file"]

    loggers: Dict[str, Any] = {
        "faceyoga": {"level": level, "handlers": app_handlers, "propagate": False},
        "faceyoga.core.decorators": {"level": level, "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        "apscheduler": {"level": "WARNING", "handlers": app_handlers, "propagate": False},
        "stripe": {"level": "WARNING", "handlers": payment_handlers, "propagate": False},
    }
    for name in PAYMENT_LOGGERS:
        loggers[name] = {"level": "INFO", "handlers": payment_handlers, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "root": {"level": "WARNING", "handlers": ["console"]},
        "loggers": loggers,
    }


def configure_logging():
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings.LOG_LEVEL.upper(), settings.LOG_TO_FILE))
