from __future__ import annotations

import logging
from logging.config import dictConfig

from app.core.config import Settings


def configure_logging(settings: Settings) -> None:
    log_format = (
        "%(levelname)s %(asctime)s %(name)s %(message)s"
        if not settings.log_json
        else '{"level":"%(levelname)s","time":"%(asctime)s","logger":"%(name)s","message":"%(message)s"}'
    )

    handlers: dict[str, dict[str, object]] = {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        }
    }
    if settings.log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "standard",
            "filename": settings.log_file,
            "encoding": "utf-8",
        }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": log_format,
                }
            },
            "handlers": handlers,
            "root": {
                "level": settings.log_level,
                "handlers": list(handlers),
            },
        }
    )

    logging.getLogger("uvicorn.error").setLevel(settings.log_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
