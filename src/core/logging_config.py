import logging
from logging.config import dictConfig
from typing import Union

_configured = False


def configure_logging(level: Union[str, int] = "INFO"):
    """Install a single timestamped stream handler on the root logger. Idempotent."""
    global _configured
    if _configured:
        return

    if isinstance(level, str):
        level = level.upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                }
            },
            "root": {"handlers": ["default"], "level": level},
        }
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
