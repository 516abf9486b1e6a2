"""
Logging setup for the API process and scripts. Service modules log through
logging.getLogger(__name__) and inherit the league_backend logger's level.
"""
import logging.config

from league_backend import config


def setup_logging(level: str | None = None, access_log: bool = True) -> None:
    level = (level or config.log_level()).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%Y-%m-%d %H:%M:%S"},
            # Uvicorn pre-formats access lines
            "access_simple": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
            "access": {"class": "logging.StreamHandler", "formatter": "access_simple"},
        },
        "loggers": {
            # App records propagate to the root console handler
            "league_backend": {"level": level},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": ("INFO" if access_log else "WARNING"),
                               "handlers": ["access"], "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    })
