import logging
from logging.config import dictConfig


def setup_logging(level: str = "INFO") -> None:
    for name in ("urllib3", "requests"):
        logging.getLogger(name).setLevel(logging.WARNING)

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            },
        },
        "loggers": {
            "clipmaker": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    })
