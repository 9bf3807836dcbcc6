"""Logging setup for Neuron Graph."""

import logging.config
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure console logging for the game and its tools.

    Args:
        level: Root log level name (e.g. "DEBUG", "INFO").
    """
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,

        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },

        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stdout,
            },
        },

        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
                "propagate": True,
            },
            # pygame prints its own banner; keep its logger quiet
            "pygame": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)
