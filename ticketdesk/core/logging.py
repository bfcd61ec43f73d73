# ticketdesk/core/logging.py
import logging
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=_LOG_FORMAT, stream=sys.stdout)
    logging.getLogger("ticketdesk").setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
