# salonbook/utils/my_logging.py
"""Logging configuration shared by the API and the notification worker"""
import logging
import sys
from salonbook.config.settings import get_settings

# Chatty at INFO under normal booking traffic
QUIET_LOGGERS = [
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "celery",
    "kombu",
    "uvicorn.access",
]

# Request dumps include customer phone numbers and message bodies
TWILIO_LOGGER = "twilio.http_client"


def setup_logging(verbose=True, level=None):
    """Configure root logging; `level` overrides LOG_LEVEL from settings"""
    settings = get_settings()

    if level is None:
        level = settings.LOG_LEVEL if verbose else "WARNING"
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    logging.getLogger(TWILIO_LOGGER).setLevel(logging.WARNING)

    if not verbose:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.ERROR)

    return level
