"""Logging setup for the API process."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler used by every ``eclipse_api`` logger."""

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # pymongo's heartbeat/topology chatter is only useful when debugging
    logging.getLogger("pymongo").setLevel(logging.WARNING)
