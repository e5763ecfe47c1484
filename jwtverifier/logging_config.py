from __future__ import annotations

import logging

from .settings import get_settings


def configure_logging(level: str | None = None) -> None:
    """
    Set the level of the ``jwtverifier`` package logger.

    Notes:
    - This is a library: it never adds handlers, the host application owns them.
    - With no ``level``, ``JWT_VERIFIER_LOG_LEVEL`` (default INFO) is used.
    """

    logging.getLogger("jwtverifier").setLevel((level or get_settings().log_level).upper())
