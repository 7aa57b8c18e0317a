"""
Process-wide logging setup.

Call `configure_logging()` once from the entry point. Modules just do
`logger = logging.getLogger(__name__)` and log key=value style messages.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    resolved = level if level is not None else config.log_level()
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    # Keep uvicorn's access log in line with the app level.
    logging.getLogger("uvicorn.access").setLevel(resolved)
