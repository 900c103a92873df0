"""
Logging setup for tools and demos.

Library modules only create module loggers; configuring handlers is left
to the program that runs a session.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO, fmt: str = LOG_FORMAT) -> None:
    """Configure root logging once for a command-line program."""
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")
    logging.basicConfig(level=level, format=fmt)
