"""Logging helpers for the leaderboard scoring system."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def configure_console_only_logging(level: int = logging.INFO) -> None:
    """Route every engine log record to the console only, replacing existing root handlers."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_console_only_logging", "LOG_FORMAT"]
