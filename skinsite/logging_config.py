"""Logging configuration for the skinsite command line."""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

PLAIN_FORMAT = "%(levelname)s %(message)s"


def setup_logging(log_level: str = "INFO", *, json_output: bool = False) -> None:
    """Configure the root logger to write build progress to stderr.

    Parameters
    ----------
    log_level : str, optional
        Level name such as ``"DEBUG"`` or ``"WARNING"``; unknown names fall
        back to ``INFO``.
    json_output : bool, optional
        Emit one JSON object per record instead of plain text, for CI log
        collectors.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    formatter: logging.Formatter
    if json_output:
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    else:
        formatter = logging.Formatter(PLAIN_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)


__all__ = ["setup_logging"]
