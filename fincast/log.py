"""
Logging setup for FinCast.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers and formatters onto the root logger. JSON output uses
python-json-logger so log lines can be shipped to an aggregator unchanged.

Example
-------
>>> from fincast.log import setup_logging
>>> setup_logging("DEBUG", json_logs=True)
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

__all__ = ["setup_logging", "LOG_FORMAT"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO", json_logs: bool = False) -> logging.Logger:
    """Configure the root logger with a single stderr handler.

    Parameters
    ----------
    level : str, default "INFO"
        Logging level name ("DEBUG", "INFO", "WARNING", "ERROR").
    json_logs : bool, default False
        Emit one JSON object per line instead of plain text.

    Returns
    -------
    logging.Logger
        The configured root logger. Calling this twice replaces the handler
        rather than stacking a second one.
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        formatter: logging.Formatter = JsonFormatter(LOG_FORMAT)
    else:
        formatter = logging.Formatter(LOG_FORMAT)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
    return root
