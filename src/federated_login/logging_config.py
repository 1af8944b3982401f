"""
Root logging for the example app.

Decisions:
- The package itself only logs through module loggers (federated_login.*):
  route registration at INFO, degraded GitHub email lookups at WARNING,
  failed provider calls at DEBUG before the UpstreamError is raised.
- setup_logging is for the hosting app and may be called more than once; if
  a server (uvicorn) or pytest already installed handlers, only the level
  changes.
- LOG_LEVEL picks the level; unknown values fall back to INFO.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def log_level() -> int:
    """Level named by LOG_LEVEL (default INFO)."""
    level = logging.getLevelName((os.getenv("LOG_LEVEL") or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> None:
    root = logging.getLogger()
    root.setLevel(log_level())
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)
