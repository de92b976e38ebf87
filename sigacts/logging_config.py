"""
Structured logging
==================

Library modules log structured events (`log.info("dataset_loaded", count=...)`)
through structlog, rendered as one JSON object per line.
"""

from __future__ import annotations

from typing import Any

import structlog

_CONFIGURED = False


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to `name`."""
    global _CONFIGURED
    if not _CONFIGURED:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            cache_logger_on_first_use=True,
        )
        _CONFIGURED = True
    return structlog.get_logger(name)
