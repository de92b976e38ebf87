"""
Exception hierarchy
===================

Every failure raised by the package derives from `SigactsError`, so callers
(the HTTP layer, the CLI) can tell engine failures apart from programming errors.
"""

from __future__ import annotations


class SigactsError(Exception):
    """Base exception for all SIGACTS failures."""


class SigactsConfigError(SigactsError):
    """Raised for invalid runtime configuration."""


class DatasetLoadError(SigactsError):
    """Raised when the incident CSV cannot be read or parsed."""


class NotReadyError(SigactsError):
    """Raised when a query runs before the dataset finished loading."""


class EngineStateError(SigactsError):
    """Raised for an illegal engine lifecycle transition."""
