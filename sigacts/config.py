"""
Runtime configuration
=====================

All environment parsing lives here. A `.env` file in the working directory is
honoured (python-dotenv); real environment variables take precedence.
Other modules receive a `SigactsConfig` instead of reading `os.environ`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import SigactsConfigError

DEFAULT_CSV_PATH = Path("data") / "IQ_SIGACTs_-_cleaned.csv"
DEFAULT_BOUNDARY_PATH = Path("data") / "iq.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class SigactsConfig:
    """Validated runtime configuration.

    Attributes:
        csv_path: Incident CSV export to load at startup.
        boundary_path: Optional GeoJSON boundary document.
        host: Interface the HTTP server binds to.
        port: TCP port the HTTP server listens on.
    """

    csv_path: Path
    boundary_path: Path
    host: str
    port: int

    @classmethod
    def from_env(cls) -> "SigactsConfig":
        """Build config from `.env` and process environment variables.

        Raises:
            SigactsConfigError: If PORT is not a valid TCP port.
        """
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path)
        return cls(
            csv_path=Path(os.getenv("SIGACTS_CSV_PATH", str(DEFAULT_CSV_PATH))).expanduser(),
            boundary_path=Path(os.getenv("SIGACTS_BOUNDARY_PATH", str(DEFAULT_BOUNDARY_PATH))).expanduser(),
            host=os.getenv("SIGACTS_HOST", DEFAULT_HOST),
            port=_parse_port(os.getenv("PORT", str(DEFAULT_PORT))),
        )


def _parse_port(raw_value: str) -> int:
    try:
        port = int(raw_value)
    except ValueError as error:
        raise SigactsConfigError(
            f"Invalid PORT value: expected integer, got '{raw_value}'."
        ) from error
    if not 0 < port < 65536:
        raise SigactsConfigError(f"Invalid PORT value: {port} is outside 1-65535.")
    return port
