"""Shared pytest fixtures."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from tests.fixture_rows import HEADER


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write rows to a CSV file under tmp_path and return its path."""
    def _write(rows: List[Dict[str, str]], header: List[str] = HEADER, name: str = "sigacts.csv") -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=header, extrasaction="ignore")
            w.writeheader()
            for r in rows:
                w.writerow(r)
        return path
    return _write
