"""
Dataset loader (CSV -> Incident list)
=====================================

This module reads the SIGACTS CSV export and converts each row into an
`Incident` object.

Key ideas:
- Every cell is read as text (`dtype=str`), so pandas never guesses types and
  blank cells stay blank instead of turning into NaN.
- Column lookup tolerates case/spacing differences between exports; a column
  that is missing entirely behaves like a blank cell in every row.
- Timestamps arrive either as `M/D/YYYY HH:MM:SS` or `YYYY-MM-DD HH:MM:SS`
  depending on the year of the export, so dates are normalized to `YYYY-MM-DD`.
- Bad coordinates become NaN and are kept; only stream-level failures abort.
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .errors import DatasetLoadError
from .logging_config import get_logger
from .models import Incident, NOT_AVAILABLE, UNKNOWN_TYPE

log = get_logger(__name__)

Source = Union[str, Path, IO[Any]]

TIMESTAMP_COL = "date_time_occ"
LAT_COL = "mgrs_Y"
LNG_COL = "mgrs_X"
TYPE_COL = "Incident Type"
CATEGORY_COL = "Incident Category"
TARGET_CATEGORY_COL = "Target Category"
TARGET_COL = "target"
FORCE_TYPE_COL = "force_type"
CITY_COL = "City"
PROVINCE_COL = "Province"

_ALL_COLUMNS = (
    TIMESTAMP_COL, LAT_COL, LNG_COL, TYPE_COL, CATEGORY_COL, TARGET_CATEGORY_COL,
    TARGET_COL, FORCE_TYPE_COL, CITY_COL, PROVINCE_COL,
)


def _to_float(x) -> float:
    """Convert a cell to float, returning NaN if missing/invalid."""
    if x is None: return math.nan
    try: return float(x)
    except (TypeError, ValueError): return math.nan

def _to_str(x) -> str:
    if x is None: return ""
    return str(x).strip()

def _or_default(x, default: str) -> str:
    s = _to_str(x)
    return s if s else default

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(columns: List[str], name: str) -> Optional[str]:
    """Find `name` among `columns`, exactly or after normalization."""
    if name in columns:
        return name
    norm_map = {_norm(c): c for c in columns}
    return norm_map.get(_norm(name))


def split_timestamp(raw: str) -> Tuple[str, str]:
    """Split `"12/5/2007 14:30:00"` into `("12/5/2007", "14:30:00")`."""
    parts = _to_str(raw).split()
    date_part = parts[0] if parts else ""
    time_part = parts[1] if len(parts) > 1 else ""
    return date_part, time_part

def normalize_date(date_part: str) -> str:
    """Rewrite `M/D/YYYY` as `YYYY-MM-DD`; anything without `/` is kept as-is.

    >>> normalize_date("12/5/2007")
    '2007-12-05'
    >>> normalize_date("2008-01-02")
    '2008-01-02'
    """
    if "/" not in date_part:
        return date_part
    pieces = date_part.split("/")
    if len(pieces) != 3 or not all(p.isdecimal() for p in pieces):
        return date_part
    month, day, year = pieces
    return f"{year}-{int(month):02d}-{int(day):02d}"


def row_to_incident(row: Dict[str, Any], cols: Dict[str, Optional[str]]) -> Incident:
    """Build one `Incident` from a CSV row (column name -> cell text)."""
    def cell(name: str):
        c = cols[name]
        return row.get(c) if c else None

    date_part, time_part = split_timestamp(cell(TIMESTAMP_COL))
    return Incident(
        lat=_to_float(cell(LAT_COL)),
        lng=_to_float(cell(LNG_COL)),
        date=normalize_date(date_part),
        time=time_part,
        type=_or_default(cell(TYPE_COL), UNKNOWN_TYPE),
        category=_or_default(cell(CATEGORY_COL), NOT_AVAILABLE),
        target_category=_or_default(cell(TARGET_CATEGORY_COL), NOT_AVAILABLE),
        target=_or_default(cell(TARGET_COL), NOT_AVAILABLE),
        force_type=_or_default(cell(FORCE_TYPE_COL), NOT_AVAILABLE),
        city=_or_default(cell(CITY_COL), NOT_AVAILABLE),
        province=_or_default(cell(PROVINCE_COL), NOT_AVAILABLE),
    )


def load_sigacts_csv(source: Source) -> List[Incident]:
    """Read the SIGACTS CSV export into a list of incidents (file order).

    `source` may be a path or an open text/binary stream.

    Raises:
        DatasetLoadError: the source cannot be opened, decoded or parsed.
    """
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, na_filter=False)
    except (OSError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DatasetLoadError(f"Cannot read incident CSV {source!r}: {e}") from e
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)

    columns = list(df.columns)
    cols = {name: _col(columns, name) for name in _ALL_COLUMNS}
    missing = [name for name, c in cols.items() if c is None]
    if missing:
        log.warning("columns_missing", columns=missing)

    return [row_to_incident(row, cols) for row in df.to_dict(orient="records")]


def _reject_constant(name: str):
    # NaN/Infinity would be re-emitted as invalid JSON
    raise ValueError(f"non-standard JSON constant {name}")


def load_boundary(path: Optional[Union[str, Path]]) -> Optional[Dict[str, Any]]:
    """Load the GeoJSON boundary document, or return None if unavailable.

    A missing or unreadable boundary never aborts startup; it is logged and the
    boundary endpoint reports not-found.
    """
    if path is None:
        return None
    p = Path(path)
    if not p.exists():
        log.warning("boundary_unavailable", path=str(p), reason="missing")
        return None
    try:
        with open(p, "r", encoding="utf-8") as f:
            doc = json.load(f, parse_constant=_reject_constant)
    except (OSError, ValueError) as e:
        log.warning("boundary_unavailable", path=str(p), reason=str(e))
        return None
    log.info("boundary_loaded", path=str(p))
    return doc
