"""
Indices (precomputed lookup tables)
===================================

The loader produces a flat list of incidents. This module builds, in one pass
over that list, the lookup tables the engine answers queries from:

- `date_index["2007-12-05"]` gives the incidents of that day, in file order.
- `types` / `categories` / `provinces` hold the distinct values of those
  fields (used to populate filter drop-downs).
- `dates_sorted` lists every date key in calendar order.

Indices are built once and never modified afterwards, so they can be read from
any number of request threads without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Sequence, Tuple

from .models import Incident


@dataclass(frozen=True)
class Indices:
    """Container of precomputed indices for fast lookups."""
    date_index: Mapping[str, Tuple[Incident, ...]]
    types: FrozenSet[str]
    categories: FrozenSet[str]
    provinces: FrozenSet[str]
    dates_sorted: Tuple[str, ...]


def date_sort_key(date: str) -> tuple:
    """Sort key ordering date strings by calendar value.

    `"2008-1-2"` and `"2008-01-02"` compare equal in calendar terms, which plain
    string order gets wrong. Keys that are not `Y-M-D` numbers (including the
    empty string) sort after every real date, lexically among themselves.
    """
    parts = date.split("-")
    if len(parts) == 3 and all(p.isdecimal() for p in parts):
        y, m, d = (int(p) for p in parts)
        return (0, y, m, d, date)
    return (1, 0, 0, 0, date)


def sort_dates(dates) -> List[str]:
    return sorted(dates, key=date_sort_key)


def build_indices(events: Sequence[Incident]) -> Indices:
    """Build indices from the loaded dataset.

    Returns:
        Indices object with the date index, distinct-value sets and sorted dates.
    """
    date_index: Dict[str, List[Incident]] = {}
    types, categories, provinces = set(), set(), set()

    for e in events:
        date_index.setdefault(e.date, []).append(e)
        types.add(e.type)
        categories.add(e.category)
        provinces.add(e.province)

    return Indices(
        date_index=MappingProxyType({k: tuple(v) for k, v in date_index.items()}),
        types=frozenset(types),
        categories=frozenset(categories),
        provinces=frozenset(provinces),
        dates_sorted=tuple(sort_dates(date_index.keys())),
    )
