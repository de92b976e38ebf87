"""
Dashboard aggregates
====================

Pure functions computing the dashboard charts from a sequence of incidents.
They are recomputed on every request; nothing here is cached or mutated.

- `treemap`: incident counts per (type, category), grouped by type.
- `radar`: time-of-day histograms for two incident types.
- `heatmap`: incidents per day, in calendar order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .indices import sort_dates
from .models import Incident

ENEMY_ACTION = "Enemy Action"
EXPLOSIVE_HAZARD = "Explosive Hazard"

# (label, first hour, end hour exclusive); contiguous over 0-24
TIME_BUCKETS: Tuple[Tuple[str, int, int], ...] = (
    ("Early Night (00:00-03:59)", 0, 4),
    ("Early Morning (04:00-08:59)", 4, 9),
    ("Mid-Morning (09:00-11:59)", 9, 12),
    ("Early Afternoon (12:00-14:59)", 12, 15),
    ("Late Afternoon (15:00-17:59)", 15, 18),
    ("Evening (18:00-21:59)", 18, 22),
    ("Late Night (22:00-23:59)", 22, 24),
)


@dataclass(frozen=True)
class TypeGroup:
    """One treemap series: a type and its (category, count) cells."""
    name: str
    data: List[Tuple[str, int]]


@dataclass(frozen=True)
class RadarProfile:
    """Bucket labels and counts, aligned by position."""
    categories: List[str]
    values: List[int]


@dataclass(frozen=True)
class RadarData:
    enemy: RadarProfile
    explosive: RadarProfile


@dataclass(frozen=True)
class Heatmap:
    """Days with at least one incident and their counts, aligned by position."""
    dates: List[str]
    counts: List[int]


def treemap(events: Sequence[Incident]) -> List[TypeGroup]:
    """Count incidents per (type, category).

    Groups follow the order in which each type is first seen, and cells within
    a group the order in which each category is first seen for that type.
    """
    counts: Dict[str, Dict[str, int]] = {}
    for e in events:
        by_cat = counts.setdefault(e.type, {})
        by_cat[e.category] = by_cat.get(e.category, 0) + 1
    return [TypeGroup(name=t, data=list(cats.items())) for t, cats in counts.items()]


def bucket_index(hour: int) -> int:
    """Index into TIME_BUCKETS for `hour`, or -1 if outside 0-23."""
    for i, (_, lo, hi) in enumerate(TIME_BUCKETS):
        if lo <= hour < hi:
            return i
    return -1


def radar(events: Sequence[Incident]) -> RadarData:
    """Time-of-day histograms for Enemy Action and Explosive Hazard incidents.

    Incidents without a usable time, or of any other type, are not counted.
    """
    enemy = [0] * len(TIME_BUCKETS)
    explosive = [0] * len(TIME_BUCKETS)
    for e in events:
        if e.type == ENEMY_ACTION:
            target = enemy
        elif e.type == EXPLOSIVE_HAZARD:
            target = explosive
        else:
            continue
        i = bucket_index(e.hour())
        if i >= 0:
            target[i] += 1

    labels = [label for label, _, _ in TIME_BUCKETS]
    return RadarData(
        enemy=RadarProfile(categories=labels[:], values=enemy),
        explosive=RadarProfile(categories=labels[:], values=explosive),
    )


def heatmap(events: Sequence[Incident]) -> Heatmap:
    """Incidents per day, sorted by calendar date; empty days are omitted."""
    per_day: Dict[str, int] = {}
    for e in events:
        if not e.date:
            continue
        per_day[e.date] = per_day.get(e.date, 0) + 1
    dates = sort_dates(per_day)
    return Heatmap(dates=dates, counts=[per_day[d] for d in dates])
