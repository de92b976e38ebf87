"""
Core engine
===========

The engine is the single handle through which the HTTP layer and the CLI read
the dataset:

1) `load()` reads the CSV once -> list of Incident records (immutable)
2) Build indices -> date index, distinct-value sets, sorted dates
3) Freeze everything into one `Snapshot`
4) Answer queries (lookups, metadata, dashboard aggregates) from the snapshot

Lifecycle: NOT_LOADED -> LOADING -> READY, or NOT_LOADED -> LOADING -> FAILED.
Queries raise `NotReadyError` in every state but READY. Once READY nothing is
ever written again, so concurrent readers need no locking.

There is no module-level engine: create one, load it, pass it along.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from pathlib import Path

from . import aggregates
from .aggregates import Heatmap, RadarData, TypeGroup
from .errors import DatasetLoadError, EngineStateError, NotReadyError
from .indices import Indices, build_indices
from .loader import Source, load_boundary, load_sigacts_csv
from .logging_config import get_logger
from .models import Incident

log = get_logger(__name__)

# Filter value meaning "do not filter on this field"
ALL = "all"


class EngineState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class Snapshot:
    """Everything one load produced. Shared by reference, never copied."""
    events: Tuple[Incident, ...]
    idx: Indices
    boundary: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class IncidentFilters:
    """Equality filters for `lookup_incidents`; None, "" and "all" mean no filter."""
    type: Optional[str] = None
    category: Optional[str] = None
    province: Optional[str] = None

    def active(self) -> List[Tuple[str, str]]:
        out = []
        for name in ("type", "category", "province"):
            value = getattr(self, name)
            if value and value != ALL:
                out.append((name, value))
        return out


@dataclass(frozen=True)
class Metadata:
    """Sorted distinct values, used for filter option lists."""
    types: List[str]
    categories: List[str]
    provinces: List[str]


@dataclass(frozen=True)
class DatasetSummary:
    count: int
    first_date: Optional[str]
    last_date: Optional[str]
    types: int
    categories: int
    provinces: int
    has_boundary: bool
    dataset_path: Optional[str] = None


@dataclass
class SigactsEngine:
    """Read-only query engine over one loaded SIGACTS dataset."""
    dataset_path: Optional[str] = None
    state: EngineState = field(default=EngineState.NOT_LOADED, init=False)
    _snapshot: Optional[Snapshot] = field(default=None, init=False, repr=False)

    @classmethod
    def from_incidents(cls, events: Sequence[Incident],
                       boundary: Optional[Dict[str, Any]] = None) -> "SigactsEngine":
        """Build a READY engine directly from records (no file I/O)."""
        engine = cls()
        engine._publish(Snapshot(events=tuple(events), idx=build_indices(events), boundary=boundary))
        return engine

    # ---------------- Lifecycle ----------------
    def load(self, source: Source, boundary_path: Optional[Union[str, Path]] = None) -> None:
        """Load the incident CSV (and optional boundary) and become READY.

        Raises:
            EngineStateError: load was already attempted on this engine.
            DatasetLoadError: the CSV could not be read; the engine is FAILED.
        """
        if self.state is not EngineState.NOT_LOADED:
            raise EngineStateError(f"load() called in state {self.state.value}")
        self.state = EngineState.LOADING
        if isinstance(source, (str, Path)):
            self.dataset_path = str(source)

        t0 = time.perf_counter()
        try:
            events = load_sigacts_csv(source)
            idx = build_indices(events)
            boundary = load_boundary(boundary_path)
        except DatasetLoadError as e:
            self._fail(e)
            raise
        except Exception as e:
            self._fail(e)
            raise DatasetLoadError(f"Cannot load incident dataset: {e}") from e
        self._publish(Snapshot(events=tuple(events), idx=idx, boundary=boundary))

        s = self.summary()
        log.info(
            "dataset_loaded",
            path=self.dataset_path,
            count=s.count, first_date=s.first_date, last_date=s.last_date,
            types=s.types, categories=s.categories, provinces=s.provinces,
            elapsed_ms=round((time.perf_counter() - t0) * 1000, 1),
        )

    def _fail(self, error: Exception) -> None:
        self.state = EngineState.FAILED
        log.error("dataset_load_failed", path=self.dataset_path, error=str(error))

    def _publish(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self.state = EngineState.READY

    @property
    def is_ready(self) -> bool:
        return self.state is EngineState.READY

    def snapshot(self) -> Snapshot:
        """Return the loaded snapshot, or raise NotReadyError."""
        if self.state is not EngineState.READY or self._snapshot is None:
            raise NotReadyError(f"dataset not ready (state={self.state.value})")
        return self._snapshot

    # ---------------- Queries ----------------
    def list_dates(self) -> List[str]:
        """All distinct dates, ascending by calendar value."""
        return list(self.snapshot().idx.dates_sorted)

    def list_metadata(self) -> Metadata:
        idx = self.snapshot().idx
        return Metadata(
            types=sorted(idx.types),
            categories=sorted(idx.categories),
            provinces=sorted(idx.provinces),
        )

    def lookup_incidents(self, date: str, filters: Optional[IncidentFilters] = None) -> List[Incident]:
        """Incidents on `date` matching every active filter, in file order.

        An unknown date is not an error: it yields an empty list.
        """
        out = list(self.snapshot().idx.date_index.get(date, ()))
        for name, value in (filters or IncidentFilters()).active():
            out = [e for e in out if getattr(e, name) == value]
        return out

    def treemap_aggregate(self) -> List[TypeGroup]:
        return aggregates.treemap(self.snapshot().events)

    def radar_aggregate(self) -> RadarData:
        return aggregates.radar(self.snapshot().events)

    def heatmap_aggregate(self) -> Heatmap:
        return aggregates.heatmap(self.snapshot().events)

    def get_boundary(self) -> Optional[Dict[str, Any]]:
        """The boundary GeoJSON as loaded, or None if none was available."""
        return self.snapshot().boundary

    def summary(self) -> DatasetSummary:
        snap = self.snapshot()
        dates = snap.idx.dates_sorted
        return DatasetSummary(
            count=len(snap.events),
            first_date=dates[0] if dates else None,
            last_date=dates[-1] if dates else None,
            types=len(snap.idx.types),
            categories=len(snap.idx.categories),
            provinces=len(snap.idx.provinces),
            has_boundary=snap.boundary is not None,
            dataset_path=self.dataset_path,
        )
