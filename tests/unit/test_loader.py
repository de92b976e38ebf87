"""Unit tests for CSV loading and record normalization."""

from __future__ import annotations

import io
import json
import math
import re
from pathlib import Path

import pytest

from sigacts.errors import DatasetLoadError
from sigacts.loader import load_boundary, load_sigacts_csv, normalize_date, split_timestamp
from tests.fixture_rows import make_row

CANONICAL = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@pytest.mark.parametrize("raw, expected", [
    ("12/5/2007", "2007-12-05"),
    ("1/15/2008", "2008-01-15"),
    ("10/10/2009", "2009-10-10"),
    ("2008-01-02", "2008-01-02"),
    ("", ""),
])
def test_normalize_date(raw: str, expected: str) -> None:
    assert normalize_date(raw) == expected


def test_normalize_date_keeps_malformed_slash_value() -> None:
    assert normalize_date("12/2007") == "12/2007"


def test_split_timestamp() -> None:
    assert split_timestamp("12/5/2007 14:30:00") == ("12/5/2007", "14:30:00")
    assert split_timestamp("2008-01-02") == ("2008-01-02", "")
    assert split_timestamp("") == ("", "")


def test_load_normalizes_mixed_date_formats(write_csv) -> None:
    path = write_csv([
        make_row(date_time_occ="12/5/2007 01:00:00"),
        make_row(date_time_occ="2008-01-02 23:10:00"),
        make_row(date_time_occ="3/7/2009"),
    ])

    events = load_sigacts_csv(path)

    assert [e.date for e in events] == ["2007-12-05", "2008-01-02", "2009-03-07"]
    assert all(CANONICAL.match(e.date) for e in events)
    assert [e.time for e in events] == ["01:00:00", "23:10:00", ""]


def test_load_applies_defaults_for_blank_fields(write_csv) -> None:
    path = write_csv([make_row(**{"Incident Type": "", "Incident Category": "", "City": "", "Province": ""})])

    (e,) = load_sigacts_csv(path)

    assert e.type == "Unknown"
    assert e.category == "N/A"
    assert e.city == "N/A"
    assert e.province == "N/A"
    assert e.target == "Patrol"


def test_load_defaults_missing_columns(write_csv) -> None:
    path = write_csv([make_row()], header=["date_time_occ", "mgrs_Y", "mgrs_X"])

    (e,) = load_sigacts_csv(path)

    assert e.type == "Unknown"
    assert e.force_type == "N/A"
    assert e.date == "2007-12-05"


def test_load_keeps_non_numeric_positions_as_nan(write_csv) -> None:
    path = write_csv([make_row(mgrs_Y="not-a-number", mgrs_X="")])

    (e,) = load_sigacts_csv(path)

    assert math.isnan(e.lat)
    assert math.isnan(e.lng)


def test_load_preserves_file_order(write_csv) -> None:
    path = write_csv([make_row(City=f"City{i}") for i in range(5)])

    events = load_sigacts_csv(path)

    assert [e.city for e in events] == [f"City{i}" for i in range(5)]


def test_load_accepts_stream() -> None:
    text = "date_time_occ,mgrs_Y,mgrs_X,Incident Type\n12/5/2007 10:00:00,33.1,44.2,Enemy Action\n"

    (e,) = load_sigacts_csv(io.StringIO(text))

    assert e.date == "2007-12-05"
    assert e.lat == pytest.approx(33.1)


def test_load_raises_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DatasetLoadError):
        load_sigacts_csv(tmp_path / "missing.csv")


def test_load_raises_for_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    with pytest.raises(DatasetLoadError):
        load_sigacts_csv(path)


def test_load_boundary_missing_returns_none(tmp_path: Path) -> None:
    assert load_boundary(tmp_path / "nope.json") is None
    assert load_boundary(None) is None


def test_load_boundary_invalid_json_returns_none(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_boundary(path) is None


def test_load_boundary_returns_document(tmp_path: Path) -> None:
    doc = {"type": "FeatureCollection", "features": []}
    path = tmp_path / "iq.json"
    path.write_text(json.dumps(doc), encoding="utf-8")

    assert load_boundary(path) == doc


def test_normalize_date_keeps_non_ascii_digits() -> None:
    assert normalize_date("1²/5/2007") == "1²/5/2007"


def test_load_raises_for_closed_stream() -> None:
    stream = io.StringIO("date_time_occ\n12/5/2007\n")
    stream.close()

    with pytest.raises(DatasetLoadError):
        load_sigacts_csv(stream)


def test_load_boundary_with_nan_returns_none(tmp_path: Path) -> None:
    path = tmp_path / "nan.json"
    path.write_text('{"type": "Point", "coordinates": [NaN, 1]}', encoding="utf-8")

    assert load_boundary(path) is None
