"""Tests for load_hotels."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from embedvec.core.settings import resolve_path
from embedvec.ingestion.hotel_loader import load_hotels


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "hotels.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_loads_sample_data() -> None:
    hotels = load_hotels(resolve_path("data/hotels.json"))

    assert len(hotels) == 5
    assert [h.hotel_id for h in hotels] == ["1", "2", "3", "4", "5"]
    assert all(h.description for h in hotels)


def test_optional_fields_default(tmp_path: Path) -> None:
    [hotel] = load_hotels(_write(tmp_path, [{"hotel_id": 7}]))

    assert hotel.hotel_id == "7"
    assert hotel.tags == []
    assert hotel.rating is None
    assert hotel.description_embedding is None


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_hotels(tmp_path / "nope.json")


@pytest.mark.parametrize(
    "payload, message",
    [
        ("{not json", "Invalid JSON"),
        ({"hotel_id": "1"}, "JSON array"),
        (["hotel"], "index 0 is not an object"),
        ([{"hotel_name": "No id"}], "missing required field: 'hotel_id'"),
        ([{"hotel_id": "  "}], "index 0 is invalid"),
    ],
)
def test_invalid_content(tmp_path: Path, payload, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_hotels(_write(tmp_path, payload))
