"""Load hotel records from a JSON file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from embedvec.core.types import Hotel


def load_hotels(path: str | Path) -> List[Hotel]:
    """Read a JSON array of hotel objects.

    Each entry needs ``hotel_id``; ``hotel_name``, ``description``,
    ``tags``, ``rating`` and ``description_embedding`` are optional.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON array or an entry is invalid.
    """
    data_path = Path(path)
    if not data_path.exists():
        raise FileNotFoundError(f"Hotel data file not found: {data_path}")

    try:
        parsed = json.loads(data_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {data_path}: {e}") from e

    if not isinstance(parsed, list):
        raise ValueError(f"{data_path} must contain a JSON array of hotels")

    hotels: List[Hotel] = []
    for i, entry in enumerate(parsed):
        if not isinstance(entry, dict):
            raise ValueError(f"Hotel at index {i} is not an object")
        if "hotel_id" not in entry:
            raise ValueError(f"Hotel at index {i} is missing required field: 'hotel_id'")
        try:
            hotels.append(Hotel.from_dict(entry))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Hotel at index {i} is invalid: {e}") from e
    return hotels
