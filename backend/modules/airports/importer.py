"""
Airport reference data files.

Airport data ships as one JSON file per region, named
`<region>_airports.json`, each holding `{"airports": [...]}`. The region
label stored on every row comes from the file name.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from .models import Airport

logger = logging.getLogger(__name__)

FILE_SUFFIX = "_airports"
UNKNOWN_REGION = "未知地区"

REGION_LABELS = {
    "africa": "非洲",
    "antarctica": "南极洲",
    "arctic": "北极",
    "asia_europe": "亚洲/欧洲",
    "china": "中国",
    "easter_egg": "彩蛋",
    "middle_east": "中东",
    "military_special": "军事/特殊",
    "north_america": "北美洲",
    "oceania": "大洋洲",
    "south_america": "南美洲",
    "south_asia": "南亚",
    "usa": "美国",
}

REQUIRED_FIELDS = ("code", "name", "city", "latitude", "longitude")


class AirportFileError(ValueError):
    """Raised when an airport data file cannot be used."""


def region_for_file(path: Path) -> str:
    """Region label for a data file, e.g. `china_airports.json` -> 中国."""
    key = path.stem.replace(FILE_SUFFIX, "")
    return REGION_LABELS.get(key, UNKNOWN_REGION)


def load_airport_file(path: Path) -> list[dict[str, Any]]:
    """
    Read one region file into insertable rows (without IDs).

    Rows missing a required field are skipped with a warning.

    Raises:
        AirportFileError: If the file has no `airports` array
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    airports = data.get("airports") if isinstance(data, dict) else None
    if not isinstance(airports, list):
        raise AirportFileError(f"'airports' array not found in {path.name}")

    region = region_for_file(path)
    rows = []
    for entry in airports:
        if not isinstance(entry, dict) or any(entry.get(f) in (None, "") for f in REQUIRED_FIELDS):
            logger.warning("Skipping incomplete airport entry in %s: %r", path.name, entry)
            continue
        rows.append(
            {
                "code": str(entry["code"]).strip(),
                "name": entry["name"],
                "city": entry["city"],
                "latitude": float(entry["latitude"]),
                "longitude": float(entry["longitude"]),
                "region": region,
            }
        )
    return rows


def load_airport_dir(directory: Path) -> list[dict[str, Any]]:
    """Read every `*.json` file in a directory, in file name order."""
    rows: list[dict[str, Any]] = []
    for path in sorted(directory.glob("*.json")):
        rows.extend(load_airport_file(path))
    return rows


def to_airports(rows: Iterable[dict[str, Any]], first_id: int = 1) -> list[Airport]:
    """Assign sequential IDs to rows for the in-memory backend."""
    return [Airport(id=first_id + i, **row) for i, row in enumerate(rows)]
