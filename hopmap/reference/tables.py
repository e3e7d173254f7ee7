import csv
import json
import math
from dataclasses import dataclass
from pathlib import Path

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from hopmap.exceptions import ReferenceDataException
from hopmap.utils import logger

PathLike = Union[str, Path]

BUNDLED_DATA_DIR = Path(__file__).parent.parent / "data"
BUNDLED_CITIES_PATH = BUNDLED_DATA_DIR / "cities.json"
BUNDLED_AIRPORTS_PATH = BUNDLED_DATA_DIR / "airports.json"


@dataclass(frozen=True)
class CityEntry:
    name: str
    ascii_name: str
    population: int
    lat: float
    lon: float

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "CityEntry":
        name = str(record.get("city") or "")
        return CityEntry(
            name=name,
            ascii_name=str(record.get("city_ascii") or name),
            population=int(_to_number(record.get("population"))),
            lat=_to_number(record.get("lat")),
            lon=_to_number(record.get("lng")),
        )


@dataclass(frozen=True)
class AirportEntry:
    code: str
    icao: str
    url: str
    city_name: str
    lat: float
    lon: float

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "AirportEntry":
        return AirportEntry(
            code=str(record.get("code") or ""),
            icao=str(record.get("icao") or ""),
            url=str(record.get("url") or ""),
            city_name=str(record.get("city") or ""),
            lat=_to_number(record.get("latitude")),
            lon=_to_number(record.get("longitude")),
        )


class CityTable:
    """Cities in directory order, plus an index on the lowercased ASCII name.
    When several cities share a name the index keeps the last one."""

    def __init__(self, entries: Iterable[CityEntry]):
        self._entries: Tuple[CityEntry, ...] = tuple(entries)
        self._by_name: Dict[str, CityEntry] = {entry.ascii_name.lower(): entry for entry in self._entries}

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def get(self, name: str) -> Optional[CityEntry]:
        return self._by_name.get(name.lower().strip())


class AirportTable:
    def __init__(self, entries: Iterable[AirportEntry]):
        self._by_code: Dict[str, AirportEntry] = {entry.code.lower(): entry for entry in entries}

    def __len__(self):
        return len(self._by_code)

    def __contains__(self, code: str):
        return code.lower() in self._by_code

    def get(self, code: str) -> Optional[AirportEntry]:
        return self._by_code.get(code.lower())


@dataclass(frozen=True)
class ReferenceTables:
    cities: CityTable
    airports: AirportTable


def load_reference_tables(cities_path: Optional[PathLike] = None, airports_path: Optional[PathLike] = None) -> ReferenceTables:
    cities_path = Path(cities_path) if cities_path else BUNDLED_CITIES_PATH
    airports_path = Path(airports_path) if airports_path else BUNDLED_AIRPORTS_PATH
    cities = CityTable(CityEntry.from_record(r) for r in _read_records(cities_path))
    airports = AirportTable(AirportEntry.from_record(r) for r in _read_records(airports_path))
    logger.fs.info(f"Loaded {len(cities)} cities from {cities_path} and {len(airports)} airports from {airports_path}")
    return ReferenceTables(cities=cities, airports=airports)


def _read_records(path: Path) -> List[Mapping[str, Any]]:
    try:
        if path.suffix.lower() == ".csv":
            with path.open(newline="", encoding="utf-8") as f:
                return list(csv.DictReader(f))
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, ValueError, csv.Error) as e:
        raise ReferenceDataException(f"Failed to read reference data from {path}: {e}") from e
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ReferenceDataException(f"Reference data in {path} must be a list of objects")
    return records


def _to_number(value: Any) -> float:
    # directories store numbers as strings and leave unknown values empty
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0
