from hopmap.reference.codes import KNOWN_REPLACEMENTS, normalize_code
from hopmap.reference.tables import (
    AirportEntry,
    AirportTable,
    CityEntry,
    CityTable,
    ReferenceTables,
    load_reference_tables,
)

__all__ = [
    "KNOWN_REPLACEMENTS",
    "normalize_code",
    "AirportEntry",
    "AirportTable",
    "CityEntry",
    "CityTable",
    "ReferenceTables",
    "load_reference_tables",
]
