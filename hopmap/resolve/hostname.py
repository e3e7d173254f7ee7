import re
from typing import Optional

from hopmap.models import LocationGuess
from hopmap.reference.codes import normalize_code
from hopmap.reference.tables import AirportEntry, CityTable, ReferenceTables
from hopmap.utils import logger

# scanned left to right without overlap, so "palo" yields "pal" only
AIRPORT_TOKEN_RE = re.compile(r"[a-z]{3}")


def airport_is_usable(entry: Optional[AirportEntry], cities: CityTable, city_population_floor: int = 25000) -> bool:
    """Only airports with a website and an ICAO code, serving a city of at least
    city_population_floor people, are trusted as hop locations."""
    if entry is None or not entry.url or not entry.icao:
        return False
    city = cities.get(entry.city_name)
    population = city.population if city is not None else 0
    return population >= city_population_floor


class HostnameResolver:
    """Guesses a router's location from its reverse-DNS name.

    Two passes, no network access:

    1. City names longer than `min_city_name_length` that appear anywhere in the
       hostname. The most populous match above `city_population_floor` wins.
    2. Otherwise, three-letter tokens read as airport codes (after normalization).
       The first usable airport wins, even if a later token would match a
       bigger one.
    """

    def __init__(
        self,
        tables: ReferenceTables,
        city_population_floor: int = 5000,
        airport_city_population_floor: int = 25000,
        min_city_name_length: int = 5,
    ):
        self.tables = tables
        self.city_population_floor = city_population_floor
        self.airport_city_population_floor = airport_city_population_floor
        self.min_city_name_length = min_city_name_length

    def resolve(self, hostname: str) -> Optional[LocationGuess]:
        return self.match_city(hostname) or self.match_airport(hostname)

    def match_city(self, hostname: str) -> Optional[LocationGuess]:
        domain = hostname.lower()
        best: Optional[LocationGuess] = None
        for city in self.tables.cities:
            if len(city.name) <= self.min_city_name_length or city.name.lower() not in domain:
                continue
            # the floor is checked before every assignment, so a guess below it is never kept
            if city.population > self.city_population_floor and city.population > (best.population if best else 0):
                best = LocationGuess(label=city.name.lower(), coordinates=(city.lat, city.lon), population=city.population)
        if best is not None:
            logger.fs.debug(f"[HostnameResolver] Matched city {best.label} in {hostname}")
        return best

    def match_airport(self, hostname: str) -> Optional[LocationGuess]:
        for token in AIRPORT_TOKEN_RE.findall(hostname.lower()):
            code = normalize_code(token)
            entry = self.tables.airports.get(code)
            if not airport_is_usable(entry, self.tables.cities, self.airport_city_population_floor):
                continue
            logger.fs.debug(f"[HostnameResolver] Matched airport {code.upper()} (token {token!r}) in {hostname}")
            return LocationGuess(label=code.upper(), coordinates=(entry.lat, entry.lon))
        return None
