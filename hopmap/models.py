import math
from dataclasses import dataclass
from enum import Enum

from typing import Any, Dict, Optional, Tuple

Coordinates = Tuple[float, float]

ORIGIN_LABEL = "Origin Server"


@dataclass(frozen=True)
class HopRecord:
    """One parsed traceroute line."""

    index: int
    hostname: str
    address: str  # without the enclosing parentheses
    delay_ms: float


@dataclass(frozen=True)
class LocationGuess:
    label: str  # lowercased city name, uppercased airport code or "unknown"
    coordinates: Coordinates
    population: Optional[int] = None

    def __post_init__(self):
        lat, lon = self.coordinates
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"Coordinates must be finite, got {self.coordinates}")

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"cityOrAirport": self.label, "coordinates": [self.coordinates[0], self.coordinates[1]]}
        if self.population is not None:
            out["population"] = self.population
        return out


@dataclass(frozen=True)
class ResolvedHop:
    hop: HopRecord
    guess: Optional[LocationGuess] = None

    @property
    def located(self) -> bool:
        return self.guess is not None

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "index": self.hop.index,
            "domain": self.hop.hostname,
            "ip": self.hop.address,
            "delay": self.hop.delay_ms,
        }
        if self.guess is not None:
            out["domainAnalysis"] = self.guess.as_dict()
        return out


def origin_hop(lat: float, lon: float) -> ResolvedHop:
    """The anchor point the map starts from. Never produced by the pipeline."""
    return ResolvedHop(
        hop=HopRecord(index=0, hostname=ORIGIN_LABEL, address="Unknown", delay_ms=0.0),
        guess=LocationGuess(label=ORIGIN_LABEL, coordinates=(float(lat), float(lon))),
    )


class CacheState(Enum):
    private = "private"
    unknown = "unknown"  # lookup attempted and failed
    located = "located"


@dataclass(frozen=True)
class CacheEntry:
    state: CacheState
    lat: Optional[float] = None
    lon: Optional[float] = None

    @classmethod
    def private(cls) -> "CacheEntry":
        return cls(CacheState.private)

    @classmethod
    def unknown(cls) -> "CacheEntry":
        return cls(CacheState.unknown)

    @classmethod
    def located(cls, lat: float, lon: float) -> "CacheEntry":
        return cls(CacheState.located, float(lat), float(lon))

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.state != CacheState.located or self.lat is None or self.lon is None:
            return None
        return self.lat, self.lon
