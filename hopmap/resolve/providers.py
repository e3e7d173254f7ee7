import math
from typing import Any, Mapping, Optional, Tuple

import requests

from hopmap.exceptions import ProviderException, RateLimitedException
from hopmap.models import Coordinates

HTTP_TOO_MANY_REQUESTS = 429


def valid_coordinate(value: Any) -> bool:
    """Missing, null, false and empty values are not coordinates; zero is."""
    if value is None or value is False or value == "":
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Retry-After in whole seconds. HTTP-date values are not supported and count as absent."""
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return float(seconds) if seconds >= 0 else None


class GeoProvider:
    """An HTTP JSON endpoint that maps an address to a (lat, lon) pair."""

    name = "provider"
    lat_key = "lat"
    lon_key = "lon"

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    def url_for(self, address: str) -> str:
        raise NotImplementedError

    def extract(self, payload: Any) -> Optional[Coordinates]:
        if not isinstance(payload, Mapping) or self.lat_key not in payload or self.lon_key not in payload:
            return None
        lat, lon = payload[self.lat_key], payload[self.lon_key]
        if not (valid_coordinate(lat) and valid_coordinate(lon)):
            return None
        return float(lat), float(lon)

    def lookup(self, session: requests.Session, address: str) -> Coordinates:
        """One request. Raises RateLimitedException on HTTP 429 and ProviderException on
        anything else that does not produce a coordinate pair."""
        url = self.url_for(address)
        try:
            response = session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderException(f"Request to {url} failed: {e}", provider=self.name) from e

        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            raise RateLimitedException(f"Rate limited by {self.name}", provider=self.name, retry_after=retry_after)
        if not response.ok:
            raise ProviderException(f"HTTP error {response.status_code} for {url}", provider=self.name)

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderException(f"Unparsable response from {url}: {response.text[:100]}", provider=self.name) from e

        coordinates = self.extract(payload)
        if coordinates is None:
            raise ProviderException(f"No coordinates for {address} from {self.name}", provider=self.name)
        return coordinates

    def __repr__(self):
        return f"{type(self).__name__}(timeout={self.timeout})"


class IpApiProvider(GeoProvider):
    name = "ip-api.com"

    def url_for(self, address: str) -> str:
        return f"http://ip-api.com/json/{address}?fields=status,message,lat,lon"


class IpapiCoProvider(GeoProvider):
    name = "ipapi.co"
    lat_key = "latitude"
    lon_key = "longitude"

    def url_for(self, address: str) -> str:
        return f"https://ipapi.co/{address}/json/"


def default_providers(timeout: float = 5.0) -> Tuple[GeoProvider, ...]:
    return IpApiProvider(timeout=timeout), IpapiCoProvider(timeout=timeout)
