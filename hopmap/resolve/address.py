import ipaddress
import time
from functools import partial
from typing import Callable, Optional, Sequence

import requests

from hopmap.cache.location_cache import LocationCache
from hopmap.exceptions import ProviderException, RateLimitedException
from hopmap.models import CacheEntry, Coordinates
from hopmap.resolve.providers import GeoProvider, default_providers
from hopmap.utils import logger
from hopmap.utils.net import geo_session
from hopmap.utils.retry import retry_backoff

PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",  # loopback
        "169.254.0.0/16",  # link-local
        "::1/128",
        "fe80::/10",
        "fc00::/7",  # unique local
    )
)


def is_private_address(address: str) -> bool:
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        return False
    return any(ip.version == net.version and ip in net for net in PRIVATE_NETWORKS)


class AddressResolver:
    """Geolocates public addresses through external providers, memoized in a LocationCache.

    Every address ends up with exactly one cache row: private, unknown (all
    providers failed) or located. Rows are never revisited, so a failed lookup
    is not retried on later traces.
    """

    def __init__(
        self,
        cache: LocationCache,
        providers: Optional[Sequence[GeoProvider]] = None,
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        default_retry_wait: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.providers = tuple(providers) if providers is not None else default_providers()
        self.session = session or geo_session()
        self.max_retries = max_retries
        self.default_retry_wait = default_retry_wait
        self.sleep = sleep

    def resolve(self, address: str) -> Optional[Coordinates]:
        cached = self.cache.get(address)
        if cached is not None:
            logger.fs.debug(f"[AddressResolver] Found {cached.state.name} address {address} in cache")
            return cached.coordinates

        if is_private_address(address):
            logger.fs.debug(f"[AddressResolver] Caching private address {address}")
            self.cache.put(address, CacheEntry.private())
            return None

        coordinates = self.query_providers(address)
        self.cache.put(address, CacheEntry.unknown() if coordinates is None else CacheEntry.located(*coordinates))
        return coordinates

    def query_providers(self, address: str) -> Optional[Coordinates]:
        for provider in self.providers:
            try:
                coordinates = retry_backoff(
                    partial(provider.lookup, self.session, address),
                    max_retries=self.max_retries,
                    default_backoff=self.default_retry_wait,
                    exception_class=RateLimitedException,
                    sleep=self.sleep,
                )
            except ProviderException as e:
                logger.fs.warning(f"[AddressResolver] {provider.name} failed for {address}: {e}")
                continue
            logger.fs.debug(f"[AddressResolver] {provider.name} located {address} at {coordinates}")
            return coordinates
        logger.fs.info(f"[AddressResolver] No provider could locate {address}")
        return None
