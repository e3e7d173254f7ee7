import os

import pytest

from hopmap.cache.location_cache import LocationCache
from hopmap.models import CacheState
from hopmap.resolve.address import AddressResolver
from hopmap.resolve.providers import IpApiProvider, IpapiCoProvider
from hopmap.utils.net import geo_session

pytestmark = pytest.mark.skipif(os.environ.get("HOPMAP_NETWORK_TESTS") != "1", reason="set HOPMAP_NETWORK_TESTS=1 to query live providers")

PUBLIC_ADDRESS = "8.8.8.8"


@pytest.mark.parametrize("provider", [IpApiProvider(), IpapiCoProvider()])
def test_provider_lookup(provider):
    lat, lon = provider.lookup(geo_session(), PUBLIC_ADDRESS)
    assert -90 <= lat <= 90
    assert -180 <= lon <= 180


def test_resolver_caches_live_result(tmp_path):
    with LocationCache(tmp_path / "ips.db") as cache:
        resolver = AddressResolver(cache, max_retries=1, default_retry_wait=1.0)
        first = resolver.resolve(PUBLIC_ADDRESS)
        assert cache.get(PUBLIC_ADDRESS).state in (CacheState.located, CacheState.unknown)
        assert resolver.resolve(PUBLIC_ADDRESS) == first
