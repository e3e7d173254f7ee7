from hopmap.resolve.address import AddressResolver, is_private_address
from hopmap.resolve.hostname import HostnameResolver, airport_is_usable
from hopmap.resolve.providers import GeoProvider, IpApiProvider, IpapiCoProvider, default_providers

__all__ = [
    "AddressResolver",
    "is_private_address",
    "HostnameResolver",
    "airport_is_usable",
    "GeoProvider",
    "IpApiProvider",
    "IpapiCoProvider",
    "default_providers",
]
