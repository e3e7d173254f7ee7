from typing import Callable, Iterable, List, Optional

from hopmap.cache.location_cache import LocationCache
from hopmap.config import HopmapConfig
from hopmap.models import HopRecord, LocationGuess, ResolvedHop
from hopmap.reference.tables import ReferenceTables
from hopmap.resolve.address import AddressResolver
from hopmap.resolve.hostname import HostnameResolver
from hopmap.resolve.providers import default_providers
from hopmap.trace_parser import parse_trace, split_trace_output
from hopmap.utils import logger
from hopmap.utils.definitions import MS
from hopmap.utils.timer import Timer

Strategy = Callable[[HopRecord], Optional[LocationGuess]]

UNKNOWN_LABEL = "unknown"


class TracePipeline:
    """Turns traceroute output into located hops.

    Hops are resolved one at a time, in trace order, so an address repeated
    within a trace is looked up once and then served from the cache. The first
    hop is dropped from the result: the map draws its own origin point there.
    """

    def __init__(self, hostname_resolver: HostnameResolver, address_resolver: AddressResolver, heuristic_before_address: bool = True):
        self.hostname_resolver = hostname_resolver
        self.address_resolver = address_resolver
        self.heuristic_before_address = heuristic_before_address

    @classmethod
    def from_config(cls, config: HopmapConfig, tables: ReferenceTables, cache: LocationCache, **address_resolver_kwargs) -> "TracePipeline":
        hostname_resolver = HostnameResolver(
            tables,
            city_population_floor=config.get_flag("city_population_floor"),
            airport_city_population_floor=config.get_flag("airport_city_population_floor"),
            min_city_name_length=config.get_flag("min_city_name_length"),
        )
        address_resolver_kwargs.setdefault("providers", default_providers(timeout=config.get_flag("provider_timeout_seconds")))
        address_resolver = AddressResolver(
            cache,
            max_retries=config.get_flag("provider_max_retries"),
            default_retry_wait=config.get_flag("provider_default_retry_ms") / MS,
            **address_resolver_kwargs,
        )
        return cls(hostname_resolver, address_resolver, heuristic_before_address=config.heuristic_before_address)

    def resolve_hostname(self, hop: HopRecord) -> Optional[LocationGuess]:
        return self.hostname_resolver.resolve(hop.hostname)

    def resolve_address(self, hop: HopRecord) -> Optional[LocationGuess]:
        coordinates = self.address_resolver.resolve(hop.address)
        if coordinates is None:
            return None
        return LocationGuess(label=UNKNOWN_LABEL, coordinates=coordinates, population=0)

    def strategies(self) -> List[Strategy]:
        if self.heuristic_before_address:
            return [self.resolve_hostname, self.resolve_address]
        return [self.resolve_address]

    def resolve_hop(self, hop: HopRecord) -> ResolvedHop:
        for strategy in self.strategies():
            guess = strategy(hop)
            if guess is not None:
                return ResolvedHop(hop=hop, guess=guess)
        return ResolvedHop(hop=hop)

    def run(self, lines: Iterable[str]) -> List[ResolvedHop]:
        with Timer("Resolved trace") as t:
            results = [self.resolve_hop(hop) for hop in parse_trace(lines)]
        n_located = sum(1 for r in results[1:] if r.located)
        logger.fs.info(f"[TracePipeline] Located {n_located}/{max(len(results) - 1, 0)} hops in {t.elapsed:.2f}s")
        return results[1:]

    def run_text(self, text: str) -> List[ResolvedHop]:
        return self.run(split_trace_output(text))
