import json
from unittest import mock

import pytest

from hopmap.cache.location_cache import LocationCache
from hopmap.reference.tables import AirportEntry, AirportTable, CityEntry, CityTable, ReferenceTables
from hopmap.resolve.address import AddressResolver
from hopmap.resolve.providers import default_providers

IP_API = "http://ip-api.com/"
IPAPI_CO = "https://ipapi.co/"


class FakeSession:
    """Stands in for requests.Session: replies to each URL prefix from a queue of
    responses (or exceptions to raise), and records every URL requested."""

    def __init__(self, routes=None, default=None):
        self.routes = {prefix: list(replies) for prefix, replies in (routes or {}).items()}
        self.default = default
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        for prefix, replies in self.routes.items():
            if url.startswith(prefix) and replies:
                reply = replies.pop(0)
                if isinstance(reply, Exception):
                    raise reply
                return reply
        if self.default is not None:
            return self.default
        raise AssertionError(f"Unexpected request to {url}")

    def calls_to(self, prefix):
        return [url for url in self.calls if url.startswith(prefix)]


def make_response(status=200, payload=None, headers=None, body=None):
    response = mock.Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.headers = headers or {}
    if body is not None:
        response.text = body
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.text = json.dumps(payload)
        response.json.return_value = payload
    return response


class SleepRecorder:
    def __init__(self):
        self.waits = []

    def __call__(self, seconds):
        self.waits.append(seconds)


@pytest.fixture
def tables():
    cities = CityTable(
        [
            CityEntry("Stockholm", "Stockholm", 1611776, 59.3294, 18.0686),
            CityEntry("Helsinki", "Helsinki", 1305893, 60.1708, 24.9375),
            CityEntry("Chicago", "Chicago", 8497759, 41.8373, -87.6862),
            CityEntry("Springfield", "Springfield", 4000, 1.0, 1.0),
            CityEntry("Springfield", "Springfield", 169176, 37.2153, -93.2982),
            CityEntry("Lund", "Lund", 94703, 55.7039, 13.1953),
            CityEntry("Tinyburg", "Tinyburg", 20000, 10.0, 10.0),
            CityEntry("Palo Alto", "Palo Alto", 68572, 37.3913, -122.1467),
        ]
    )
    airports = AirportTable(
        [
            AirportEntry("ARN", "ESSA", "https://www.swedavia.com/arlanda/", "Stockholm", 59.6519, 17.9186),
            AirportEntry("HEL", "EFHK", "https://www.finavia.fi/", "Helsinki", 60.3172, 24.9633),
            AirportEntry("ORD", "KORD", "https://www.flychicago.com/", "Chicago", 41.9786, -87.9048),
            AirportEntry("PAO", "KPAO", "https://www.cityofpaloalto.org/airport", "Palo Alto", 37.4611, -122.115),
            AirportEntry("TNY", "KTNY", "https://tinyburg.example", "Tinyburg", 10.1, 10.1),
            AirportEntry("NOU", "KNOU", "", "Chicago", 41.0, -87.0),
            AirportEntry("NOI", "", "https://noicao.example", "Chicago", 41.0, -87.0),
            AirportEntry("ZZZ", "KZZZ", "https://nowhere.example", "Atlantis", 0.0, 0.0),
        ]
    )
    return ReferenceTables(cities=cities, airports=airports)


@pytest.fixture
def cache():
    with LocationCache() as c:
        yield c


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_resolver(cache, sleeper):
    def make(session, **kwargs):
        kwargs.setdefault("providers", default_providers())
        return AddressResolver(cache, session=session, sleep=sleeper, **kwargs)

    return make
