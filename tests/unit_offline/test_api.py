import pytest

from conftest import FakeSession, make_response
from hopmap.api.server import create_app
from hopmap.config import HopmapConfig
from hopmap.exceptions import ProbeFailedException
from hopmap.pipeline import TracePipeline
from hopmap.resolve.hostname import HostnameResolver

TRACE = """traceroute to 62.115.8.201 (62.115.8.201), 25 hops max, 60 byte packets
 1  gw.example (192.168.0.1)  0.512 ms
 2  *
 3  sto-bb2-link.ip.twelve99.net (62.115.123.202)  59.621 ms
 4  10.0.0.7 (10.0.0.7)  60.0 ms
"""


@pytest.fixture
def pipeline(tables, make_resolver):
    return TracePipeline(HostnameResolver(tables), make_resolver(FakeSession(default=make_response(status=404, payload={}))))


@pytest.fixture
def probes():
    return []


def make_client(pipeline, probes, dev_mode=False, fail=False):
    config = HopmapConfig.default_config()
    config.set_flag("dev_mode", str(dev_mode))

    def prober(target):
        probes.append(target)
        if fail:
            raise ProbeFailedException("traceroute: unknown host", returncode=1)
        return TRACE

    return create_app(pipeline, config=config, prober=prober).test_client()


def test_status(pipeline, probes):
    response = make_client(pipeline, probes).get("/api/v1/status")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_trace_to_client(pipeline, probes):
    response = make_client(pipeline, probes).get("/api", headers={"CF-Connecting-IP": "62.115.8.201"})
    assert response.status_code == 200
    assert response.mimetype == "application/json"
    assert probes == ["62.115.8.201"]
    assert response.get_json() == [
        {
            "index": 3,
            "domain": "sto-bb2-link.ip.twelve99.net",
            "ip": "62.115.123.202",
            "delay": 59.621,
            "domainAnalysis": {"cityOrAirport": "ARN", "coordinates": [59.6519, 17.9186]},
        },
        {"index": 4, "domain": "10.0.0.7", "ip": "10.0.0.7", "delay": 60.0},
    ]


def test_defaults_to_loopback(pipeline, probes):
    assert make_client(pipeline, probes).get("/api").status_code == 200
    assert probes == ["127.0.0.1"]


def test_invalid_client_ip_is_unprocessable(pipeline, probes):
    response = make_client(pipeline, probes).get("/api", headers={"CF-Connecting-IP": "not-an-ip"})
    assert response.status_code == 422
    assert probes == []


def test_probe_failure(pipeline, probes):
    response = make_client(pipeline, probes, fail=True).get("/api", headers={"CF-Connecting-IP": "8.8.8.8"})
    assert response.status_code == 500
    assert response.get_json() == {"error": "traceroute: unknown host"}


def test_dev_mode_serves_sample_trace(pipeline, probes):
    response = make_client(pipeline, probes, dev_mode=True).get("/api")
    assert response.status_code == 200
    assert probes == []
    hops = response.get_json()
    assert len(hops) == 19
    assert hops[0]["index"] == 2
    assert hops[4]["index"] == 10
    assert hops[4]["domainAnalysis"]["cityOrAirport"] == "ARN"
