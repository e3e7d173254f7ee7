import pytest

from hopmap.config import HopmapConfig
from hopmap.exceptions import BadConfigException


def test_defaults():
    config = HopmapConfig.default_config()
    assert config.heuristic_before_address is True
    assert config.dev_mode is False
    assert config.get_flag("provider_max_retries") == 3
    assert config.get_flag("provider_default_retry_ms") == 5000
    assert config.get_flag("city_population_floor") == 5000
    assert config.get_flag("airport_city_population_floor") == 25000
    assert config.cache_path.name == "ips.db"
    config.check_config()


def test_set_flag_types_and_errors():
    config = HopmapConfig.default_config()
    config.set_flag("provider_max_retries", "5")
    assert config.get_flag("provider_max_retries") == 5
    config.set_flag("heuristic_before_address", "no")
    assert config.heuristic_before_address is False
    config.set_flag("heuristic_before_address", None)
    assert config.heuristic_before_address is True

    with pytest.raises(KeyError):
        config.get_flag("not_a_flag")
    with pytest.raises(KeyError):
        config.set_flag("not_a_flag", "1")
    with pytest.raises(BadConfigException):
        config.set_flag("heuristic_before_address", "maybe")
    with pytest.raises(BadConfigException):
        config.set_flag("provider_max_retries", "three")


@pytest.mark.parametrize("flag,value", [("provider_max_retries", "-1"), ("probe_max_hops", "0"), ("provider_timeout_seconds", "0")])
def test_check_config_rejects_out_of_range(flag, value):
    config = HopmapConfig.default_config()
    config.set_flag(flag, value)
    with pytest.raises(BadConfigException):
        config.check_config()


def test_file_round_trip(tmp_path):
    path = tmp_path / "config"
    config = HopmapConfig.default_config()
    config.set_flag("heuristic_before_address", "false")
    config.set_flag("cache_path", str(tmp_path / "ips.db"))
    config.to_config_file(path)

    loaded = HopmapConfig.load_config(path)
    assert loaded.heuristic_before_address is False
    assert loaded.cache_path == tmp_path / "ips.db"
    assert loaded.get_flag("provider_max_retries") == 3

    with pytest.raises(FileNotFoundError):
        HopmapConfig.load_config(tmp_path / "missing")


@pytest.mark.parametrize("value,expected", [("true", True), ("TRUE", True), ("false", False), ("yes", False), ("", False)])
def test_airport_city_first_env(value, expected):
    config = HopmapConfig.default_config().apply_env({"AIRPORT_CITY_FIRST": value})
    assert config.heuristic_before_address is expected


def test_env_overrides():
    config = HopmapConfig.default_config().apply_env({"NODE_ENV": "development", "HOPMAP_PROVIDER_MAX_RETRIES": "7"})
    assert config.dev_mode is True
    assert config.get_flag("provider_max_retries") == 7
    assert HopmapConfig.default_config().apply_env({"NODE_ENV": "production"}).dev_mode is False
    assert HopmapConfig.default_config().apply_env({}).heuristic_before_address is True
