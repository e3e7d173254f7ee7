import configparser
import os
from dataclasses import dataclass
from pathlib import Path

from typing import Any, Mapping, Optional

from hopmap.exceptions import BadConfigException

_FLAG_TYPES = {
    "heuristic_before_address": bool,
    "provider_max_retries": int,
    "provider_default_retry_ms": int,
    "provider_timeout_seconds": float,
    "city_population_floor": int,
    "airport_city_population_floor": int,
    "min_city_name_length": int,
    "probe_max_hops": int,
    "probe_wait_seconds": float,
    "probe_queries": int,
    "dev_mode": bool,
    "cache_path": str,
    "cities_path": str,
    "airports_path": str,
}

_DEFAULT_FLAGS = {
    "heuristic_before_address": True,
    "provider_max_retries": 3,
    "provider_default_retry_ms": 5000,
    "provider_timeout_seconds": 5.0,
    "city_population_floor": 5000,
    "airport_city_population_floor": 25000,
    "min_city_name_length": 5,
    "probe_max_hops": 25,
    "probe_wait_seconds": 0.5,
    "probe_queries": 1,
    "dev_mode": False,
    "cache_path": "~/.hopmap/ips.db",
    "cities_path": "",  # empty selects the bundled sample directory
    "airports_path": "",
}

# flags that must not be negative
_NON_NEGATIVE_FLAGS = [
    "provider_max_retries",
    "provider_default_retry_ms",
    "city_population_floor",
    "airport_city_population_floor",
    "min_city_name_length",
]
# flags that must be strictly positive
_POSITIVE_FLAGS = ["provider_timeout_seconds", "probe_max_hops", "probe_wait_seconds", "probe_queries"]

ENV_PREFIX = "HOPMAP_"


def _map_type(value, val_type):
    if val_type is bool:
        if value.lower() in ["true", "yes", "1"]:
            return True
        elif value.lower() in ["false", "no", "0"]:
            return False
        else:
            raise ValueError(f"Invalid boolean value: {value}")
    else:
        return val_type(value)


@dataclass
class HopmapConfig:
    """Flags are stored as `flag_<name>` attributes; unset flags fall back to _DEFAULT_FLAGS."""

    @classmethod
    def default_config(cls) -> "HopmapConfig":
        return cls()

    @classmethod
    def load_config(cls, path) -> "HopmapConfig":
        """Load from a config file."""
        path = Path(path)
        config = configparser.ConfigParser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config.read(path)

        hopmap_config = cls()
        if "flags" in config:
            for flag_name in _FLAG_TYPES:
                if flag_name in config["flags"]:
                    hopmap_config.set_flag(flag_name, config["flags"][flag_name])
        return hopmap_config

    def apply_env(self, environ: Optional[Mapping[str, str]] = None) -> "HopmapConfig":
        """Override flags from the environment.

        AIRPORT_CITY_FIRST toggles hostname heuristics (only "true" enables them),
        NODE_ENV=development turns on dev mode, and HOPMAP_<FLAG> sets any flag.
        """
        environ = os.environ if environ is None else environ
        if "AIRPORT_CITY_FIRST" in environ:
            self.set_flag("heuristic_before_address", str(environ["AIRPORT_CITY_FIRST"].lower() == "true"))
        if environ.get("NODE_ENV") == "development":
            self.set_flag("dev_mode", "true")
        for flag_name in _FLAG_TYPES:
            env_name = ENV_PREFIX + flag_name.upper()
            if env_name in environ:
                self.set_flag(flag_name, environ[env_name])
        return self

    def to_config_file(self, path):
        path = Path(path)
        config = configparser.ConfigParser()
        if path.exists():
            config.read(os.path.expanduser(path))

        if "flags" not in config:
            config.add_section("flags")

        for flag_name in _FLAG_TYPES:
            val = getattr(self, f"flag_{flag_name}", None)
            if val is not None:
                config.set("flags", flag_name, str(val))
            else:
                if "flags" in config and flag_name in config["flags"]:
                    config.remove_option("flags", flag_name)

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            config.write(f)

    def valid_flags(self):
        return list(_FLAG_TYPES.keys())

    def get_flag(self, flag_name):
        if flag_name not in self.valid_flags():
            raise KeyError(f"Invalid flag: {flag_name}")
        val = getattr(self, f"flag_{flag_name}", None)
        return _DEFAULT_FLAGS[flag_name] if val is None else val

    def set_flag(self, flag_name, value: Optional[Any]):
        if flag_name not in self.valid_flags():
            raise KeyError(f"Invalid flag: {flag_name}")
        if value is not None:
            try:
                setattr(self, f"flag_{flag_name}", _map_type(str(value), _FLAG_TYPES.get(flag_name, str)))
            except ValueError as e:
                raise BadConfigException(f"Invalid value for {flag_name}: {value!r} ({e})") from e
        else:
            setattr(self, f"flag_{flag_name}", None)

    def check_config(self):
        for flag_name in _NON_NEGATIVE_FLAGS:
            if self.get_flag(flag_name) < 0:
                raise BadConfigException(f"{flag_name} must not be negative, got {self.get_flag(flag_name)}")
        for flag_name in _POSITIVE_FLAGS:
            if self.get_flag(flag_name) <= 0:
                raise BadConfigException(f"{flag_name} must be positive, got {self.get_flag(flag_name)}")
        if not self.get_flag("cache_path"):
            raise BadConfigException("cache_path must be set")

    @property
    def heuristic_before_address(self) -> bool:
        return self.get_flag("heuristic_before_address")

    @property
    def dev_mode(self) -> bool:
        return self.get_flag("dev_mode")

    @property
    def cache_path(self) -> Path:
        return Path(self.get_flag("cache_path")).expanduser()
