import functools
import os
from pathlib import Path


__config_root__ = Path("~/.hopmap").expanduser()
log_path = __config_root__ / "hopmap.log"


@functools.lru_cache(maxsize=None)
def load_config_path():
    if "HOPMAP_CONFIG" in os.environ:
        path = Path(os.environ["HOPMAP_CONFIG"]).expanduser()
    else:
        path = __config_root__ / "config"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


@functools.lru_cache(maxsize=None)
def load_hopmap_config(path):
    from hopmap.config import HopmapConfig

    if path.exists():
        config = HopmapConfig.load_config(path)
    else:
        config = HopmapConfig.default_config()
    return config.apply_env()


config_path = load_config_path()
hopmap_config = load_hopmap_config(config_path)
