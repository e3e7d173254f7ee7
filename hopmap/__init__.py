from pathlib import Path

from hopmap import exceptions
from hopmap.config import HopmapConfig
from hopmap.models import HopRecord, LocationGuess, ResolvedHop
from hopmap.pipeline import TracePipeline

__version__ = "0.1.0"
__root__ = Path(__file__).parent.parent
__all__ = [
    "__version__",
    "__root__",
    # modules
    "exceptions",
    # API
    "HopmapConfig",
    "HopRecord",
    "LocationGuess",
    "ResolvedHop",
    "TracePipeline",
]
