import math
from typing import Iterable, Iterator, List, Optional

from hopmap.models import HopRecord
from hopmap.utils import logger

# index, hostname, (address), delay, "ms"
HOP_TOKEN_COUNT = 5


def parse_hop_line(line: str) -> Optional[HopRecord]:
    """Parse one traceroute line such as
    ` 9  hls-b4-link.ip.twelve99.net (62.115.153.140)  59.623 ms`.

    Returns None for anything else: the header line, timeouts (`*`), hops with
    several probes per line, and lines whose index or delay are not numbers.
    """
    parts = line.split()
    if len(parts) != HOP_TOKEN_COUNT:
        return None

    index, hostname, address, delay, _unit = parts
    try:
        index_num = int(index)
        delay_ms = float(delay)
    except ValueError:
        return None
    if index_num < 0 or not math.isfinite(delay_ms):
        return None

    return HopRecord(index=index_num, hostname=hostname, address=address.replace("(", "").replace(")", ""), delay_ms=delay_ms)


def parse_trace(lines: Iterable[str]) -> Iterator[HopRecord]:
    for line in lines:
        hop = parse_hop_line(line)
        if hop is None:
            logger.fs.debug(f"[parse_trace] Skipping line with insufficient data: {line.strip()!r}")
            continue
        yield hop


def split_trace_output(text: str) -> List[str]:
    stripped = text.strip()
    return stripped.split("\n") if stripped else []
