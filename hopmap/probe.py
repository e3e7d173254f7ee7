import ipaddress
import subprocess
from typing import List, Optional

from hopmap.exceptions import InvalidTargetException, ProbeFailedException
from hopmap.utils import logger
from hopmap.utils.timer import Timer

TRACEROUTE_BIN = "traceroute"

# served instead of a live probe in dev mode, where there is no client address to trace
SAMPLE_TRACEROUTE = """traceroute to 104.248.99.119 (104.248.99.119), 25 hops max, 60 byte packets
 1  DESKTOP-K8CPH23.mshome.net (172.26.160.1)  1.415 ms
 2  192.168.32.1 (192.168.32.1)  1.360 ms
 3  *
 4  *
 5  10.209.5.37 (10.209.5.37)  59.754 ms
 6  10.209.5.38 (10.209.5.38)  59.896 ms
 7  *
 8  *
 9  hls-b4-link.ip.twelve99.net (62.115.153.140)  59.623 ms
10  sto-bb2-link.ip.twelve99.net (62.115.123.202)  59.621 ms
11  kbn-bb6-link.ip.twelve99.net (62.115.139.173)  60.511 ms
12  ewr-bb2-link.ip.twelve99.net (80.91.254.91)  115.956 ms
13  chi-bb2-link.ip.twelve99.net (62.115.132.135)  176.155 ms
14  kanc-bb2-link.ip.twelve99.net (62.115.136.103)  174.319 ms
15  den-bb2-link.ip.twelve99.net (62.115.140.185)  167.263 ms
16  palo-bb2-link.ip.twelve99.net (62.115.139.112)  176.308 ms
17  palo-b24-link.ip.twelve99.net (62.115.139.111)  162.729 ms
18  singaporetelco-ic-335366.ip.twelve99-cust.net (62.115.8.201)  176.068 ms
19  203.208.172.233 (203.208.172.233)  160.174 ms
20  203.208.172.225 (203.208.172.225)  366.545 ms
21  203.208.151.37 (203.208.151.37)  366.486 ms
22  203.208.151.50 (203.208.151.50)  366.254 ms
23  203.208.149.2 (203.208.149.2)  366.556 ms
24  203.208.186.174 (203.208.186.174)  366.542 ms
25  *"""


def validate_target(address: str) -> str:
    try:
        return str(ipaddress.ip_address(address.strip()))
    except ValueError as e:
        raise InvalidTargetException(f"Invalid trace target: {address!r}") from e


def traceroute_cmd(target: str, max_hops: int = 25, wait_seconds: float = 0.5, queries: int = 1) -> List[str]:
    return [TRACEROUTE_BIN, "-w", str(wait_seconds), "-q", str(queries), "-m", str(max_hops), target]


def run_traceroute(target: str, max_hops: int = 25, wait_seconds: float = 0.5, queries: int = 1, timeout: Optional[float] = None) -> str:
    """Run traceroute against an already validated target and return its stdout."""
    cmd = traceroute_cmd(target, max_hops=max_hops, wait_seconds=wait_seconds, queries=queries)
    logger.fs.debug(f"[run_traceroute] Running {' '.join(cmd)}")
    with Timer(f"traceroute to {target}"):
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=True)
        except FileNotFoundError as e:
            raise ProbeFailedException(f"{TRACEROUTE_BIN} is not installed") from e
        except subprocess.TimeoutExpired as e:
            raise ProbeFailedException(f"{TRACEROUTE_BIN} to {target} timed out after {timeout}s") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ProbeFailedException(f"{TRACEROUTE_BIN} to {target} failed: {stderr or e}", returncode=e.returncode) from e
    return proc.stdout
