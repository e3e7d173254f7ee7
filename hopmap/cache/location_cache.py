import sqlite3
import threading
from pathlib import Path

from typing import Dict, Optional, Union

from hopmap.models import CacheEntry, CacheState
from hopmap.utils import logger

MEMORY = ":memory:"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS ips (
        ip          TEXT     PRIMARY KEY,
        lat         REAL,
        lng         REAL,
        is_private  INTEGER  DEFAULT 0
    )
"""


class LocationCache:
    """Persistent address -> CacheEntry store backed by SQLite.

    One connection is shared by every pipeline in the process and serialized with
    a lock, so concurrent requests can read and write safely. Writes replace any
    existing row: two requests resolving the same new address may both query the
    providers, and the last one to finish wins.
    """

    def __init__(self, path: Union[str, Path] = MEMORY):
        self.path = str(path)
        if self.path != MEMORY:
            Path(self.path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self.path = str(Path(self.path).expanduser())
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(_SCHEMA)
        logger.fs.debug(f"[LocationCache] Opened {self.path}")

    def get(self, address: str) -> Optional[CacheEntry]:
        with self._lock:
            row = self._conn.execute("SELECT lat, lng, is_private FROM ips WHERE ip=?", (address,)).fetchone()
        if row is None:
            return None
        lat, lng, is_private = row
        if is_private:
            return CacheEntry.private()
        if lat is None or lng is None:
            return CacheEntry.unknown()
        return CacheEntry.located(lat, lng)

    def put(self, address: str, entry: CacheEntry):
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO ips (ip, lat, lng, is_private) VALUES (?, ?, ?, ?)",
                (address, entry.lat, entry.lon, 1 if entry.state == CacheState.private else 0),
            )

    def stats(self) -> Dict[str, int]:
        with self._lock:
            private, unknown, located = self._conn.execute(
                """
                SELECT
                    COALESCE(SUM(is_private != 0), 0),
                    COALESCE(SUM(is_private = 0 AND (lat IS NULL OR lng IS NULL)), 0),
                    COALESCE(SUM(is_private = 0 AND lat IS NOT NULL AND lng IS NOT NULL), 0)
                FROM ips
                """
            ).fetchone()
        return {CacheState.private.value: private, CacheState.unknown.value: unknown, CacheState.located.value: located}

    def clear(self) -> int:
        with self._lock, self._conn:
            n_deleted = self._conn.execute("DELETE FROM ips").rowcount
        logger.fs.info(f"[LocationCache] Cleared {n_deleted} rows from {self.path}")
        return n_deleted

    def close(self):
        with self._lock:
            self._conn.close()

    def __contains__(self, address: str):
        return self.get(address) is not None

    def __len__(self):
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM ips").fetchone()[0]

    def __enter__(self):
        return self

    def __exit__(self, exc_typ, exc_val, exc_tb):
        self.close()
