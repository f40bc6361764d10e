"""
In-memory OTP record store

Records live in a fixed number of shards, each a dict guarded by its own lock.
A read-modify-write on one phone number runs inside that shard's lock, so it is
atomic with respect to every other request for the same number, while numbers
in other shards proceed in parallel. Nothing here does I/O; locks are held for
a few dict operations only.
"""
import threading
import zlib
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional


@dataclass
class OTPRecord:
    """Active OTP state for one phone number"""
    code: str
    created_at: datetime
    attempts: int = 0

    def copy(self) -> "OTPRecord":
        return replace(self)


class _Shard:
    def __init__(self):
        self.lock = threading.Lock()
        self.records: Dict[str, OTPRecord] = {}


class OTPStore:
    """Sharded, lock-protected map of phone number -> OTPRecord"""

    def __init__(self, shards: int = 64):
        if shards < 1:
            raise ValueError("OTPStore needs at least one shard")
        self._shards: List[_Shard] = [_Shard() for _ in range(shards)]

    def _shard_for(self, phone: str) -> _Shard:
        # crc32 is stable across processes, unlike hash() with str randomisation
        key = phone.encode("utf-8", "surrogatepass")
        return self._shards[zlib.crc32(key) % len(self._shards)]

    @contextmanager
    def atomic(self, phone: str) -> Iterator[Dict[str, OTPRecord]]:
        """
        Hold the lock for ``phone`` and yield the shard's record map.

        Callers must only touch the ``phone`` key and must not await or do
        I/O inside the block.
        """
        shard = self._shard_for(phone)
        with shard.lock:
            yield shard.records

    def get(self, phone: str) -> Optional[OTPRecord]:
        """Return a copy of the record for phone, or None"""
        with self.atomic(phone) as records:
            record = records.get(phone)
            return record.copy() if record else None

    def put(self, phone: str, record: OTPRecord) -> None:
        with self.atomic(phone) as records:
            records[phone] = record

    def delete(self, phone: str) -> bool:
        with self.atomic(phone) as records:
            return records.pop(phone, None) is not None

    def purge(self, predicate: Callable[[OTPRecord], bool]) -> int:
        """
        Delete every record matching predicate, one shard at a time.

        Returns:
            Number of records deleted
        """
        removed = 0
        for shard in self._shards:
            with shard.lock:
                stale = [phone for phone, record in shard.records.items() if predicate(record)]
                for phone in stale:
                    del shard.records[phone]
                removed += len(stale)
        return removed

    def clear(self) -> None:
        for shard in self._shards:
            with shard.lock:
                shard.records.clear()

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.records)
        return total
