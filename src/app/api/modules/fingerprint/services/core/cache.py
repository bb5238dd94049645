import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, datetime

from app.api.modules.fingerprint.schema import Analysis


@dataclass(slots=True)
class CachedAnalysis:
    analysis: Analysis
    inserted_at: datetime


class AnalysisCache:
    """Recent analyses keyed by fingerprint hash, evicted strictly FIFO.

    Overwriting an existing key replaces its value but keeps its original
    insertion position, so reads and rewrites never refresh an entry.
    Per-process memory store.
    """

    def __init__(self, capacity: int = 1000):
        self._capacity = max(1, int(capacity))
        self._items: OrderedDict[str, CachedAnalysis] = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    async def put(self, analysis: Analysis) -> str | None:
        """Store ``analysis`` and return the evicted key, if any."""
        entry = CachedAnalysis(analysis=analysis, inserted_at=datetime.now(UTC))
        async with self._lock:
            self._items[analysis.fingerprint] = entry
            if len(self._items) > self._capacity:
                evicted, _ = self._items.popitem(last=False)
                return evicted
        return None

    async def get(self, key: str) -> CachedAnalysis | None:
        async with self._lock:
            return self._items.get(key)

    async def keys(self) -> list[str]:
        async with self._lock:
            return list(self._items)


__all__ = ("AnalysisCache", "CachedAnalysis")
