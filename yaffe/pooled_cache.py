"""A keyed cache that stores its values in fixed-size pools."""

from __future__ import annotations

import threading
from typing import Dict, Generic, Hashable, KeysView, List, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class PooledCache(Generic[K, V]):
    """Stores values in pools of ``pool_size`` slots, indexed by key.

    A pool is only added once every existing pool is full. Values are
    returned by reference, so callers may mutate what ``get`` returns.
    """

    def __init__(self, pool_size: int = 32) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self._pool_size = pool_size
        self._pools: List[List[V]] = []
        self._index: Dict[K, Tuple[int, int]] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        """Return the value stored for ``key``, or ``None``."""
        with self._lock:
            location = self._index.get(key)
            if location is None:
                return None
            pool, slot = location
            return self._pools[pool][slot]

    def insert(self, key: K, value: V) -> None:
        """Store ``value`` under ``key`` in the first pool with a free slot."""
        with self._lock:
            for i, pool in enumerate(self._pools):
                if len(pool) < self._pool_size:
                    pool.append(value)
                    self._index[key] = (i, len(pool) - 1)
                    return
            self._pools.append([value])
            self._index[key] = (len(self._pools) - 1, 0)

    def keys(self) -> KeysView[K]:
        """The keys currently in the cache."""
        return self._index.keys()

    def exists(self, key: K) -> bool:
        return key in self._index

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def pool_count(self) -> int:
        """Number of pools allocated so far."""
        return len(self._pools)