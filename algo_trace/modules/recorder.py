"""Trace recorder wrapping the LRU store.

Every public operation on ``TracedLRUCache`` runs against the store, lets it
settle, appends the resulting step(s) to the trace and only then hands the
result back to the caller.
"""

from __future__ import annotations

from typing import Any, Hashable, Tuple

from algo_trace.modules.errors import TraceInvariantError
from algo_trace.modules.lru_store import MISS, LRUStore
from algo_trace.modules.snapshots import CacheStep, StepKind, snapshot_store
from algo_trace.modules.trace import Trace


class TracedLRUCache:
    def __init__(self, capacity: int) -> None:
        # LRUStore validates capacity before any trace exists
        self._store = LRUStore(capacity)
        self._trace: Trace[CacheStep] = Trace()
        self._operations = 0
        self._record(StepKind.INIT)

    @property
    def trace(self) -> Trace[CacheStep]:
        return self._trace

    @property
    def capacity(self) -> int:
        return self._store.capacity

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._store

    def keys_by_recency(self):
        return self._store.keys_by_recency()

    def _next_operation(self) -> int:
        index = self._operations
        self._operations += 1
        return index

    def get(self, key: Hashable) -> Any:
        operation_index = self._next_operation()
        value = self._store.get(key)
        if value is MISS:
            self._record(StepKind.GET_MISS, operation_index=operation_index, key=key, hit=False)
        else:
            self._record(
                StepKind.GET_HIT,
                operation_index=operation_index,
                key=key,
                result=value,
                hit=True,
            )
        return value

    def put(self, key: Hashable, value: Any) -> None:
        operation_index = self._next_operation()
        outcome = self._store.put(key, value)
        if not outcome.inserted:
            self._record(StepKind.PUT_UPDATE, operation_index=operation_index, key=key, value=value)
            return

        evicted_key = outcome.evicted_key if outcome.evicted else None
        self._record(
            StepKind.PUT_INSERT,
            operation_index=operation_index,
            key=key,
            value=value,
            evicted_key=evicted_key,
        )
        if outcome.evicted:
            self._record(
                StepKind.EVICT,
                operation_index=operation_index,
                key=key,
                value=value,
                evicted_key=evicted_key,
            )

    def _record(self, kind: StepKind, **fields: Any) -> CacheStep:
        step = snapshot_store(self._store, self._trace.step_count(), kind, **fields)
        if not (len(step.recency) == len(step.index) <= step.capacity):
            raise TraceInvariantError(
                f"{kind.value}: recency={len(step.recency)} index={len(step.index)} "
                f"capacity={step.capacity}"
            )
        return self._trace._append(step)


def create_cache(capacity: int) -> Tuple[TracedLRUCache, Trace[CacheStep]]:
    cache = TracedLRUCache(capacity)
    return cache, cache.trace


__all__ = ["TracedLRUCache", "create_cache"]
