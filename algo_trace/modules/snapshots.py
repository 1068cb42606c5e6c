"""Immutable step records for the LRU cache trace."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple

import copy

from pydantic import BaseModel, ConfigDict

from algo_trace.modules.lru_store import LRUStore


class StepKind(str, Enum):
    INIT = "init"
    GET_HIT = "get-hit"
    GET_MISS = "get-miss"
    PUT_INSERT = "put-insert"
    PUT_UPDATE = "put-update"
    EVICT = "evict"


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: Any
    value: Any


class CacheStep(BaseModel):
    """State of the cache right after one logical operation.

    ``recency`` runs head (most recently used) to tail. ``index`` holds the
    same entries as seen through the key index; its order is not meaningful.

    Keys and values are private deep copies of plain data. The model is
    frozen, but nested lists and dicts are not: callers must treat them as
    read-only, and should use ``index_map()`` when they need a copy they can
    change.
    """

    model_config = ConfigDict(frozen=True)

    seq: int
    kind: StepKind
    operation_index: int = -1
    key: Any = None
    value: Any = None
    result: Any = None
    hit: Optional[bool] = None
    evicted_key: Any = None
    capacity: int
    recency: Tuple[Entry, ...] = ()
    index: Tuple[Entry, ...] = ()

    @property
    def size(self) -> int:
        return len(self.recency)

    def recency_keys(self) -> Tuple[Any, ...]:
        return tuple(e.key for e in self.recency)

    def index_map(self) -> dict:
        """Fresh dict built from the index snapshot."""
        return {e.key: copy.deepcopy(e.value) for e in self.index}


def _entries(pairs) -> Tuple[Entry, ...]:
    return tuple(Entry(key=copy.deepcopy(k), value=copy.deepcopy(v)) for k, v in pairs)


def snapshot_store(store: LRUStore, seq: int, kind: StepKind, **fields: Any) -> CacheStep:
    fields = {name: copy.deepcopy(val) for name, val in fields.items()}
    return CacheStep(
        seq=seq,
        kind=kind,
        capacity=store.capacity,
        recency=_entries(store.items_by_recency()),
        index=_entries(store.index_items()),
        **fields,
    )


__all__ = ["StepKind", "Entry", "CacheStep", "snapshot_store"]
