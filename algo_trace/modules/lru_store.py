"""Capacity-bounded key/value store with least-recently-used eviction.

The recency sequence and the key index are a single ordered mapping: the
first entry is the most recently used, the last the least recently used.
Promotion and tail eviction are both O(1).
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Hashable, Iterator, List, NamedTuple, Tuple

import logging
import math

from algo_trace.modules.errors import InvalidCapacityError, InvalidValueError


logger = logging.getLogger(__name__)


class _Miss:
    _instance = None

    def __new__(cls) -> "_Miss":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Miss, ())


MISS = _Miss()


class PutOutcome(NamedTuple):
    inserted: bool
    evicted: bool
    evicted_key: Any = None


def validate_capacity(capacity: Any) -> int:
    # bool is an int subclass but never a meaningful capacity
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidCapacityError(capacity)
    return capacity


_SCALARS = (type(None), bool, int, str)


def validate_value(value: Any, what: str = "value") -> Any:
    """Accept plain data only: None, bool, int, str, finite float, and
    lists, tuples and dicts built from them (dict keys must be str or int).

    Copies of such values compare equal to the original, which is what lets
    a trace be replayed and checked with ``==``.
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidValueError(f"{what} must be a finite number, got {value!r}")
        return value
    if isinstance(value, (list, tuple)):
        for item in value:
            validate_value(item, what)
        return value
    if isinstance(value, dict):
        for k, v in value.items():
            if isinstance(k, bool) or not isinstance(k, (str, int)):
                raise InvalidValueError(f"{what} dict keys must be str or int, got {k!r}")
            validate_value(v, what)
        return value
    raise InvalidValueError(f"{what} must be plain data, got {type(value).__name__}")


def validate_key(key: Any) -> Hashable:
    if isinstance(key, (list, dict)):
        raise InvalidValueError(f"key must be hashable, got {type(key).__name__}")
    return validate_value(key, "key")


class LRUStore:
    def __init__(self, capacity: int) -> None:
        self._capacity = validate_capacity(capacity)
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entries)

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key`` and promote it, or ``MISS``."""
        validate_key(key)
        if key not in self._entries:
            return MISS
        self._entries.move_to_end(key, last=False)
        return self._entries[key]

    def peek(self, key: Hashable) -> Any:
        """Like ``get`` but leaves the recency order untouched."""
        return self._entries.get(key, MISS)

    def put(self, key: Hashable, value: Any) -> PutOutcome:
        validate_key(key)
        validate_value(value)
        if key in self._entries:
            self._entries[key] = value
            self._entries.move_to_end(key, last=False)
            return PutOutcome(inserted=False, evicted=False)

        self._entries[key] = value
        self._entries.move_to_end(key, last=False)
        if len(self._entries) > self._capacity:
            evicted_key, _ = self._entries.popitem(last=True)
            logger.debug("evicted key %r (capacity %d)", evicted_key, self._capacity)
            return PutOutcome(inserted=True, evicted=True, evicted_key=evicted_key)
        return PutOutcome(inserted=True, evicted=False)

    def keys_by_recency(self) -> List[Hashable]:
        """Keys from most to least recently used."""
        return list(self._entries)

    def items_by_recency(self) -> List[Tuple[Hashable, Any]]:
        return list(self._entries.items())

    def index_items(self) -> List[Tuple[Hashable, Any]]:
        """Key index view; order carries no meaning."""
        return [(key, self._entries[key]) for key in self._entries.keys()]


__all__ = ["LRUStore", "MISS", "PutOutcome", "validate_capacity", "validate_key", "validate_value"]
