"""Operation lists for the LRU trace and the driver that applies them.

Operations come in either array form (``["put", 1, 1]``, ``["get", 1]``) or
object form (``{"type": "put", "key": 1, "value": 1}``); ``op`` is accepted
in place of ``type``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Literal, Optional, Sequence, Union

import json
import logging

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from algo_trace.modules import config
from algo_trace.modules.errors import InvalidOperationError
from algo_trace.modules.lru_store import validate_value
from algo_trace.modules.recorder import TracedLRUCache
from algo_trace.modules.snapshots import CacheStep
from algo_trace.modules.trace import Trace


logger = logging.getLogger(__name__)


DEFAULT_CAPACITY = 2

DEFAULT_OPERATIONS: List[List[Any]] = [
    ["put", 1, 1],
    ["put", 2, 2],
    ["get", 1],
    ["put", 3, 3],
    ["get", 2],
    ["put", 4, 4],
    ["get", 1],
    ["get", 3],
    ["get", 4],
]


class Operation(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    type: Literal["get", "put"]
    key: Union[int, float, str]
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if not data:
                raise ValueError("empty operation")
            fields = dict(zip(("type", "key", "value"), data))
            fields.setdefault("key", None)
            data = fields
        if isinstance(data, dict):
            data = dict(data)
            if "type" not in data and "op" in data:
                data["type"] = data.pop("op")
            op_type = data.get("type")
            if not isinstance(op_type, str):
                raise ValueError("missing operation type string")
            data["type"] = op_type.lower()
            if data["type"] == "get":
                data.pop("value", None)
            elif data["type"] == "put":
                if data.get("value") is None:
                    raise ValueError("put requires a value")
                validate_value(data["value"])
        return data

    def label(self) -> str:
        if self.type == "put":
            return f"PUT({self.key}, {self.value})"
        return f"GET({self.key})"

    def as_list(self) -> List[Any]:
        if self.type == "put":
            return [self.type, self.key, self.value]
        return [self.type, self.key]


def _to_operation(item: Any, position: int) -> Operation:
    if isinstance(item, Operation):
        return item
    if not isinstance(item, (list, tuple, dict)):
        raise InvalidOperationError("use array or object form", position)
    try:
        return Operation.model_validate(item)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise InvalidOperationError(first.get("msg", str(exc)), position) from exc


def _reject_constant(name: str) -> Any:
    raise InvalidOperationError(f"{name} is not an allowed number")


def parse_operations(raw: Union[str, Sequence[Any]], limit: Optional[int] = None) -> List[Operation]:
    """Parse a JSON string or decoded list into operations.

    ``limit`` defaults to the configured maximum; pass ``0`` to disable it.
    """
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        try:
            raw = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise InvalidOperationError(
                'expected a JSON array such as [["put",1,1],["get",1]]'
            ) from exc
    if not isinstance(raw, (list, tuple)):
        raise InvalidOperationError("operations must be an array")

    max_ops = config.max_operations() if limit is None else limit
    if max_ops and len(raw) > max_ops:
        raise InvalidOperationError(f"at most {max_ops} operations are allowed")

    return [_to_operation(item, position) for position, item in enumerate(raw, 1)]


def apply_operations(cache: TracedLRUCache, operations: Iterable[Operation]) -> List[Any]:
    """Apply ``operations`` in order, returning each get's result (None for puts)."""
    results: List[Any] = []
    for op in operations:
        if op.type == "get":
            results.append(cache.get(op.key))
        else:
            cache.put(op.key, op.value)
            results.append(None)
    return results


def run_operations(capacity: int, operations: Iterable[Union[Operation, Sequence[Any], Dict[str, Any]]]) -> Trace[CacheStep]:
    ops = [_to_operation(item, position) for position, item in enumerate(operations, 1)]
    cache = TracedLRUCache(capacity)
    apply_operations(cache, ops)
    trace = cache.trace
    logger.info(
        "ran %d operations at capacity %d: %d steps, final order %s",
        len(ops),
        capacity,
        trace.step_count(),
        cache.keys_by_recency(),
    )
    return trace


def default_operations() -> List[Operation]:
    return parse_operations(DEFAULT_OPERATIONS, limit=0)


__all__ = [
    "DEFAULT_CAPACITY",
    "DEFAULT_OPERATIONS",
    "Operation",
    "parse_operations",
    "apply_operations",
    "run_operations",
    "default_operations",
]
