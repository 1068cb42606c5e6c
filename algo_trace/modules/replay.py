"""Structural replay of an LRU trace.

The replay reads a trace as a transcript: starting from the ``init`` step it
applies each step's kind, key, value and evicted key to a plain list/dict
model and never calls into the cache implementation. A recorder that drops,
duplicates or mis-snapshots a step shows up as a structural mismatch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import copy
import logging

from algo_trace.modules.errors import TraceMismatchError
from algo_trace.modules.snapshots import CacheStep, StepKind
from algo_trace.modules.trace import Trace, as_step_list


logger = logging.getLogger(__name__)

StepsLike = Union[Trace[CacheStep], Sequence[CacheStep]]


@dataclass
class ReplayState:
    capacity: int
    recency: List[Any] = field(default_factory=list)
    index: Dict[Any, Any] = field(default_factory=dict)

    def recency_items(self) -> List[Tuple[Any, Any]]:
        return [(k, self.index[k]) for k in self.recency]

    def promote(self, key: Any) -> None:
        self.recency.remove(key)
        self.recency.insert(0, key)


def _start(first: CacheStep) -> ReplayState:
    if first.kind is not StepKind.INIT:
        raise TraceMismatchError(f"trace must start with init, got {first.kind.value}", first.seq)
    if first.capacity <= 0:
        raise TraceMismatchError(f"init carries non-positive capacity {first.capacity}", first.seq)
    if first.operation_index != -1:
        raise TraceMismatchError("init must not belong to an operation", first.seq)
    return ReplayState(capacity=first.capacity)


def _apply(state: ReplayState, step: CacheStep, previous: CacheStep) -> None:
    kind = step.kind
    key = step.key

    expected_op = previous.operation_index if kind is StepKind.EVICT else previous.operation_index + 1
    if step.operation_index != expected_op:
        raise TraceMismatchError(
            f"operation index {step.operation_index}, expected {expected_op}", step.seq
        )

    if step.capacity != state.capacity:
        raise TraceMismatchError(
            f"capacity changed from {state.capacity} to {step.capacity}", step.seq
        )

    if kind is StepKind.INIT:
        raise TraceMismatchError("init may only appear as the first step", step.seq)

    if kind is StepKind.GET_HIT:
        if key not in state.index:
            raise TraceMismatchError(f"get-hit on absent key {key!r}", step.seq)
        if step.result != state.index[key]:
            raise TraceMismatchError(
                f"get-hit returned {step.result!r}, replay holds {state.index[key]!r}", step.seq
            )
        state.promote(key)

    elif kind is StepKind.GET_MISS:
        if key in state.index:
            raise TraceMismatchError(f"get-miss on present key {key!r}", step.seq)

    elif kind is StepKind.PUT_UPDATE:
        if key not in state.index:
            raise TraceMismatchError(f"put-update on absent key {key!r}", step.seq)
        if step.evicted_key is not None:
            raise TraceMismatchError("put-update must not evict", step.seq)
        state.index[key] = copy.deepcopy(step.value)
        state.promote(key)

    elif kind is StepKind.PUT_INSERT:
        if key in state.index:
            raise TraceMismatchError(f"put-insert of present key {key!r}", step.seq)
        state.index[key] = copy.deepcopy(step.value)
        state.recency.insert(0, key)
        if len(state.recency) > state.capacity:
            tail = state.recency[-1]
            if step.evicted_key is None or step.evicted_key != tail:
                raise TraceMismatchError(
                    f"over capacity after insert, expected eviction of {tail!r}, "
                    f"trace says {step.evicted_key!r}",
                    step.seq,
                )
            state.recency.pop()
            del state.index[tail]
        elif step.evicted_key is not None:
            raise TraceMismatchError(
                f"eviction of {step.evicted_key!r} recorded without overflow", step.seq
            )

    elif kind is StepKind.EVICT:
        if previous.kind is not StepKind.PUT_INSERT or previous.evicted_key is None:
            raise TraceMismatchError("evict must directly follow an evicting put-insert", step.seq)
        if step.evicted_key != previous.evicted_key or step.key != previous.key:
            raise TraceMismatchError(
                f"evict of {step.evicted_key!r} does not match insert evicting "
                f"{previous.evicted_key!r}",
                step.seq,
            )

    if previous.kind is StepKind.PUT_INSERT and previous.evicted_key is not None:
        if kind is not StepKind.EVICT:
            raise TraceMismatchError(
                f"missing evict step for key {previous.evicted_key!r}", step.seq
            )


def _check_snapshot(state: ReplayState, step: CacheStep) -> None:
    recorded_recency = [(e.key, e.value) for e in step.recency]
    if recorded_recency != state.recency_items():
        raise TraceMismatchError(
            f"recency {recorded_recency!r} != replayed {state.recency_items()!r}", step.seq
        )
    recorded_index = {e.key: e.value for e in step.index}
    if len(recorded_index) != len(step.index) or recorded_index != state.index:
        raise TraceMismatchError(
            f"index {recorded_index!r} != replayed {state.index!r}", step.seq
        )
    if not (len(step.recency) == len(step.index) <= step.capacity):
        raise TraceMismatchError("recency/index sizes break the capacity bound", step.seq)


def _run(steps: StepsLike, check: bool) -> ReplayState:
    items = as_step_list(steps)
    if not items:
        raise TraceMismatchError("cannot replay an empty trace")

    if items[0].seq != 0:
        raise TraceMismatchError("first step must have sequence number 0", items[0].seq)
    state = _start(items[0])
    if check:
        _check_snapshot(state, items[0])
    previous = items[0]
    for position, step in enumerate(items[1:], start=1):
        if step.seq != position:
            raise TraceMismatchError(f"expected sequence number {position}", step.seq)
        _apply(state, step, previous)
        if check:
            _check_snapshot(state, step)
        previous = step
    return state


def replay_steps(steps: StepsLike) -> ReplayState:
    """Rebuild the final recency/index state from the transcript alone."""
    return _run(steps, check=False)


def verify_trace(steps: StepsLike, length: Optional[int] = None) -> ReplayState:
    """Replay ``steps`` (or its first ``length`` steps) against every snapshot.

    Returns the replayed state, which equals the last step's snapshot.
    Raises ``TraceMismatchError`` on the first disagreement.
    """
    items = as_step_list(steps)
    if length is not None:
        items = items[:length]
    try:
        return _run(items, check=True)
    except TraceMismatchError as exc:
        logger.warning("trace verification failed: %s", exc)
        raise


__all__ = ["ReplayState", "replay_steps", "verify_trace"]
