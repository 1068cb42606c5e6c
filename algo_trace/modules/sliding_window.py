"""Sliding-window maximum with a monotonic deque, traced step by step."""

from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Deque, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from algo_trace.modules.errors import InvalidWindowError
from algo_trace.modules.trace import Trace


class WindowAction(str, Enum):
    REMOVE_OUTDATED = "remove-outdated"
    REMOVE_TAIL = "remove-tail"
    PUSH = "push"
    RECORD = "record"


class WindowStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    seq: int
    action: WindowAction
    index: int
    value: float
    window_start: int
    window_end: int
    deque_indices: Tuple[int, ...]
    results: Tuple[float, ...]
    removed_index: Optional[int] = None
    removed_value: Optional[float] = None
    max_index: Optional[int] = None
    max_value: Optional[float] = None


def _validate(numbers: Sequence[float], k: int) -> None:
    if not numbers:
        raise InvalidWindowError("numbers must not be empty")
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise InvalidWindowError(f"window size must be a positive integer, got {k!r}")
    if k > len(numbers):
        raise InvalidWindowError(f"window size {k} exceeds input length {len(numbers)}")


def build_sliding_window_trace(numbers: Sequence[float], k: int) -> Trace[WindowStep]:
    _validate(numbers, k)
    trace: Trace[WindowStep] = Trace()
    window: Deque[int] = deque()
    results: List[float] = []

    def record(action: WindowAction, i: int, **extra) -> None:
        trace._append(
            WindowStep(
                seq=trace.step_count(),
                action=action,
                index=i,
                value=numbers[i],
                window_start=max(0, i - k + 1),
                window_end=i,
                deque_indices=tuple(window),
                results=tuple(results),
                **extra,
            )
        )

    for i, value in enumerate(numbers):
        while window and window[0] < i - k + 1:
            removed = window.popleft()
            record(WindowAction.REMOVE_OUTDATED, i, removed_index=removed, removed_value=numbers[removed])

        # keep values strictly decreasing from head to tail
        while window and numbers[window[-1]] <= value:
            removed = window.pop()
            record(WindowAction.REMOVE_TAIL, i, removed_index=removed, removed_value=numbers[removed])

        window.append(i)
        record(WindowAction.PUSH, i)

        if i >= k - 1:
            max_index = window[0]
            results.append(numbers[max_index])
            record(WindowAction.RECORD, i, max_index=max_index, max_value=numbers[max_index])

    return trace


def sliding_window_max(numbers: Sequence[float], k: int) -> List[float]:
    trace = build_sliding_window_trace(numbers, k)
    return list(trace.latest_step().results)


__all__ = ["WindowAction", "WindowStep", "build_sliding_window_trace", "sliding_window_max"]
