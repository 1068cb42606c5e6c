"""Exception types raised by the trace engines."""

from __future__ import annotations

from typing import Optional


class AlgoTraceError(Exception):
    """Base class for every error raised by algo_trace."""


class InvalidCapacityError(AlgoTraceError, ValueError):
    def __init__(self, capacity: object) -> None:
        super().__init__(f"capacity must be a positive integer, got {capacity!r}")
        self.capacity = capacity


class StepIndexError(AlgoTraceError, IndexError):
    def __init__(self, index: int, count: int) -> None:
        if count == 0:
            message = "trace is empty"
        else:
            message = f"step index {index} out of range [0, {count})"
        super().__init__(message)
        self.index = index
        self.count = count


class TraceMismatchError(AlgoTraceError):
    """Replaying a trace disagreed with the snapshots it carries."""

    def __init__(self, message: str, seq: Optional[int] = None) -> None:
        if seq is not None:
            message = f"step {seq}: {message}"
        super().__init__(message)
        self.seq = seq


class TraceInvariantError(AlgoTraceError):
    """The live store broke the recency/index invariant at a step boundary."""


class InvalidOperationError(AlgoTraceError, ValueError):
    def __init__(self, message: str, position: Optional[int] = None) -> None:
        if position is not None:
            message = f"operation {position}: {message}"
        super().__init__(message)
        self.position = position


class InvalidValueError(AlgoTraceError, ValueError):
    """A cache key or value is not plain data."""


class InvalidWindowError(AlgoTraceError, ValueError):
    pass


__all__ = [
    "AlgoTraceError",
    "InvalidCapacityError",
    "StepIndexError",
    "TraceMismatchError",
    "TraceInvariantError",
    "InvalidOperationError",
    "InvalidWindowError",
    "InvalidValueError",
]
