"""Append-only, ordered step list shared by every traced algorithm."""

from __future__ import annotations

from typing import Generic, Iterator, List, Sequence, Tuple, TypeVar

from algo_trace.modules.errors import StepIndexError


S = TypeVar("S")


class Trace(Generic[S]):
    """Read-only to callers; only the owning recorder appends.

    Steps are expected to be immutable already, so reads hand out the
    stored objects directly.
    """

    def __init__(self) -> None:
        self._steps: List[S] = []

    def _append(self, step: S) -> S:
        self._steps.append(step)
        return step

    def step_count(self) -> int:
        return len(self._steps)

    def step_at(self, index: int) -> S:
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"step index must be an int, got {type(index).__name__}")
        if index < 0 or index >= len(self._steps):
            raise StepIndexError(index, len(self._steps))
        return self._steps[index]

    def latest_step(self) -> S:
        if not self._steps:
            raise StepIndexError(0, 0)
        return self._steps[-1]

    def prefix(self, length: int) -> Tuple[S, ...]:
        if length < 0 or length > len(self._steps):
            raise StepIndexError(length, len(self._steps) + 1)
        return tuple(self._steps[:length])

    @property
    def steps(self) -> Tuple[S, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[S]:
        return iter(tuple(self._steps))

    def __repr__(self) -> str:
        return f"Trace(steps={len(self._steps)})"


def as_step_list(steps: "Trace[S] | Sequence[S]") -> Tuple[S, ...]:
    if isinstance(steps, Trace):
        return steps.steps
    return tuple(steps)


__all__ = ["Trace", "as_step_list"]
