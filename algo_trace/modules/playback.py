"""Cursor over a finished trace: step, play, pause, reset.

The controller never holds a timer. Whoever renders it calls ``tick`` at
its own interval (``config.step_interval_ms`` by default) while playing.
"""

from __future__ import annotations

from typing import Generic, Tuple, TypeVar

from algo_trace.modules.trace import Trace


S = TypeVar("S")


class PlaybackController(Generic[S]):
    def __init__(self, trace: Trace[S]) -> None:
        self._trace = trace
        self._position = 0
        self._playing = False

    @property
    def trace(self) -> Trace[S]:
        return self._trace

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def last_position(self) -> int:
        return max(self._trace.step_count() - 1, 0)

    @property
    def at_end(self) -> bool:
        return self._position >= self.last_position

    @property
    def current_step(self) -> S:
        return self._trace.step_at(self._position)

    @property
    def progress(self) -> float:
        count = self._trace.step_count()
        if count == 0:
            return 0.0
        if count == 1:
            return 1.0 if self.at_end else 0.0
        return self._position / (count - 1)

    def history(self) -> Tuple[S, ...]:
        return self._trace.prefix(min(self._position + 1, self._trace.step_count()))

    def next(self) -> S:
        self._playing = False
        self._position = min(self._position + 1, self.last_position)
        return self.current_step

    def previous(self) -> S:
        self._playing = False
        self._position = max(self._position - 1, 0)
        return self.current_step

    def seek(self, index: int) -> S:
        step = self._trace.step_at(index)
        self._playing = False
        self._position = index
        return step

    def play(self) -> None:
        if self.at_end:
            self._position = 0
        self._playing = True

    def pause(self) -> None:
        self._playing = False

    def toggle(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.play()
        return self._playing

    def reset(self) -> None:
        self._playing = False
        self._position = 0

    def tick(self) -> bool:
        """Advance one step while playing; stop at the end."""
        if not self._playing:
            return False
        if self.at_end:
            self._playing = False
            return False
        self._position += 1
        if self.at_end:
            self._playing = False
        return True


__all__ = ["PlaybackController"]
