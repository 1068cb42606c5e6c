import pytest

from algo_trace.modules.errors import StepIndexError
from algo_trace.modules.operations import DEFAULT_OPERATIONS, run_operations
from algo_trace.modules.playback import PlaybackController
from algo_trace.modules.recorder import create_cache


def _player():
    return PlaybackController(run_operations(2, DEFAULT_OPERATIONS))


def test_next_and_previous_clamp():
    player = _player()
    assert player.position == 0
    player.previous()
    assert player.position == 0
    for _ in range(50):
        player.next()
    assert player.position == 11
    assert player.at_end
    assert player.current_step.recency_keys() == (4, 3)
    assert player.progress == 1.0


def test_play_ticks_to_end_and_stops():
    player = _player()
    player.play()
    moves = 0
    while player.tick():
        moves += 1
    assert moves == 11
    assert not player.is_playing
    assert player.at_end


def test_play_at_end_restarts():
    player = _player()
    player.seek(11)
    player.play()
    assert player.position == 0
    assert player.is_playing


def test_pause_toggle_reset():
    player = _player()
    assert player.toggle() is True
    player.tick()
    assert player.toggle() is False
    assert player.tick() is False
    assert player.position == 1
    player.reset()
    assert player.position == 0 and not player.is_playing


def test_history_and_seek():
    player = _player()
    player.seek(4)
    assert [s.seq for s in player.history()] == [0, 1, 2, 3, 4]
    with pytest.raises(StepIndexError):
        player.seek(12)
    assert player.position == 4


def test_single_step_trace_progress():
    _, trace = create_cache(2)
    player = PlaybackController(trace)
    assert player.at_end
    assert player.progress == 1.0


def test_playback_never_mutates_trace():
    trace = run_operations(2, DEFAULT_OPERATIONS)
    before = [s.model_dump() for s in trace]
    player = PlaybackController(trace)
    player.play()
    while player.tick():
        pass
    player.reset()
    assert [s.model_dump() for s in trace] == before
