import threading

import pytest

from algo_trace.modules.errors import InvalidCapacityError, InvalidValueError, StepIndexError
from algo_trace.modules.lru_store import MISS
from algo_trace.modules.recorder import TracedLRUCache, create_cache
from algo_trace.modules.replay import verify_trace
from algo_trace.modules.snapshots import StepKind


def _run_scenario():
    cache, trace = create_cache(2)
    results = [
        cache.put(1, 1),
        cache.put(2, 2),
        cache.get(1),
        cache.put(3, 3),
        cache.get(2),
        cache.put(4, 4),
        cache.get(1),
        cache.get(3),
        cache.get(4),
    ]
    return cache, trace, results


def test_capacity_two_scenario():
    cache, trace, results = _run_scenario()
    assert results == [None, None, 1, None, MISS, None, MISS, 3, 4]
    kinds = [s.kind for s in trace]
    assert kinds == [
        StepKind.INIT,
        StepKind.PUT_INSERT,
        StepKind.PUT_INSERT,
        StepKind.GET_HIT,
        StepKind.PUT_INSERT,
        StepKind.EVICT,
        StepKind.GET_MISS,
        StepKind.PUT_INSERT,
        StepKind.EVICT,
        StepKind.GET_MISS,
        StepKind.GET_HIT,
        StepKind.GET_HIT,
    ]
    assert trace.step_count() == 12
    assert trace.step_at(5).evicted_key == 2
    assert trace.step_at(8).evicted_key == 1
    assert trace.latest_step().recency_keys() == (4, 3)
    assert cache.keys_by_recency() == [4, 3]


def test_init_step_is_empty():
    _, trace = create_cache(3)
    init = trace.latest_step()
    assert init.kind is StepKind.INIT
    assert init.seq == 0
    assert init.operation_index == -1
    assert init.recency == () and init.index == ()
    assert init.capacity == 3


def test_steps_carry_sequence_and_operation_index():
    _, trace, _ = _run_scenario()
    assert [s.seq for s in trace] == list(range(12))
    assert [s.operation_index for s in trace] == [-1, 0, 1, 2, 3, 3, 4, 5, 5, 6, 7, 8]


def test_capacity_invariant_holds_at_every_step():
    cache, trace = create_cache(3)
    for i in range(20):
        cache.put(i % 7, i)
        cache.get((i * 3) % 5)
    for step in trace:
        assert len(step.recency) == len(step.index) <= 3
        assert {e.key: e.value for e in step.recency} == step.index_map()


def test_promotion_keeps_relative_order_of_others():
    cache, trace = create_cache(4)
    for k in "abcd":
        cache.put(k, k.upper())
    before = list(trace.latest_step().recency_keys())
    assert cache.get("c") == "C"
    after = list(trace.latest_step().recency_keys())
    assert after[0] == "c"
    assert after[1:] == [k for k in before if k != "c"]
    assert trace.latest_step().kind is StepKind.GET_HIT
    assert trace.latest_step().result == "C"


def test_eviction_removes_prior_tail():
    cache, trace = create_cache(3)
    for k in (1, 2, 3):
        cache.put(k, k)
    cache.get(1)
    tail = trace.latest_step().recency_keys()[-1]
    assert tail == 2
    cache.put(4, 4)
    insert, evict = trace.step_at(trace.step_count() - 2), trace.latest_step()
    assert insert.kind is StepKind.PUT_INSERT and insert.evicted_key == tail
    assert evict.kind is StepKind.EVICT and evict.evicted_key == tail
    assert tail not in evict.recency_keys()
    assert evict.recency == insert.recency


def test_update_never_evicts_or_grows():
    cache, trace = create_cache(2)
    cache.put(1, 1)
    cache.put(2, 2)
    count = trace.step_count()
    cache.put(1, 100)
    assert trace.step_count() == count + 1
    step = trace.latest_step()
    assert step.kind is StepKind.PUT_UPDATE
    assert step.evicted_key is None
    assert step.recency_keys() == (1, 2)
    assert step.index_map() == {1: 100, 2: 2}


def test_capacity_one_boundary():
    cache, trace = create_cache(1)
    cache.put("x", 1)
    cache.put("x", 2)
    cache.put("x", 3)
    assert StepKind.EVICT not in [s.kind for s in trace]
    cache.put("y", 1)
    cache.put("z", 1)
    evicted = [s.evicted_key for s in trace if s.kind is StepKind.EVICT]
    assert evicted == ["x", "y"]
    assert trace.latest_step().recency_keys() == ("z",)


def test_steps_are_not_affected_by_later_mutation():
    cache, trace = create_cache(2)
    payload = {"n": [1, 2]}
    cache.put("k", payload)
    step = trace.latest_step()
    dumped = step.model_dump()

    payload["n"].append(3)
    cache.put("k", "replaced")
    cache.put("other", 0)
    cache.put("third", 0)

    assert step.model_dump() == dumped
    assert step.recency[0].value == {"n": [1, 2]}
    assert step.value == {"n": [1, 2]}
    with pytest.raises(Exception):
        step.kind = StepKind.EVICT


def test_step_access_errors():
    _, trace = create_cache(2)
    with pytest.raises(StepIndexError):
        trace.step_at(1)
    with pytest.raises(StepIndexError):
        trace.step_at(-1)
    with pytest.raises(IndexError):
        trace.step_at(5)


def test_bad_capacity_creates_nothing():
    with pytest.raises(InvalidCapacityError):
        create_cache(0)
    with pytest.raises(InvalidCapacityError):
        TracedLRUCache(-3)


@pytest.mark.parametrize("value", [threading.Lock(), float("nan"), object()])
def test_rejected_put_changes_neither_store_nor_trace(value):
    cache, trace = create_cache(1)
    cache.put(0, "zero")
    count = trace.step_count()

    with pytest.raises(InvalidValueError):
        cache.put(1, value)
    with pytest.raises(InvalidValueError):
        cache.put(0, value)

    assert len(cache) == 1
    assert 1 not in cache
    assert trace.step_count() == count
    assert cache.get(0) == "zero"
    assert cache.get(1) is MISS
    verify_trace(trace)
