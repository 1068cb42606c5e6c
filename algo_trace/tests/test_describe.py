from algo_trace.modules.describe import PHASE_HINTS, PHASE_LABELS, describe_step, node_status, operation_label
from algo_trace.modules.operations import DEFAULT_OPERATIONS, run_operations
from algo_trace.modules.snapshots import StepKind


def test_every_kind_has_label_and_hint():
    assert set(PHASE_LABELS) == set(StepKind)
    assert set(PHASE_HINTS) == set(StepKind)


def test_descriptions_follow_scenario():
    trace = run_operations(2, DEFAULT_OPERATIONS)
    assert operation_label(trace.step_at(0)) == "INIT"
    assert operation_label(trace.step_at(3)) == "GET(1)"
    assert operation_label(trace.step_at(4)) == "PUT(3, 3)"
    assert "Capacity set to 2" in describe_step(trace.step_at(0))
    assert "returns 1" in describe_step(trace.step_at(3))
    assert "key=2" in describe_step(trace.step_at(4))
    assert "evicted" in describe_step(trace.step_at(5))
    assert "-1" in describe_step(trace.step_at(6))


def test_node_status():
    trace = run_operations(2, DEFAULT_OPERATIONS)
    hit = trace.step_at(3)  # GET(1) -> [1, 2]
    assert node_status(hit, 0) == "active"
    assert node_status(hit, 1) == "lru"
    insert = trace.step_at(2)  # PUT(2, 2) -> [2, 1]
    assert node_status(insert, 0) == "updated"
    miss = trace.step_at(6)  # GET(2) miss -> [3, 1]
    assert node_status(miss, 0) == "mru"
    assert node_status(miss, 1) == "lru"
