"""FastAPI for the algorithm trace engines."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import logging
import os
import sys
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

# Ensure project root is on sys.path when executed from arbitrary CWD
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from algo_trace.modules import config
from algo_trace.modules.describe import describe_step, operation_label
from algo_trace.modules.errors import (
    InvalidCapacityError,
    InvalidOperationError,
    InvalidValueError,
    InvalidWindowError,
    StepIndexError,
    TraceMismatchError,
)
from algo_trace.modules.operations import DEFAULT_CAPACITY, DEFAULT_OPERATIONS, parse_operations, run_operations
from algo_trace.modules.replay import verify_trace
from algo_trace.modules.sliding_window import build_sliding_window_trace
from algo_trace.modules.snapshots import CacheStep
from algo_trace.modules.trace import Trace


logging.basicConfig(level=config.log_level())
logger = logging.getLogger(__name__)


class LRURunRequest(BaseModel):
    capacity: int = DEFAULT_CAPACITY
    operations: List[Any] = Field(default_factory=lambda: [list(op) for op in DEFAULT_OPERATIONS])


class StepOut(BaseModel):
    seq: int
    kind: str
    label: str
    description: str
    operation_index: int
    key: Any = None
    value: Any = None
    result: Any = None
    hit: Optional[bool] = None
    evicted_key: Any = None
    capacity: int
    recency: List[Dict[str, Any]]
    index: List[Dict[str, Any]]


class LRURunResponse(BaseModel):
    capacity: int
    operations: List[List[Any]]
    steps: List[StepOut]
    final_recency: List[Any]


class WindowRequest(BaseModel):
    numbers: List[float]
    k: int


class WindowResponse(BaseModel):
    k: int
    steps: List[Dict[str, Any]]
    results: List[float]


app = FastAPI(title="Algorithm Trace API", version="0.1.0")


def _step_out(step: CacheStep) -> StepOut:
    data = step.model_dump(mode="json")
    return StepOut(
        **data,
        label=operation_label(step),
        description=describe_step(step),
    )


def _run_lru(req: LRURunRequest) -> tuple[Trace[CacheStep], List[List[Any]]]:
    low, high = config.min_capacity(), config.max_capacity()
    if not (low <= req.capacity <= high):
        raise HTTPException(status_code=422, detail=f"capacity must be an integer between {low} and {high}")
    try:
        ops = parse_operations(req.operations)
        trace = run_operations(req.capacity, ops)
    except (InvalidOperationError, InvalidCapacityError, InvalidValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        verify_trace(trace)
    except TraceMismatchError as exc:
        logger.error("recorded trace failed replay: %s", exc)
        raise HTTPException(status_code=500, detail=f"trace verification failed: {exc}") from exc
    return trace, [op.as_list() for op in ops]


@app.post("/lru/run", response_model=LRURunResponse)
async def run_lru(req: LRURunRequest) -> LRURunResponse:
    trace, ops = _run_lru(req)
    return LRURunResponse(
        capacity=req.capacity,
        operations=ops,
        steps=[_step_out(s) for s in trace],
        final_recency=list(trace.latest_step().recency_keys()),
    )


@app.post("/lru/run/steps/{index}", response_model=StepOut)
async def run_lru_step(index: int, req: LRURunRequest) -> StepOut:
    trace, _ = _run_lru(req)
    try:
        return _step_out(trace.step_at(index))
    except StepIndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/sliding-window/run", response_model=WindowResponse)
async def run_sliding_window(req: WindowRequest) -> WindowResponse:
    if len(req.numbers) > config.max_numbers():
        raise HTTPException(status_code=422, detail=f"at most {config.max_numbers()} numbers are allowed")
    try:
        trace = build_sliding_window_trace(req.numbers, req.k)
    except InvalidWindowError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    last = trace.latest_step()
    return WindowResponse(
        k=req.k,
        steps=[s.model_dump(mode="json") for s in trace],
        results=list(last.results),
    )


@app.get("/")
async def root() -> Dict[str, Any]:
    return {"status": "ok", "message": "Algorithm Trace API"}
