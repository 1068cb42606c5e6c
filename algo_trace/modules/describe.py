"""Human-readable labels and sentences for LRU trace steps."""

from __future__ import annotations

from typing import Dict

from algo_trace.modules.snapshots import CacheStep, StepKind


PHASE_LABELS: Dict[StepKind, str] = {
    StepKind.INIT: "Init",
    StepKind.GET_HIT: "GET hit",
    StepKind.GET_MISS: "GET miss",
    StepKind.PUT_UPDATE: "PUT update",
    StepKind.PUT_INSERT: "PUT insert",
    StepKind.EVICT: "Evict",
}

PHASE_HINTS: Dict[StepKind, str] = {
    StepKind.INIT: "Set the capacity and start from an empty cache",
    StepKind.GET_HIT: "A hit moves the entry to the head",
    StepKind.GET_MISS: "A miss returns -1 and leaves the order alone",
    StepKind.PUT_UPDATE: "Update the existing key and make it most recent",
    StepKind.PUT_INSERT: "Insert the new key as most recently used",
    StepKind.EVICT: "Over capacity: drop the least recently used entry",
}


def operation_label(step: CacheStep) -> str:
    if step.kind is StepKind.INIT:
        return "INIT"
    if step.kind in (StepKind.GET_HIT, StepKind.GET_MISS):
        return f"GET({step.key})"
    return f"PUT({step.key}, {step.value})"


def describe_step(step: CacheStep) -> str:
    kind = step.kind
    if kind is StepKind.INIT:
        return f"Capacity set to {step.capacity}; cache and recency list are empty."
    if kind is StepKind.GET_HIT:
        return f"GET({step.key}) hit, returns {step.result} and moves it to the head."
    if kind is StepKind.GET_MISS:
        return f"GET({step.key}) missed, returns -1; the list is unchanged."
    if kind is StepKind.PUT_UPDATE:
        return f"PUT({step.key}, {step.value}) already present, value updated and marked most recent."
    text = f"PUT({step.key}, {step.value}) not cached, inserted at the head."
    if kind is StepKind.PUT_INSERT:
        if step.evicted_key is not None:
            text += f" Capacity exceeded, key={step.evicted_key} will be evicted."
        return text
    return f"Capacity exceeded, evicted least recently used key={step.evicted_key}."


def node_status(step: CacheStep, position: int) -> str:
    """Classify the recency entry at ``position`` for display."""
    node = step.recency[position]
    size = len(step.recency)
    if step.key is not None and node.key == step.key:
        if step.kind in (StepKind.GET_HIT, StepKind.GET_MISS):
            return "active"
        if step.kind is not StepKind.INIT:
            return "updated"
    if position == 0 and size > 1:
        return "mru"
    if position == size - 1 and size > 1:
        return "lru"
    return "default"


__all__ = ["PHASE_LABELS", "PHASE_HINTS", "operation_label", "describe_step", "node_status"]
