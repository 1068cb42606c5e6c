"""Runtime limits and playback settings read from the environment."""

from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def min_capacity() -> int:
    return _int_env("ALGO_TRACE_MIN_CAPACITY", 1)


def max_capacity() -> int:
    return _int_env("ALGO_TRACE_MAX_CAPACITY", 8)


def max_operations() -> int:
    return _int_env("ALGO_TRACE_MAX_OPERATIONS", 18)


def max_numbers() -> int:
    return _int_env("ALGO_TRACE_MAX_NUMBERS", 12)


def step_interval_ms() -> int:
    return _int_env("ALGO_TRACE_STEP_INTERVAL_MS", 1600)


def log_level() -> str:
    return (os.getenv("ALGO_TRACE_LOG_LEVEL") or "INFO").upper()


__all__ = [
    "min_capacity",
    "max_capacity",
    "max_operations",
    "max_numbers",
    "step_interval_ms",
    "log_level",
]
