"""Shared test helpers for the roadrough test suite."""

from __future__ import annotations

import time

import pytest

from roadrough.domain_models import MeasurementRecord

FIXED_TIMESTAMP = "2026-10-18T12:00:00+00:00"


def wait_until(predicate, timeout_s: float = 2.0, step_s: float = 0.02) -> bool:
    """Poll *predicate* until it returns truthy, or *timeout_s* expires."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step_s)
    return False


class CollectingSink:
    """Record sink that keeps everything it is handed."""

    def __init__(self, result: bool = True) -> None:
        self.records: list[MeasurementRecord] = []
        self.result = result

    def submit(self, record: MeasurementRecord) -> bool:
        self.records.append(record)
        return self.result


class RaisingSink:
    def __init__(self) -> None:
        self.calls = 0

    def submit(self, record: MeasurementRecord) -> bool:
        self.calls += 1
        raise RuntimeError("sink exploded")


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIMESTAMP
