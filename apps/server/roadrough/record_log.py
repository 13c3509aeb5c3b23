"""Append-only JSONL store for measurement records kept on the device.

Every record is written locally before (and regardless of) upload, so a
trip survives a dead network.  One JSON object per line, the same field
names as the upload body.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from threading import Lock

from .domain_models import MeasurementRecord
from .json_utils import parse_json_line, safe_json_dumps

LOGGER = logging.getLogger(__name__)


class RecordLog:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = Lock()
        self.written: int = 0
        self.last_error: str | None = None

    def submit(self, record: MeasurementRecord) -> bool:
        line = safe_json_dumps(record.to_dict())
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as exc:
                self.last_error = str(exc)
                LOGGER.error("Could not append record to %s: %s", self.path, exc)
                return False
            self.written += 1
            self.last_error = None
        return True


def read_records(path: Path) -> Iterator[MeasurementRecord]:
    """Yield records from *path*, skipping lines that do not parse."""
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            payload = parse_json_line(line, context=f"{path}:{line_no}")
            if payload is None:
                continue
            try:
                yield MeasurementRecord.from_dict(payload)
            except ValueError as exc:
                LOGGER.warning("Skipping malformed record at %s:%d: %s", path, line_no, exc)
