"""Persistent per-device identifier.

The id is an opaque uuid4 hex string generated once and stored in a small
JSON file; every record from this device carries it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeviceIdentity:
    device_id: str
    created: bool


def _read_device_id(path: Path) -> str | None:
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        LOGGER.warning("Could not load device id from %s: %s", path, exc)
        return None
    if not isinstance(raw, dict):
        return None
    device_id = str(raw.get("device_id") or "").strip()
    return device_id or None


def _persist_device_id(path: Path, device_id: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps({"device_id": device_id}, indent=2), encoding="utf-8")
    tmp.replace(path)


def load_or_create_device_id(path: Path) -> DeviceIdentity:
    existing = _read_device_id(path)
    if existing is not None:
        return DeviceIdentity(device_id=existing, created=False)
    device_id = uuid4().hex
    _persist_device_id(path, device_id)
    LOGGER.info("Generated new device ID: %s", device_id)
    return DeviceIdentity(device_id=device_id, created=True)
