from __future__ import annotations

import json
from pathlib import Path

from roadrough.device_identity import load_or_create_device_id


def test_creates_and_persists_new_id(tmp_path: Path) -> None:
    path = tmp_path / "data" / "device.json"
    identity = load_or_create_device_id(path)
    assert identity.created is True
    assert len(identity.device_id) == 32
    assert json.loads(path.read_text(encoding="utf-8")) == {"device_id": identity.device_id}
    assert not path.with_suffix(".tmp").exists()


def test_reuses_existing_id(tmp_path: Path) -> None:
    path = tmp_path / "device.json"
    first = load_or_create_device_id(path)
    second = load_or_create_device_id(path)
    assert second.created is False
    assert second.device_id == first.device_id


def test_corrupt_file_is_replaced(tmp_path: Path) -> None:
    path = tmp_path / "device.json"
    path.write_text("{broken", encoding="utf-8")
    identity = load_or_create_device_id(path)
    assert identity.created is True
    assert json.loads(path.read_text(encoding="utf-8"))["device_id"] == identity.device_id


def test_blank_id_is_regenerated(tmp_path: Path) -> None:
    path = tmp_path / "device.json"
    path.write_text(json.dumps({"device_id": "   "}), encoding="utf-8")
    assert load_or_create_device_id(path).created is True
