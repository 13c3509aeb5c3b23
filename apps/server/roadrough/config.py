from __future__ import annotations

import logging
import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    ALGORITHM_VERSION,
    DEFAULT_HIGHPASS_CUTOFF_HZ,
    DEFAULT_LOWPASS_CUTOFF_HZ,
    DEFAULT_SAMPLE_RATE_HZ,
    DEFAULT_WINDOW_SIZE,
    EARTH_RADIUS_M,
)

SERVER_DIR = Path(__file__).resolve().parents[1]
"""Root of the ``apps/server/`` package tree."""

LOGGER = logging.getLogger(__name__)

UPLOAD_URL_ENV = "ROADROUGH_UPLOAD_URL"
VALID_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_CONFIG: dict[str, Any] = {
    "processing": {
        "sample_rate_hz": DEFAULT_SAMPLE_RATE_HZ,
        "window_size": DEFAULT_WINDOW_SIZE,
        "highpass_cutoff_hz": DEFAULT_HIGHPASS_CUTOFF_HZ,
        "lowpass_cutoff_hz": DEFAULT_LOWPASS_CUTOFF_HZ,
        "reset_filter_on_start": False,
    },
    "geo": {"earth_radius_m": EARTH_RADIUS_M},
    "record": {"algorithm_version": ALGORITHM_VERSION},
    "upload": {
        "enabled": False,
        "base_url": "http://localhost:3000",
        "timeout_s": 10.0,
        "max_workers": 2,
    },
    "storage": {
        "record_log_path": "data/measurements.jsonl",
        "device_id_path": "data/device.json",
    },
    "logging": {"level": "INFO"},
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return config_path.resolve().parent / path


@dataclass(slots=True)
class ProcessingConfig:
    sample_rate_hz: int
    window_size: int
    highpass_cutoff_hz: float
    lowpass_cutoff_hz: float
    reset_filter_on_start: bool

    def __post_init__(self) -> None:
        for field_name in ("sample_rate_hz", "window_size"):
            val = getattr(self, field_name)
            if val < 1:
                LOGGER.warning(
                    "processing.%s=%s is below minimum 1 — clamped to 1", field_name, val
                )
                object.__setattr__(self, field_name, 1)
        for field_name, default in (
            ("highpass_cutoff_hz", DEFAULT_HIGHPASS_CUTOFF_HZ),
            ("lowpass_cutoff_hz", DEFAULT_LOWPASS_CUTOFF_HZ),
        ):
            val = getattr(self, field_name)
            if not val > 0:
                LOGGER.warning(
                    "processing.%s=%s is not positive — using default %s",
                    field_name,
                    val,
                    default,
                )
                object.__setattr__(self, field_name, default)
        if self.window_size != self.sample_rate_hz:
            LOGGER.info(
                "processing.window_size=%s differs from sample_rate_hz=%s; "
                "windows will not span one second",
                self.window_size,
                self.sample_rate_hz,
            )


@dataclass(slots=True)
class GeoConfig:
    earth_radius_m: float

    def __post_init__(self) -> None:
        if not self.earth_radius_m > 0:
            raise ValueError(f"geo.earth_radius_m must be positive, got {self.earth_radius_m!r}")


@dataclass(slots=True)
class RecordConfig:
    algorithm_version: str

    def __post_init__(self) -> None:
        if not self.algorithm_version.strip():
            raise ValueError("record.algorithm_version must not be empty")


@dataclass(slots=True)
class UploadConfig:
    enabled: bool
    base_url: str
    timeout_s: float
    max_workers: int

    def __post_init__(self) -> None:
        if self.enabled and not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"upload.base_url must be an http(s) URL, got {self.base_url!r}")
        if self.timeout_s <= 0:
            LOGGER.warning("upload.timeout_s=%s is not positive — clamped to 1", self.timeout_s)
            object.__setattr__(self, "timeout_s", 1.0)
        if self.max_workers < 1:
            object.__setattr__(self, "max_workers", 1)


@dataclass(slots=True)
class StorageConfig:
    record_log_path: Path
    device_id_path: Path


@dataclass(slots=True)
class LoggingConfig:
    level: str

    def __post_init__(self) -> None:
        level = self.level.strip().upper()
        if level not in VALID_LOG_LEVELS:
            LOGGER.warning("logging.level=%r is not recognised — using INFO", self.level)
            level = "INFO"
        object.__setattr__(self, "level", level)


@dataclass(slots=True)
class AppConfig:
    processing: ProcessingConfig
    geo: GeoConfig
    record: RecordConfig
    upload: UploadConfig
    storage: StorageConfig
    logging: LoggingConfig
    config_path: Path


def documented_default_config() -> dict[str, Any]:
    """Return runtime defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def load_config(config_path: Path | None = None) -> AppConfig:
    path = config_path or (SERVER_DIR / "config.yaml")
    path = path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)
    for section in DEFAULT_CONFIG:
        if not isinstance(merged.get(section), dict):
            raise ValueError(f"{section} must be a mapping, got {merged.get(section)!r}")

    proc = merged["processing"]
    upload = merged["upload"]
    storage = merged["storage"]
    base_url = os.environ.get(UPLOAD_URL_ENV) or str(upload["base_url"])

    app_config = AppConfig(
        processing=ProcessingConfig(
            sample_rate_hz=int(proc["sample_rate_hz"]),
            window_size=int(proc["window_size"]),
            highpass_cutoff_hz=float(proc["highpass_cutoff_hz"]),
            lowpass_cutoff_hz=float(proc["lowpass_cutoff_hz"]),
            reset_filter_on_start=bool(proc.get("reset_filter_on_start", False)),
        ),
        geo=GeoConfig(earth_radius_m=float(merged["geo"]["earth_radius_m"])),
        record=RecordConfig(algorithm_version=str(merged["record"]["algorithm_version"])),
        upload=UploadConfig(
            enabled=bool(upload["enabled"]),
            base_url=base_url.rstrip("/"),
            timeout_s=float(upload["timeout_s"]),
            max_workers=int(upload["max_workers"]),
        ),
        storage=StorageConfig(
            record_log_path=_resolve_config_path(str(storage["record_log_path"]), path),
            device_id_path=_resolve_config_path(str(storage["device_id_path"]), path),
        ),
        logging=LoggingConfig(level=str(merged["logging"]["level"])),
        config_path=path,
    )
    LOGGER.info(
        "Loaded config=%s record_log_path=%s upload_enabled=%s",
        app_config.config_path,
        app_config.storage.record_log_path,
        app_config.upload.enabled,
    )
    return app_config
