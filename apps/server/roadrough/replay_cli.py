from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from .config import VALID_LOG_LEVELS, AppConfig, load_config
from .device_identity import load_or_create_device_id
from .domain_models import MotionEvent, PositionEvent
from .json_utils import parse_json_line, safe_json_dumps
from .processing.recorder import RecordSink, RoadRoughnessRecorder
from .record_log import RecordLog
from .uploader import BackgroundUploader, HttpUploader

LOGGER = logging.getLogger(__name__)


def read_events(path: Path) -> Iterator[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            payload = parse_json_line(line, context=f"{path}:{line_no}")
            if payload is not None:
                yield payload


def replay_events(events: Iterable[dict[str, Any]], recorder: RoadRoughnessRecorder) -> int:
    """Feed *events* to *recorder* in order; return how many were applied."""
    applied = 0
    for event in events:
        kind = event.get("type")
        try:
            if kind == "motion":
                recorder.on_motion(MotionEvent.from_dict(event))
            elif kind == "position":
                recorder.on_position(PositionEvent.from_dict(event))
            elif kind == "start":
                recorder.start()
            elif kind == "stop":
                recorder.stop()
            elif kind == "bias":
                recorder.set_bias(float(event.get("value", 0.0)))
            else:
                LOGGER.warning("Skipping event with unknown type %r", kind)
                continue
        except (TypeError, ValueError) as exc:
            LOGGER.warning("Skipping malformed %s event: %s", kind, exc)
            continue
        applied += 1
    return applied


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay or simulate RoadRough recordings")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Records JSONL path (default: storage.record_log_path from config)",
    )
    parser.add_argument(
        "--upload", action="store_true", help="Also POST every record to upload.base_url"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=VALID_LOG_LEVELS,
        default=None,
        help="Override logging.level",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay an event log (.jsonl)")
    replay.add_argument("input", type=Path, help="Input event file (.jsonl)")

    simulate = sub.add_parser("simulate", help="Generate and process a synthetic trip")
    simulate.add_argument("--profile", default="worn_asphalt", help="Road profile name")
    simulate.add_argument("--seconds", type=float, default=60.0, help="Trip duration")
    simulate.add_argument("--seed", type=int, default=0, help="Random seed")
    simulate.add_argument(
        "--events-out", type=Path, default=None, help="Also write the generated events here"
    )
    return parser.parse_args(argv)


def _build_sinks(config: AppConfig, args: argparse.Namespace, device_id: str, created: bool):
    sinks: list[RecordSink] = [RecordLog(args.output or config.storage.record_log_path)]
    uploader: BackgroundUploader | None = None
    if args.upload or config.upload.enabled:
        http = HttpUploader(config.upload.base_url, timeout_s=config.upload.timeout_s)
        if created:
            http.register_device(device_id)
        uploader = BackgroundUploader(http)
        sinks.append(uploader)
    return sinks, uploader


def _load_events(args: argparse.Namespace, config: AppConfig) -> list[dict[str, Any]]:
    if args.command == "replay":
        return list(read_events(args.input))

    from roadrough_simulator import PROFILE_LIBRARY, simulate_trip

    profile = PROFILE_LIBRARY.get(args.profile)
    if profile is None:
        raise ValueError(
            f"unknown profile {args.profile!r}; choose from {', '.join(sorted(PROFILE_LIBRARY))}"
        )
    events = simulate_trip(
        profile,
        args.seconds,
        sample_rate_hz=config.processing.sample_rate_hz,
        seed=args.seed,
    )
    if args.events_out is not None:
        args.events_out.parent.mkdir(parents=True, exist_ok=True)
        with args.events_out.open("w", encoding="utf-8") as f:
            for event in events:
                f.write(safe_json_dumps(event) + "\n")
    return events


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=args.log_level or config.logging.level,
        format="%(levelname)s: %(message)s",
    )

    if args.command == "replay" and not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        events = _load_events(args, config)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    identity = load_or_create_device_id(config.storage.device_id_path)
    sinks, uploader = _build_sinks(config, args, identity.device_id, identity.created)
    recorder = RoadRoughnessRecorder.from_config(config, identity.device_id, sinks)
    applied = replay_events(events, recorder)
    recorder.stop()
    if uploader is not None:
        uploader.close()
        LOGGER.info("Uploads: %s", uploader.stats())

    out_path = args.output or config.storage.record_log_path
    print(f"applied {applied} events, wrote {recorder.records_emitted} records to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
