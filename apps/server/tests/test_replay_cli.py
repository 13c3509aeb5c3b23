from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from conftest import CollectingSink

from roadrough.config import UPLOAD_URL_ENV
from roadrough.processing.recorder import RoadRoughnessRecorder
from roadrough.replay_cli import main, parse_args, read_events, replay_events


def _motion(value: float, t_ms: float) -> dict:
    return {"type": "motion", "axis_value": value, "captured_at_ms": t_ms}


def _write_events(path: Path, events: list[dict]) -> Path:
    path.write_text("".join(json.dumps(e) + "\n" for e in events), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv(UPLOAD_URL_ENV, raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "storage": {
                    "record_log_path": "out/measurements.jsonl",
                    "device_id_path": "out/device.json",
                }
            }
        ),
        encoding="utf-8",
    )
    return path


class TestReplayEvents:
    def test_applies_known_events_in_order(self, sink: CollectingSink, fixed_clock) -> None:
        recorder = RoadRoughnessRecorder("dev-1", [sink], window_size=4, clock=fixed_clock)
        events = [
            _motion(1.0, 0.0),
            {"type": "start"},
            {"type": "bias", "value": 0.5},
            {"type": "position", "latitude": 52.0, "longitude": 5.0, "captured_at_ms": 0},
            *[_motion(1.0 + i, 20.0 * (i + 1)) for i in range(6)],
            {"type": "stop"},
        ]
        assert replay_events(events, recorder) == len(events)
        assert len(sink.records) == 1
        assert sink.records[0].latitude == 52.0
        assert recorder.samples_discarded == 2
        assert not recorder.is_recording

    def test_skips_unknown_and_malformed_events(self, sink: CollectingSink) -> None:
        recorder = RoadRoughnessRecorder("dev-1", [sink], window_size=2)
        events = [
            {"type": "start"},
            {"type": "teleport"},
            {"type": "motion", "axis_value": "loud"},
            {"type": "position", "latitude": 123.0, "longitude": 0.0},
            {"type": "bias", "value": None},
            _motion(1.0, 0.0),
            _motion(2.0, 20.0),
        ]
        assert replay_events(events, recorder) == 3
        assert len(sink.records) == 1

    def test_read_events_skips_bad_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text('{"type": "start"}\nnot json\n\n[1]\n{"type": "stop"}\n', encoding="utf-8")
        assert [e["type"] for e in read_events(path)] == ["start", "stop"]


class TestParseArgs:
    def test_log_level_is_case_insensitive(self) -> None:
        args = parse_args(["--log-level", "debug", "replay", "events.jsonl"])
        assert args.log_level == "DEBUG"
        assert args.input == Path("events.jsonl")

    def test_simulate_defaults(self) -> None:
        args = parse_args(["simulate"])
        assert args.profile == "worn_asphalt"
        assert args.seconds == 60.0
        assert args.seed == 0

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    def test_replay_writes_records(self, tmp_path: Path, config_file: Path, capsys) -> None:
        events = [{"type": "start"}, *[_motion(float(i % 5), 20.0 * i) for i in range(120)]]
        events.append({"type": "stop"})
        input_path = _write_events(tmp_path / "events.jsonl", events)
        output = tmp_path / "records.jsonl"

        argv = ["--config", str(config_file), "--output", str(output), "replay", str(input_path)]
        code = main(argv)

        assert code == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        record = json.loads(lines[0])
        assert len(record["z_values"]) == 50
        assert record["algorithm_version"] == "1.0"
        device = json.loads((tmp_path / "out" / "device.json").read_text(encoding="utf-8"))
        assert record["device_id"] == device["device_id"]
        assert "applied 122 events, wrote 2 records" in capsys.readouterr().out

    def test_simulate_uses_configured_log_path(self, tmp_path: Path, config_file: Path) -> None:
        events_out = tmp_path / "sim" / "events.jsonl"
        code = main(
            [
                "--config",
                str(config_file),
                "simulate",
                "--profile",
                "cobblestone",
                "--seconds",
                "3",
                "--events-out",
                str(events_out),
            ]
        )
        assert code == 0
        records = (tmp_path / "out" / "measurements.jsonl").read_text(encoding="utf-8")
        assert len(records.splitlines()) == 3
        assert len(events_out.read_text(encoding="utf-8").splitlines()) == 150 + 4 + 2

    def test_missing_input_returns_error(self, tmp_path: Path, config_file: Path, capsys) -> None:
        code = main(["--config", str(config_file), "replay", str(tmp_path / "nope.jsonl")])
        assert code == 1
        assert "input file not found" in capsys.readouterr().err

    def test_unknown_profile_returns_error(self, config_file: Path, capsys) -> None:
        code = main(["--config", str(config_file), "simulate", "--profile", "moon"])
        assert code == 1
        assert "unknown profile" in capsys.readouterr().err

    def test_invalid_config_returns_error(self, tmp_path: Path, capsys) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("geo:\n  earth_radius_m: -1\n", encoding="utf-8")
        code = main(["--config", str(bad), "simulate"])
        assert code == 1
        assert "invalid config" in capsys.readouterr().err
