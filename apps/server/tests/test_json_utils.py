from __future__ import annotations

import json
import math

import numpy as np
import pytest

from roadrough.json_utils import parse_json_line, safe_json_dumps, sanitize_value


def test_sanitize_replaces_non_finite_floats() -> None:
    assert sanitize_value({"a": math.inf, "b": [1.0, math.nan], "c": "x"}) == {
        "a": None,
        "b": [1.0, None],
        "c": "x",
    }


def test_sanitize_unwraps_numpy() -> None:
    out = sanitize_value({"arr": np.array([1.5, np.inf]), "scalar": np.float64(2.0)})
    assert out == {"arr": [1.5, None], "scalar": 2.0}
    assert type(out["scalar"]) is float


def test_safe_json_dumps_is_compact_and_strict() -> None:
    text = safe_json_dumps({"crest_factor": math.inf, "n": 1})
    assert text == '{"crest_factor":null,"n":1}'
    assert json.loads(text)["crest_factor"] is None


@pytest.mark.parametrize("line", ["", "   \n", "{oops", "[1, 2]", '"text"'])
def test_parse_json_line_rejects(line: str) -> None:
    assert parse_json_line(line, context="test:1") is None


def test_parse_json_line_accepts_object() -> None:
    assert parse_json_line('{"type": "start"}\n', context="test:1") == {"type": "start"}
