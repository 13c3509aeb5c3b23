"""JSON helpers shared by the record log, the uploader and the replay CLI.

Records carry ``math.inf`` as the undefined crest factor and the window
samples arrive as numpy data; neither may reach ``json.dumps`` untouched.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

__all__ = [
    "parse_json_line",
    "safe_json_dumps",
    "sanitize_value",
]

LOGGER = logging.getLogger(__name__)


def sanitize_value(value: Any) -> Any:
    """Return *value* as plain Python with every non-finite float replaced by ``None``."""
    if hasattr(value, "tolist") and hasattr(value, "ndim"):
        value = value.tolist()
    elif hasattr(value, "item") and not isinstance(value, (str, bytes)):
        value = value.item()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value]
    return value


def safe_json_dumps(value: Any) -> str:
    """Sanitise *value* and serialise it to one compact JSON line."""
    return json.dumps(
        sanitize_value(value), ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )


def parse_json_line(line: str, *, context: str) -> dict[str, Any] | None:
    """Decode one JSONL line into a dict, or ``None`` for blank/invalid/non-object lines.

    *context* identifies the source in the warning, e.g. ``"events.jsonl:12"``.
    """
    text = line.strip()
    if not text:
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        LOGGER.warning("Skipping invalid JSON line in %s", context, exc_info=True)
        return None
    if not isinstance(payload, dict):
        LOGGER.warning("Skipping non-object JSON line in %s", context)
        return None
    return payload
