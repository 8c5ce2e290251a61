"""JSON export source: one object holding every collection the analysis reads."""

from __future__ import annotations

import json
from pathlib import Path

from skills.search_analytics.sources.rows import inputs_from_payload
from skills.search_analytics.types import AnalysisInputs


def load_json_export(json_path: str) -> AnalysisInputs:
    path = Path(json_path).expanduser().resolve()
    if not path.exists():
        raise ValueError(f"JSON export not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON export: {path}") from exc
    return inputs_from_payload(payload)
