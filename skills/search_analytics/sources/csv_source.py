"""CSV source adapter for jobs-only exports."""

from __future__ import annotations

import csv
from pathlib import Path

from skills.search_analytics.sources.rows import inputs_from_payload
from skills.search_analytics.types import AnalysisInputs


def load_csv_jobs(csv_path: str) -> AnalysisInputs:
    path = Path(csv_path).expanduser().resolve()
    if not path.exists():
        raise ValueError(f"CSV file not found: {path}")

    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        rows = [{k.strip(): v for k, v in row.items() if k} for row in reader]

    return inputs_from_payload({"jobs": rows})
