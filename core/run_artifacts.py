"""Run artifact helpers for catalog reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any


def write_catalog_report(
    functions: list[dict[str, Any]],
    package_dir: str,
    run_id: str,
    output_dir: str = "output/catalog_reports",
) -> str:
    """Write a JSON catalog report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = {
        "run_id": run_id,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "package_dir": os.path.abspath(package_dir),
        "function_count": len(functions),
        "functions": functions,
    }
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
