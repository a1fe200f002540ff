"""Report writing: JSON result file plus a short human-readable summary."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import List, Union

from .models import PipelineResult

TOP_REASONS = 5


def write_report(result: PipelineResult, out_path: Union[str, Path]) -> Path:
    """Write ordered jobs, rejection reasons and counts to `out_path` as JSON."""
    path = Path(out_path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    # Pydantic v2: mode="json" makes every value JSON-serializable
    data = {
        "counts": result.counts.model_dump(mode="json"),
        "jobs": [j.model_dump(mode="json") for j in result.jobs],
        "filter_reasons": result.reasons,
    }
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    return path


def summarize(result: PipelineResult) -> str:
    counts = result.counts
    per_source = ", ".join(f"{name}: {n}" for name, n in counts.by_source.items())
    lines: List[str] = [
        f"Fetched {counts.fetched} total ({per_source}).",
        f"After dedupe: {counts.after_dedupe}. After filter: {counts.after_filter}.",
    ]
    if result.reasons:
        top = Counter(result.reasons.values()).most_common(TOP_REASONS)
        lines.append("Top filter reasons: " + ", ".join(f"{r}: {n}" for r, n in top) + ".")
    return "\n".join(lines)
