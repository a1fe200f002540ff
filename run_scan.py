"""CLI entry point.

This script fetches jobs from the enabled sources, runs the pipeline and
writes the ordered result to a JSON file.

Examples:
    python run_scan.py
    python run_scan.py --config my-config.yaml --out out/jobs.json
    python run_scan.py --no-cache --verbose

The output holds the ordered jobs (serialized Pydantic models), the
rejection reason for every filtered-out job, and the run counters.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional

from job_scanner.cache import FileCache, MemoryCache
from job_scanner.config import load_config
from job_scanner.errors import JobScannerError
from job_scanner.fetch import FETCH_TIMEOUT_S, FetchOrchestrator
from job_scanner.output import summarize, write_report
from job_scanner.pipeline import scan
from job_scanner.sources import build_sources

logger = logging.getLogger("job_scanner")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Aggregate, filter and rank remote job postings.")
    p.add_argument("--config", type=str, default=None, help="YAML config path (default: config.yaml).")
    p.add_argument(
        "--out",
        type=str,
        default=f"out/jobs-{date.today().isoformat()}.json",
        help="Output JSON file path.",
    )
    p.add_argument("--no-cache", action="store_true", help="Ignore and do not write the fetch cache.")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        config = load_config(args.config)
        sources = build_sources(config, timeout_s=FETCH_TIMEOUT_S)
        if not sources:
            print("No sources enabled. Configure sources in config.yaml.")
            return 0

        cache = MemoryCache() if args.no_cache else FileCache()
        result = scan(sources, config, orchestrator=FetchOrchestrator(cache, timeout_s=FETCH_TIMEOUT_S))
    except JobScannerError:
        logger.exception("Scan failed")
        return 1

    out_path = write_report(result, args.out)
    print(f"Wrote {len(result.jobs)} jobs to: {out_path}")
    print(summarize(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
