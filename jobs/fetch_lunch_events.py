"""Fetch lunchtime events for a date range and print them as JSON."""
from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import replace
from typing import List, Optional

from ingest.settings import load_settings
from pipeline.runner import build_pipeline

logger = logging.getLogger(__name__)
if os.getenv("SCRAPER_DEBUG"):
    logging.basicConfig(level=logging.INFO, format="%(message)s")


def run(start: str, end: str, offline: bool = False, mode: Optional[str] = None) -> int:
    """Run the pipeline for ``start``..``end``; return a process exit code."""
    settings = load_settings()
    overrides = {}
    if offline:
        overrides["offline"] = True
    if mode:
        overrides["partition_mode"] = mode
    if overrides:
        settings = replace(settings, **overrides)

    pipeline = build_pipeline(settings)
    status_code, body = pipeline.handle_request(start, end)
    logger.info("Pipeline finished with status %d", status_code)
    print(json.dumps(body.model_dump(), ensure_ascii=False, indent=2))
    return 0 if status_code == 200 else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print lunchtime connpass events as JSON")
    parser.add_argument("start", help="First day, YYYY-MM-DD")
    parser.add_argument("end", help="Last day, YYYY-MM-DD")
    parser.add_argument("--offline", action="store_true", help="Serve placeholder events without calling connpass")
    parser.add_argument("--mode", choices=["ymd", "ym"], help="Query by day batches or by month")
    args = parser.parse_args(argv)
    return run(args.start, args.end, offline=args.offline, mode=args.mode)


if __name__ == "__main__":
    raise SystemExit(main())
