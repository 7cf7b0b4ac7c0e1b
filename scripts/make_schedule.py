#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from timesplit.application import DistributionService
from timesplit.core.defaults import default_request
from timesplit.core.schema import DistributionRequest, project_refs
from timesplit.core.validation import AllocationError
from timesplit.exporters.schedule_csv import export_schedule_csv, to_csv
from timesplit.exporters.schedule_text import center_summary, to_plaintext
from timesplit.infrastructure import JsonFilePreferencesRepository

logger = logging.getLogger("timesplit.cli")


def _load_request(args: argparse.Namespace, service: DistributionService) -> DistributionRequest:
    if args.request:
        with Path(args.request).open("r", encoding="utf-8") as fp:
            request = DistributionRequest.model_validate(yaml.safe_load(fp))
    elif args.reuse_last and (remembered := service.last_request()) is not None:
        request = remembered
    else:
        request = default_request()
    if args.seed is not None:
        request = request.model_copy(update={"random_seed": args.seed})
    elif args.shuffle:
        request = request.model_copy(update={"random_seed": None})
    return request


def main() -> int:
    parser = argparse.ArgumentParser(description="Split a weekly hour budget into a day-by-day plan")
    parser.add_argument("--request", help="Request file (YAML or JSON); defaults are used when omitted")
    parser.add_argument("--reuse-last", action="store_true", help="Start from the last request that was run")
    parser.add_argument("--seed", type=int, help="Seed for the ordering heuristics")
    parser.add_argument("--shuffle", action="store_true", help="Draw a fresh seed instead of the fixed default")
    parser.add_argument("--format", choices=["csv", "text", "json"], default="text", help="Output format")
    parser.add_argument("--output", help="Write to this file instead of stdout")
    parser.add_argument("--state", help="Preferences file used by --reuse-last")
    parser.add_argument("--language", help="Language code remembered with the preferences")
    args = parser.parse_args()

    logging.basicConfig(level=os.getenv("TIMESPLIT_LOG_LEVEL", "INFO").upper())

    repository = JsonFilePreferencesRepository(Path(args.state) if args.state else None)
    service = DistributionService(repository)

    try:
        request = _load_request(args, service)
        result = service.distribute(
            request,
            seed_policy="entropy" if args.shuffle else "fixed",
            language=args.language,
        )
    except (AllocationError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    projects = project_refs(request.centers)
    if args.format == "csv" and args.output:
        output = export_schedule_csv(Path(args.output), result.daily_schedule, projects)
        logger.info("schedule written to %s", output)
        return 0

    if args.format == "csv":
        rendered = to_csv(result.daily_schedule, projects)
    elif args.format == "json":
        rendered = json.dumps(result.model_dump(by_alias=True), ensure_ascii=False, indent=2)
    else:
        rendered = "\n\n".join(
            [
                to_plaintext(result.daily_schedule, projects),
                center_summary(request.centers, result.weekly_totals),
            ]
        )

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("schedule written to %s", output)
    else:
        print(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
