#!/usr/bin/env python3
"""Survey selector combinations via survey_runner."""

from __future__ import annotations

import argparse

from cubecover import load_config, validate_config
from cubecover.core import Config
from cubecover import survey_runner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="cubecover selection survey wrapper.")
    parser.add_argument("--config", help="Path to a survey YAML config")
    parser.add_argument("--selections", nargs="+", help="Explicit selections, e.g. LTZSBP LLLLLL")
    parser.add_argument("--workers", type=int, default=None, help="Max parallel workers")
    parser.add_argument("--limit", type=int, default=None, help="Only solve the first N selections")
    return parser


def main() -> int:
    args = build_parser().parse_args()
    config = load_config(args.config) if args.config else Config()

    errors = [i for i in validate_config(config) if i.startswith("ERROR")]
    if errors:
        print(f"Config validation failed: {errors}")
        return 1
    if args.limit:
        config.survey.limit = args.limit

    selections = [tuple(s) for s in args.selections] if args.selections else None
    reports = survey_runner.run_survey(config, selections=selections, max_workers=args.workers)

    for entry in survey_runner.solvable_selections(reports):
        print(f"{entry['run_id']}: {' '.join(entry['selection'])}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())


# python examples/survey_selections.py --config configs/survey.yaml --workers 4
