from __future__ import annotations

import argparse
import json
import logging
import os
import random
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from allocation import BUFFER_PERCENT, MIN_SUBJECT_HOURS
from errors import PlanValidationError
from plan_service import build_plan_output, generate_study_plan, progress_output
from planner_core import MAX_SESSION_HOURS
from prerequisites import list_prerequisites
from request_loader import load_request_from_json, load_requests_from_directory

logger = logging.getLogger(__name__)

EXIT_INVALID_REQUEST = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Weekly study planner")
    parser.add_argument("--config", type=str, help="Path to config JSON")
    parser.add_argument("--input", type=str, help="Plan request JSON file")
    parser.add_argument("--output", type=str, help="Where to write the plan JSON (stdout if omitted)")
    parser.add_argument("--input-dir", dest="input_dir", type=str, help="Directory of plan request JSON files")
    parser.add_argument("--output-dir", dest="output_dir", type=str, default="Plans_Output", help="Directory to write plans")
    parser.add_argument("--start-date", dest="start_date", type=str, help="First day of the week YYYY-MM-DD")
    parser.add_argument("--seed", type=int, help="Seed for the day ordering tie-break")
    parser.add_argument("--buffer-percent", dest="buffer_percent", type=float, help="Share of weekly hours kept as buffer")
    parser.add_argument("--log-level", dest="log_level", type=str, help="Logging level")
    parser.add_argument("--list-prerequisites", dest="list_prerequisites", action="store_true", help="Print the prerequisite table and exit")
    parser.add_argument(
        "--completed",
        action="append",
        metavar="BLOCK_ID",
        help="Block id already completed; adds a progress report to the plan (repeatable)",
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Dict[str, Any]:
    config: Dict[str, Any] = {
        "start_date": date.today().isoformat(),
        "seed": None,
        "buffer_percent": BUFFER_PERCENT,
        "min_subject_hours": MIN_SUBJECT_HOURS,
        "max_session_hours": MAX_SESSION_HOURS,
        "log_level": os.getenv("PLANNER_LOG_LEVEL", "INFO"),
    }

    if args.config:
        with open(args.config, "r", encoding="utf-8") as f:
            file_config = json.load(f)
            config.update(file_config)

    if args.start_date:
        config["start_date"] = args.start_date
    if args.seed is not None:
        config["seed"] = args.seed
    if args.buffer_percent is not None:
        config["buffer_percent"] = args.buffer_percent
    if args.log_level:
        config["log_level"] = args.log_level

    return config


def parse_date(date_str: str) -> date:
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def plan_request(
    payload: Dict[str, Any],
    config: Dict[str, Any],
    completed_block_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    rng = random.Random(config["seed"]) if config.get("seed") is not None else None
    plan = generate_study_plan(
        payload,
        start_date=parse_date(config["start_date"]),
        rng=rng,
        buffer_percent=config["buffer_percent"],
        min_subject_hours=config["min_subject_hours"],
        max_session_hours=config["max_session_hours"],
    )
    output = build_plan_output(plan)
    if completed_block_ids is not None:
        output["progress"] = progress_output(plan, completed_block_ids)
    return output


def write_plan(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("Wrote plan to %s", path)


def run_directory(input_dir: Path, output_dir: Path, config: Dict[str, Any]) -> int:
    requests = load_requests_from_directory(input_dir)
    if not requests:
        logger.warning("No plan requests found in %s", input_dir)
        return 0

    failures = 0
    for name, payload in requests.items():
        try:
            write_plan(output_dir / f"{name}_plan.json", plan_request(payload, config))
        except PlanValidationError as exc:
            failures += 1
            logger.error("Skipping %s: %s", name, exc)
    return EXIT_INVALID_REQUEST if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    config = load_config(args)
    logging.basicConfig(level=str(config["log_level"]).upper(), format="%(levelname)s %(message)s")

    if args.list_prerequisites:
        print(json.dumps(list_prerequisites(), indent=2))
        return 0

    if args.input_dir:
        return run_directory(Path(args.input_dir), Path(args.output_dir), config)

    if not args.input:
        logger.error("Either --input or --input-dir is required")
        return EXIT_INVALID_REQUEST

    try:
        payload = load_request_from_json(Path(args.input))
    except (OSError, ValueError) as exc:
        logger.error("Could not read %s: %s", args.input, exc)
        return EXIT_INVALID_REQUEST

    try:
        output = plan_request(payload, config, completed_block_ids=args.completed)
    except PlanValidationError as exc:
        logger.error("%s", exc)
        return EXIT_INVALID_REQUEST

    if args.output:
        write_plan(Path(args.output), output)
    else:
        print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
