"""Main entry point for the bonus grid engine"""

import argparse
import json
import logging
import sys
from pathlib import Path

from catalogs import load_catalogs, default_catalogs
from core.enums import ExportFormat
from core.exceptions import BonusGridError
from orchestrator import Orchestrator
from stages import GridValidator, Normalizer
from ui.progress import ConsoleProgress, SilentProgress
from utils.workbook import read_workbook_state
from config import settings


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Bonus Grid - compute tier bonuses and daily pace from a saved grid",
    )
    parser.add_argument("state", type=Path, help="JSON file with the address -> value workbook state, or an .xlsx copy of the grid")
    parser.add_argument(
        "--format",
        choices=[f.value for f in ExportFormat],
        default=settings.EXPORT_DEFAULT_FORMAT,
        help="Export rendering",
    )
    parser.add_argument(
        "--catalog-dir",
        type=Path,
        default=None,
        help="Directory with schema_inputs.json, rows.json and outputs_addresses.json",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.BONUS_GRID_STRICT_MODE,
        help="Fail on unknown addresses instead of reading them as blank",
    )
    parser.add_argument("--validate", action="store_true", help="Print the grid validation report only")
    parser.add_argument("--quiet", action="store_true", help="Do not print stage progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.state.exists():
        print(f"Error: File not found: {args.state}")
        return 1

    try:
        catalogs = load_catalogs(args.catalog_dir) if args.catalog_dir else default_catalogs()

        if args.state.suffix.lower() == ".xlsx":
            raw_state = read_workbook_state(args.state, catalogs.schema)
        else:
            try:
                with open(args.state, "r", encoding="utf-8") as f:
                    raw_state = json.load(f)
            except json.JSONDecodeError as e:
                print(f"Error: {args.state} is not valid JSON: {e}")
                return 1

        if not isinstance(raw_state, dict):
            print(f"Error: {args.state} must hold a JSON object of cell addresses")
            return 1

        if args.validate:
            report = GridValidator(Normalizer(catalogs.schema)).validate(raw_state)
            print(report.model_dump_json(indent=2))
            return 0 if report.is_valid else 1

        progress = SilentProgress() if args.quiet else ConsoleProgress()
        orchestrator = Orchestrator(progress=progress, catalogs=catalogs, strict=args.strict)
        ctx = orchestrator.run(raw_state)

        print(orchestrator.stages[3].render(ctx.export, ExportFormat(args.format)))
        return 0

    except BonusGridError as e:
        print(f"\n✗ Bonus grid failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
