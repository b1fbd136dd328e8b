# content_cost_model/cli.py
# Command-line interface entry point (argparse)
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from content_cost_model.config.loaders import ConfigLoadError, load_settings
from content_cost_model.schema.migration import (
    MigrationError,
    load_project_snapshot,
    serialize_project,
)
from content_cost_model.state.persistence import JsonFileStore, StorageError
from content_cost_model.state.store import ProjectStore
from content_cost_model.tabular.content_csv import (
    read_content_csv,
    write_content_csv,
    write_template_csv,
)
from content_cost_model.reporting.summary import (
    member_cost_frame,
    role_summary_frame,
    save_cost_report,
)

from logging_config import DEFAULT_LOG_DIR, setup_logging

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Estimate cost and duration of a staffed content-production project."
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML settings file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(DEFAULT_LOG_DIR),
        help=f"Directory to store log files (default: {DEFAULT_LOG_DIR})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser("estimate", help="Print duration and cost of the stored project.")
    estimate.add_argument("--project-dir", type=str, required=True, help="Directory holding the project snapshot.")
    estimate.add_argument("--output-dir", type=str, default=None, help="Also write CSV reports here.")

    import_csv = subparsers.add_parser("import-csv", help="Replace the content tree from a CSV file.")
    import_csv.add_argument("csv_path", type=str)
    import_csv.add_argument("--project-dir", type=str, required=True)

    export_csv = subparsers.add_parser("export-csv", help="Write the content tree to a CSV file.")
    export_csv.add_argument("csv_path", type=str)
    export_csv.add_argument("--project-dir", type=str, required=True)

    template = subparsers.add_parser("template", help="Write a content CSV template.")
    template.add_argument("csv_path", type=str)

    migrate = subparsers.add_parser("migrate", help="Upgrade a snapshot file to the current schema.")
    migrate.add_argument("snapshot", type=str, help="Snapshot JSON file to upgrade.")
    migrate.add_argument("--output", type=str, default=None, help="Destination (default: overwrite input).")

    return parser.parse_args(argv)


def _open_store(args: argparse.Namespace) -> ProjectStore:
    settings = load_settings(args.config)
    return ProjectStore.open(JsonFileStore(args.project_dir), settings)


def run_estimate(args: argparse.Namespace) -> int:
    store = _open_store(args)
    calc = store.calculate_costs()
    fixed_total = store.fixed_cost_total()

    print(f"Project: {store.project.name}")
    print(f"Duration: {calc.duration} weeks (bottleneck: {calc.bottleneck_role or 'n/a'})")
    print(f"Total effort: {store.total_hours():,.1f} hours")
    print(f"Labor cost: {calc.total:,.2f}")
    print(f"Fixed costs: {fixed_total:,.2f}")
    print(f"Grand total: {calc.total + fixed_total:,.2f}")
    if calc.unstaffed_roles:
        print(f"Unstaffed roles (not counted in duration): {', '.join(calc.unstaffed_roles)}")

    with pd.option_context("display.width", 120, "display.max_columns", None):
        print()
        print(role_summary_frame(calc).to_string(index=False))
        members = member_cost_frame(calc)
        if not members.empty:
            print()
            print(members.to_string(index=False))

    if args.output_dir:
        save_cost_report(calc, fixed_total, args.output_dir, fixed_costs=store.project.fixed_costs)
    return 0


def run_import_csv(args: argparse.Namespace) -> int:
    store = _open_store(args)
    chapters = read_content_csv(args.csv_path, store.settings.csv_fallbacks)
    if not chapters:
        # The stored tree is left as is
        logger.error(f"No content rows found in {args.csv_path}; project left unchanged")
        print(f"Error: no content rows found in {args.csv_path}", file=sys.stderr)
        return 1
    store.import_chapters(chapters)
    print(f"Imported {len(chapters)} chapters from {args.csv_path}")
    return 0


def run_export_csv(args: argparse.Namespace) -> int:
    store = _open_store(args)
    frame = write_content_csv(store.project.chapters, args.csv_path)
    print(f"Exported {len(frame)} subsections to {args.csv_path}")
    return 0


def run_template(args: argparse.Namespace) -> int:
    write_template_csv(args.csv_path)
    print(f"Wrote template to {args.csv_path}")
    return 0


def run_migrate(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    source = Path(args.snapshot)
    with open(source, "r", encoding="utf-8") as f:
        document = json.load(f)
    project, result = load_project_snapshot(document, settings.canonical_rates)

    destination = Path(args.output) if args.output else source
    with open(destination, "w", encoding="utf-8") as f:
        json.dump(serialize_project(project), f, indent=2)
    steps = ", ".join(result.applied_steps) or "none"
    print(f"Snapshot v{result.source_version} -> v{result.target_version} (steps: {steps}) written to {destination}")
    return 0


COMMANDS = {
    "estimate": run_estimate,
    "import-csv": run_import_csv,
    "export-csv": run_export_csv,
    "template": run_template,
    "migrate": run_migrate,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(log_dir=Path(args.log_dir), debug=args.debug)
    logger.info(f"Running command '{args.command}'")

    try:
        return COMMANDS[args.command](args)
    except (ConfigLoadError, MigrationError, StorageError, pd.errors.ParserError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.exception(f"{args.command} failed reading or writing files")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
