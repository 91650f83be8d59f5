#!/usr/bin/env python
"""
Export a project hours summary without starting the dashboard.

Usage:
    python scripts/export_summary.py --project 1234
    python scripts/export_summary.py --project 1234 --stage TAF --types Improdutivas
    python scripts/export_summary.py --project 1234 --start 2024-01 --end 2024-03 --output out/
"""
import argparse
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import config, ALL_STAGES
from project_hours.data.filters import FilterState, apply_filter_change
from project_hours.data.loader import load_table
from project_hours.exports import export_summary_json, export_stage_groups_csv
from project_hours.logger import setup_logging, get_logger
from project_hours.metrics.hours import compute_project_summary

logger = get_logger(__name__)


def build_filters(args: argparse.Namespace) -> FilterState:
    """Apply CLI selections in the same order the sidebar would."""
    state = FilterState()
    state = apply_filter_change(state, "project_code", args.project)
    state = apply_filter_change(state, "stage", args.stage)
    if args.activities:
        state = apply_filter_change(state, "activities", args.activities)
    if args.types:
        state = apply_filter_change(state, "activity_types", args.types)
    state = apply_filter_change(state, "period_start", args.start)
    state = apply_filter_change(state, "period_end", args.end)
    return state


def main():
    parser = argparse.ArgumentParser(description="Export project hours summary")
    parser.add_argument("--project", required=True, help="Project code")
    parser.add_argument("--stage", default=ALL_STAGES, help="Project stage (default: all)")
    parser.add_argument("--activities", nargs="*", default=None, help="Activity descriptions")
    parser.add_argument("--types", nargs="*", default=None, help="Activity type categories")
    parser.add_argument("--start", default="", help="Period start month (YYYY-MM)")
    parser.add_argument("--end", default="", help="Period end month (YYYY-MM)")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=".",
        help="Output directory"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    setup_logging(log_level="DEBUG" if args.verbose else None)

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"Exporting summary...")
    print(f"  Source: {data_dir}")
    print(f"  Output: {output_dir}")
    print()

    plan_df = load_table("plan", data_dir)
    time_df = load_table("time_entries", data_dir)

    if plan_df is None or time_df is None:
        print(f"ERROR: Could not load {config.plan_file} and {config.time_file} from {data_dir}")
        sys.exit(1)

    filters = build_filters(args)
    logger.info(f"Filters: {filters}")

    summary = compute_project_summary(plan_df, time_df, filters)

    json_bytes, json_name = export_summary_json(summary)
    (output_dir / json_name).write_bytes(json_bytes)

    csv_bytes, csv_name = export_stage_groups_csv(summary.stage_groups, filters.project_code)
    (output_dir / csv_name).write_bytes(csv_bytes)

    print("Summary:")
    for key, value in summary.headline.to_dict().items():
        print(f"  {key}: {value:,.1f}")
    print(f"  stages: {len(summary.stage_groups)}")
    print()
    print(f"✓ Wrote {json_name} and {csv_name}")


if __name__ == "__main__":
    main()
