#!/usr/bin/env python
"""
Validate source workbooks against schema requirements.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/documents
"""
import argparse
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import config, SOURCE_FILES, REQUIRED_TABLES
from project_hours.data.loader import get_source_paths, read_source_table
from project_hours.data.schema import validate_schema
from project_hours.logger import setup_logging


def validate_table(table_name: str, data_dir: Path) -> dict:
    """Validate a single source table."""
    result = {
        "exists": False,
        "source": None,
        "rows": 0,
        "columns": 0,
        "valid": False,
        "missing_required": [],
        "missing_optional": [],
        "errors": []
    }

    paths = get_source_paths(table_name, data_dir)
    if paths["xlsx"].exists():
        result["source"] = paths["xlsx"].name
    elif paths["csv"].exists():
        result["source"] = paths["csv"].name
    else:
        result["errors"].append(f"File not found: {paths['xlsx'].name} (or {paths['csv'].name})")
        return result

    result["exists"] = True

    try:
        df = read_source_table(table_name, data_dir)
    except (OSError, ValueError) as e:
        result["errors"].append(f"Failed to load: {e}")
        return result

    result["rows"] = len(df)
    result["columns"] = len(df.columns)

    schema_result = validate_schema(df, table_name, strict=False)
    result["valid"] = schema_result["is_valid"]
    result["missing_required"] = schema_result["missing_required"]
    result["missing_optional"] = schema_result["missing_optional"]

    return result


def main():
    parser = argparse.ArgumentParser(description="Validate source workbooks")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )

    args = parser.parse_args()

    setup_logging(log_level="WARNING")

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir

    print("=" * 60)
    print("Source Data Validation")
    print("=" * 60)
    print(f"Source directory: {data_dir}")
    print()

    all_valid = True

    for table_name in SOURCE_FILES:
        required = table_name in REQUIRED_TABLES

        print(f"Validating: {table_name}")
        print("-" * 40)

        result = validate_table(table_name, data_dir)

        if result["exists"]:
            print(f"  ✓ Found: {result['source']}")
            print(f"    Rows: {result['rows']:,}")
            print(f"    Columns: {result['columns']}")

            if result["valid"]:
                print(f"  ✓ Schema valid")
            else:
                print(f"  ✗ Schema invalid")
                print(f"    Missing required: {result['missing_required']}")
                if required:
                    all_valid = False

            if result["missing_optional"]:
                print(f"  ⚠ Missing optional: {result['missing_optional']}")
        else:
            print(f"  ✗ Not found")
            print(f"    ({'REQUIRED' if required else 'optional'})")

        if result["errors"]:
            for err in result["errors"]:
                print(f"  ✗ Error: {err}")
            if required:
                all_valid = False

        print()

    print("=" * 60)
    if all_valid:
        print("✓ All validations passed")
        sys.exit(0)
    else:
        print("✗ Validation failed - see errors above")
        sys.exit(1)


if __name__ == "__main__":
    main()
