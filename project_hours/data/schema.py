"""
Schema validation and the coercion boundary.

Raw sheets carry spreadsheet headers and loosely typed cells. Everything
downstream works on the canonical, already-coerced frames produced here.
"""
import pandas as pd
from typing import List, Tuple, Dict

from project_hours.config import (
    REQUIRED_COLUMNS,
    OPTIONAL_COLUMNS,
    COLUMN_MAPS,
    NUMERIC_COLUMNS,
)
from project_hours.data.classification import classify_activity_types
from project_hours.logger import get_logger

logger = get_logger(__name__)


class SchemaValidationError(Exception):
    """Raised when required columns are missing."""
    pass


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """
    Validate that required columns exist in dataframe.
    Returns (is_valid, missing_columns).
    """
    if table_name not in REQUIRED_COLUMNS:
        return True, []

    columns = {str(col).strip() for col in df.columns}
    missing = [col for col in REQUIRED_COLUMNS[table_name] if col not in columns]

    return len(missing) == 0, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """
    Check which optional columns are missing.
    Returns list of missing optional columns.
    """
    if table_name not in OPTIONAL_COLUMNS:
        return []

    columns = {str(col).strip() for col in df.columns}
    return [col for col in OPTIONAL_COLUMNS[table_name] if col not in columns]


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Full schema validation.

    Args:
        df: Raw sheet to validate (spreadsheet headers)
        table_name: One of plan, time_entries, causes, cause_details
        strict: If True, raise error on missing required columns

    Returns:
        Dict with validation results
    """
    is_valid, missing_required = validate_required_columns(df, table_name)
    missing_optional = check_optional_columns(df, table_name)

    result = {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": missing_optional,
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }

    if strict and not is_valid:
        raise SchemaValidationError(
            f"Missing required columns in {table_name}: {missing_required}"
        )

    return result


# =============================================================================
# COERCION
# =============================================================================

def _to_text(value) -> str:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    # Codes read from numeric cells come back as floats (1234.0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _coerce_text(values: pd.Series) -> pd.Series:
    """Missing → '', everything else str() and trimmed."""
    return values.astype(object).map(_to_text).astype(object)


def _coerce_number(values: pd.Series) -> pd.Series:
    """Missing / non-numeric → 0.0."""
    return pd.to_numeric(values, errors="coerce").fillna(0.0).astype(float)


def _normalise(df: pd.DataFrame, table_name: str, keep_raw: Tuple[str, ...] = ()) -> pd.DataFrame:
    column_map = COLUMN_MAPS[table_name]
    raw = df.rename(columns=lambda col: str(col).strip())

    out = pd.DataFrame(index=raw.index)
    for source_col, canonical_col in column_map.items():
        if source_col in raw.columns:
            values = raw[source_col]
        else:
            values = pd.Series([None] * len(raw), index=raw.index, dtype=object)

        if canonical_col in keep_raw:
            out[canonical_col] = values.astype(object)
        elif canonical_col in NUMERIC_COLUMNS:
            bad = int((values.notna() & pd.to_numeric(values, errors="coerce").isna()).sum())
            if bad:
                logger.debug(f"{table_name}.{canonical_col}: {bad} non-numeric value(s) coerced to 0")
            out[canonical_col] = _coerce_number(values)
        else:
            out[canonical_col] = _coerce_text(values)

    return out.reset_index(drop=True)


def normalise_plan_rows(df: pd.DataFrame) -> pd.DataFrame:
    """
    Project plan sheet → canonical plan frame.

    Columns: project_code, item_description, sold_hours, planned_hours,
    executed_hours, balance_hours.
    """
    return _normalise(df, "plan")


def normalise_time_entries(df: pd.DataFrame) -> pd.DataFrame:
    """
    Detailed hours sheet → canonical time-entry frame.

    Columns: project_code, activity_description, activity_type, entry_date
    (raw, parsed on demand), hours, activity_category (derived).
    """
    out = _normalise(df, "time_entries", keep_raw=("entry_date",))
    out["activity_category"] = classify_activity_types(out["activity_type"])
    return out


def normalise_cause_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Cause sheet → project_code, stage, cause, hours."""
    return _normalise(df, "causes")


def normalise_cause_details(df: pd.DataFrame) -> pd.DataFrame:
    """Cause detail sheet → project_code, stage, cause, detail, hours."""
    return _normalise(df, "cause_details")


NORMALISERS = {
    "plan": normalise_plan_rows,
    "time_entries": normalise_time_entries,
    "causes": normalise_cause_rows,
    "cause_details": normalise_cause_details,
}

