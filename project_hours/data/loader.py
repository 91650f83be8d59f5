"""
Data loading utilities with Streamlit caching.

Reads the source workbooks (xlsx, with a csv fallback per table) and hands
them to the schema layer for coercion.
"""
import pandas as pd
import streamlit as st
from pathlib import Path
from typing import Optional, Dict, Any

from project_hours.config import config, SOURCE_FILES, REQUIRED_TABLES
from project_hours.data.schema import NORMALISERS, validate_schema
from project_hours.logger import get_logger

logger = get_logger(__name__)


def get_source_paths(table_name: str, data_dir: Optional[Path] = None) -> Dict[str, Path]:
    """Workbook and csv fallback paths for a logical table."""
    source = SOURCE_FILES[table_name]
    workbook = getattr(config, source["path"])
    if data_dir is not None:
        workbook = Path(data_dir) / workbook.name
    csv_path = workbook.with_name(f"{workbook.stem}{source['csv_suffix']}.csv")
    return {"xlsx": workbook.with_suffix(".xlsx"), "csv": csv_path}


def _read_workbook(path: Path, sheet: Optional[str]) -> pd.DataFrame:
    """Read one sheet; a missing named sheet falls back to the first one."""
    with pd.ExcelFile(path, engine="openpyxl") as workbook:
        if sheet is None:
            return workbook.parse(workbook.sheet_names[0])
        if sheet not in workbook.sheet_names:
            logger.warning(f"Sheet '{sheet}' not found in {path.name}; using '{workbook.sheet_names[0]}'")
            return workbook.parse(workbook.sheet_names[0])
        return workbook.parse(sheet)


def read_source_table(table_name: str, data_dir: Optional[Path] = None) -> Optional[pd.DataFrame]:
    """
    Read a raw source table (spreadsheet headers, uncoerced).

    Returns None when neither the workbook nor the csv fallback exists.
    """
    paths = get_source_paths(table_name, data_dir)
    sheet = SOURCE_FILES[table_name]["sheet"]

    if paths["xlsx"].exists():
        df = _read_workbook(paths["xlsx"], sheet)
        source = paths["xlsx"]
    elif paths["csv"].exists():
        df = pd.read_csv(paths["csv"])
        source = paths["csv"]
    else:
        logger.warning(f"No source file for {table_name}: {paths['xlsx']} / {paths['csv']}")
        return None

    logger.info(f"Loaded {len(df):,} rows for {table_name} from {source.name}")
    return df


def load_table(table_name: str, data_dir: Optional[Path] = None) -> Optional[pd.DataFrame]:
    """
    Read and normalise a table into its canonical frame.

    Missing required columns are logged and coerced to defaults rather
    than raised. Returns None when the source file is missing.
    """
    raw = read_source_table(table_name, data_dir)
    if raw is None:
        return None

    result = validate_schema(raw, table_name, strict=False)
    if not result["is_valid"]:
        logger.warning(f"{table_name}: missing required columns {result['missing_required']}")
    if result["missing_optional"]:
        logger.info(f"{table_name}: missing optional columns {result['missing_optional']}")

    return NORMALISERS[table_name](raw)


def _empty_table(table_name: str) -> pd.DataFrame:
    return NORMALISERS[table_name](pd.DataFrame())


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_plan_rows() -> pd.DataFrame:
    """Load the project plan (Projetos em Horas)."""
    df = load_table("plan")
    if df is None:
        st.error(f"Could not find {config.plan_file} in {config.data_dir}")
        st.stop()
    return df


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_time_entries() -> pd.DataFrame:
    """Load the detailed time log (Horas Detalhadas)."""
    df = load_table("time_entries")
    if df is None:
        st.error(f"Could not find {config.time_file} in {config.data_dir}")
        st.stop()
    return df


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_cause_rows() -> pd.DataFrame:
    """Load unproductive-time causes (optional)."""
    df = load_table("causes")
    if df is None:
        return _empty_table("causes")
    return df


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_cause_details() -> pd.DataFrame:
    """Load the cause detail sheet (optional)."""
    df = load_table("cause_details")
    if df is None:
        return _empty_table("cause_details")
    return df


def get_data_status(data_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Get status of all source files."""
    status = {}
    for table_name in SOURCE_FILES:
        paths = get_source_paths(table_name, data_dir)
        status[table_name] = {
            "xlsx_exists": paths["xlsx"].exists(),
            "csv_exists": paths["csv"].exists(),
            "required": table_name in REQUIRED_TABLES,
        }
    return status
