"""
Consistent number and display formatting.
"""
import pandas as pd
from typing import Union


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def fmt_hours(value: Union[float, int, None]) -> str:
    """Format hours: 1,234.5 h"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value:,.1f} h"


def fmt_percent(value: Union[float, int, None], decimals: int = 1) -> str:
    """Format percentage: 12.3%"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value:,.{decimals}f}%"


def fmt_count(value: Union[float, int, None]) -> str:
    """Format count: 1,234"""
    if value is None or pd.isna(value):
        return "—"
    return f"{int(value):,}"


# =============================================================================
# DATAFRAME FORMATTERS
# =============================================================================

HOURS_COLUMNS = [
    "sold_hours", "planned_hours", "executed_hours", "consumed_hours",
    "unproductive_hours", "balance_hours", "hours", "stage_hours",
]

PERCENT_COLUMNS = ["consumption_ratio", "share_pct", "share_of_stage_pct"]


def format_metric_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Format a metrics dataframe for display.

    Applies appropriate formatting to known column types.
    """
    df = df.copy()

    for col in df.columns:
        if col in HOURS_COLUMNS:
            df[col] = df[col].apply(fmt_hours)
        elif col in PERCENT_COLUMNS:
            df[col] = df[col].apply(fmt_percent)

    return df
