"""
Root causes of unproductive time.

Cause rows are keyed by (project_code, stage). The chart and table views
respect the same project and stage selection as the hours metrics, and the
cause summary is read straight off the stage groups.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from project_hours.config import ALL_STAGES, CANONICAL_STAGES


CAUSE_CHART_COLUMNS = ["label", "hours", "share_pct"]
CAUSE_TABLE_COLUMNS = [
    "project_code",
    "stage",
    "cause",
    "detail",
    "hours",
    "stage_hours",
    "share_of_stage_pct",
]

UNSPECIFIED_LABEL = "Não informado"


@dataclass(frozen=True)
class CauseMetrics:
    """Stage figures republished for the cause panel. Zeroed when nothing is selected."""
    stage: str = ""
    unproductive_hours: float = 0.0
    consumed_hours: float = 0.0
    planned_hours: float = 0.0
    consumption_ratio: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# HELPERS
# =============================================================================

def _is_all_stages(stage_filter: Optional[str]) -> bool:
    return stage_filter is None or str(stage_filter).strip() in ("", ALL_STAGES)


def _stage_sort_key(stage: str):
    if stage in CANONICAL_STAGES:
        return (0, CANONICAL_STAGES.index(stage), "")
    return (1, 0, stage)


def _stage_rank(stages: pd.Series) -> pd.Series:
    ordered = sorted(set(stages), key=_stage_sort_key)
    return stages.map({stage: i for i, stage in enumerate(ordered)})


def _project_rows(df: pd.DataFrame, project_code: Optional[str],
                  stage_filter: Optional[str] = None) -> pd.DataFrame:
    code = (project_code or "").strip()
    if len(df) == 0 or not code:
        return df.iloc[0:0]

    mask = df["project_code"].astype(str).str.strip() == code
    if not _is_all_stages(stage_filter):
        mask &= df["stage"].astype(str).str.strip() == str(stage_filter).strip()
    return df[mask]


def _share(values: pd.Series, total) -> pd.Series:
    total = pd.Series(total, index=values.index) if np.isscalar(total) else total
    return pd.Series(
        np.where(total > 0, values / total.where(total > 0, 1.0) * 100, 0.0),
        index=values.index,
    )


# =============================================================================
# FILTER OPTIONS
# =============================================================================

def get_available_cause_stages(cause_df: pd.DataFrame, project_code: Optional[str]) -> List[str]:
    """
    Distinct cause stages recorded for a project.

    Canonical stages first (canonical order), others alphabetically.
    Empty project → [].
    """
    rows = _project_rows(cause_df, project_code)
    if len(rows) == 0:
        return []
    stages = {str(s).strip() for s in rows["stage"]}
    stages.discard("")
    return sorted(stages, key=_stage_sort_key)


# =============================================================================
# CHART & TABLE
# =============================================================================

def get_cause_chart_data(cause_df: pd.DataFrame,
                         project_code: Optional[str],
                         stage_filter: Optional[str] = None) -> pd.DataFrame:
    """
    Chart-ready cause series.

    No stage selected → one point per stage (canonical order).
    Stage selected → one point per cause within it (largest first).

    Returns DataFrame with CAUSE_CHART_COLUMNS.
    """
    rows = _project_rows(cause_df, project_code, stage_filter)
    if len(rows) == 0:
        return pd.DataFrame(columns=CAUSE_CHART_COLUMNS)

    by_stage = _is_all_stages(stage_filter)
    group_col = "stage" if by_stage else "cause"

    labels = rows[group_col].astype(str).str.strip().replace("", UNSPECIFIED_LABEL)
    chart = rows["hours"].groupby(labels).sum().rename_axis("label").reset_index()
    chart["share_pct"] = _share(chart["hours"], float(chart["hours"].sum()))

    if by_stage:
        chart = chart.sort_values("label", key=_stage_rank)
    else:
        chart = chart.sort_values(["hours", "label"], ascending=[False, True])

    return chart.reset_index(drop=True)[CAUSE_CHART_COLUMNS]


def get_cause_table_data(cause_df: pd.DataFrame,
                         detail_df: pd.DataFrame,
                         project_code: Optional[str],
                         stage_filter: Optional[str] = None) -> pd.DataFrame:
    """
    Table-ready cause detail rows.

    Detail rows for the project (and stage) keep their descriptive columns
    and gain the stage total from the cause dataset plus their share of it.
    Detail rows whose stage has no cause total keep stage_hours = 0.

    Returns DataFrame with CAUSE_TABLE_COLUMNS.
    """
    details = _project_rows(detail_df, project_code, stage_filter)
    if len(details) == 0:
        return pd.DataFrame(columns=CAUSE_TABLE_COLUMNS)

    details = details.copy()
    for col in ("cause", "detail"):
        if col not in details.columns:
            details[col] = ""
    if "hours" not in details.columns:
        details["hours"] = 0.0

    causes = _project_rows(cause_df, project_code, stage_filter)
    if len(causes) > 0:
        totals = (
            causes.groupby(["project_code", "stage"])["hours"].sum()
            .rename("stage_hours")
            .reset_index()
        )
    else:
        totals = pd.DataFrame(columns=["project_code", "stage", "stage_hours"])

    table = details.merge(totals, on=["project_code", "stage"], how="left")
    table["stage_hours"] = pd.to_numeric(table["stage_hours"], errors="coerce").fillna(0.0)
    table["share_of_stage_pct"] = _share(table["hours"], table["stage_hours"])

    table["_stage_order"] = _stage_rank(table["stage"])
    table = table.sort_values(["_stage_order", "hours"], ascending=[True, False])

    return table.reset_index(drop=True)[CAUSE_TABLE_COLUMNS]


# =============================================================================
# CAUSE SUMMARY
# =============================================================================

def calculate_cause_metrics(stage_groups: pd.DataFrame,
                            stage_filter: Optional[str]) -> CauseMetrics:
    """
    Republish the selected stage's figures for the cause panel.

    Wildcard selection or no matching stage → zeroed CauseMetrics.
    """
    if _is_all_stages(stage_filter):
        return CauseMetrics()

    groups = pd.DataFrame(stage_groups)
    if len(groups) == 0 or "stage" not in groups.columns:
        return CauseMetrics()

    stage = str(stage_filter).strip()
    match = groups[groups["stage"] == stage]
    if len(match) == 0:
        return CauseMetrics()

    row = match.iloc[0]
    return CauseMetrics(
        stage=stage,
        unproductive_hours=float(row.get("unproductive_hours", 0.0)),
        consumed_hours=float(row.get("consumed_hours", 0.0)),
        planned_hours=float(row.get("planned_hours", 0.0)),
        consumption_ratio=float(row.get("consumption_ratio", 0.0)),
    )
