"""
Filter options that depend on the data and on upstream selections.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from project_hours.config import ACTIVITY_TYPE_OPTIONS, ALL_STAGES
from project_hours.data.classification import map_activity_to_stage
from project_hours.data.dates import get_period_bounds
from project_hours.data.filters import FilterState, apply_filter_change
from project_hours.metrics.causes import get_available_cause_stages


@dataclass(frozen=True)
class AvailableFilters:
    """Option lists for the sidebar controls."""
    project_codes: List[str] = field(default_factory=list)
    activities: List[str] = field(default_factory=list)
    activity_types: List[str] = field(default_factory=lambda: list(ACTIVITY_TYPE_OPTIONS))
    cause_stages: List[str] = field(default_factory=list)
    period_min: str = ""
    period_max: str = ""


def _distinct_text(values: pd.Series) -> List[str]:
    cleaned = {str(v).strip() for v in values.dropna()}
    cleaned.discard("")
    return sorted(cleaned)


def get_project_codes(plan_df: pd.DataFrame) -> List[str]:
    """Sorted distinct non-empty project codes from the plan dataset."""
    if len(plan_df) == 0:
        return []
    return _distinct_text(plan_df["project_code"])


def get_project_activities(plan_df: pd.DataFrame, project_code: Optional[str]) -> List[str]:
    """Sorted distinct work-item descriptions of one project. Empty project → []."""
    code = (project_code or "").strip()
    if len(plan_df) == 0 or not code:
        return []
    rows = plan_df[plan_df["project_code"].astype(str).str.strip() == code]
    return _distinct_text(rows["item_description"])


def get_stage_activities(activities: Iterable[str], stage: Optional[str]) -> List[str]:
    """Narrow activity options to one stage (wildcard → unchanged)."""
    activities = list(activities)
    if not stage or stage == ALL_STAGES:
        return activities
    return [a for a in activities if map_activity_to_stage(a) == stage]


def derive_available_filters(plan_df: pd.DataFrame,
                             time_df: pd.DataFrame,
                             cause_df: pd.DataFrame,
                             project_code: Optional[str]) -> AvailableFilters:
    """Recompute every option list for the given project."""
    if len(time_df) > 0 and "entry_date" in time_df.columns:
        period_min, period_max = get_period_bounds(time_df["entry_date"])
    else:
        period_min, period_max = "", ""

    return AvailableFilters(
        project_codes=get_project_codes(plan_df),
        activities=get_project_activities(plan_df, project_code),
        cause_stages=get_available_cause_stages(cause_df, project_code),
        period_min=period_min,
        period_max=period_max,
    )


def select_project(state: FilterState,
                   project_code: str,
                   plan_df: pd.DataFrame,
                   time_df: pd.DataFrame,
                   cause_df: pd.DataFrame) -> Tuple[FilterState, AvailableFilters]:
    """
    Select a project and refresh the project-scoped options.

    A different project resets the activity and cause selections.
    """
    new_state = apply_filter_change(state, "project_code", project_code)
    available = derive_available_filters(plan_df, time_df, cause_df, new_state.project_code)
    return new_state, available
