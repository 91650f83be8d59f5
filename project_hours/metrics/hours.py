"""
Project hours metrics pack.

Single source of truth for: sold, planned, consumed, unproductive and
balance hours, per project, per activity and per stage.

Consumed hours have two sources. Without a type or date selection they
come from the plan's executed hours; with one, they are re-summed from the
time log, the only dataset that carries those dimensions. The two sources
are not forced to reconcile.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from project_hours.config import ALL_ACTIVITIES, ALL_STAGES, CANONICAL_STAGES
from project_hours.data.classification import (
    classify_activity_types,
    is_unproductive,
    map_activities_to_stages,
)
from project_hours.data.filters import FilterState, filter_plan_rows, filter_time_entries
from project_hours.metrics.filter_options import get_project_activities


ACTIVITY_METRIC_COLUMNS = [
    "activity",
    "stage",
    "sold_hours",
    "planned_hours",
    "consumed_hours",
    "unproductive_hours",
    "balance_hours",
]

STAGE_GROUP_COLUMNS = [
    "stage",
    "sold_hours",
    "planned_hours",
    "consumed_hours",
    "unproductive_hours",
    "consumption_ratio",
]

_PLAN_SUMS = ["sold_hours", "planned_hours", "executed_hours", "balance_hours"]


@dataclass(frozen=True)
class HeadlineMetrics:
    """Headline totals for the current filter selection."""
    sold_hours: float = 0.0
    planned_hours: float = 0.0
    consumed_hours: float = 0.0
    unproductive_hours: float = 0.0
    balance_hours: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {key: float(value) for key, value in asdict(self).items()}


@dataclass(frozen=True)
class ProjectSummary:
    """Headline metrics plus the activity and stage breakdowns behind the chart."""
    filters: FilterState
    headline: HeadlineMetrics
    activities: pd.DataFrame
    stage_groups: pd.DataFrame

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filters": asdict(self.filters),
            "headline": self.headline.to_dict(),
            "activities": self.activities.to_dict("records"),
            "stage_groups": self.stage_groups.to_dict("records"),
        }


# =============================================================================
# HELPERS
# =============================================================================

def _sum(df: pd.DataFrame, col: str) -> float:
    if len(df) == 0 or col not in df.columns:
        return 0.0
    return float(df[col].sum())


def _categories(time_df: pd.DataFrame) -> pd.Series:
    if "activity_category" in time_df.columns:
        return time_df["activity_category"]
    return classify_activity_types(time_df["activity_type"])


def _hours_by_activity(time_df: pd.DataFrame) -> pd.Series:
    if len(time_df) == 0:
        return pd.Series(dtype=float)
    return time_df.groupby("activity_description")["hours"].sum()


def _unproductive_rows(time_df: pd.DataFrame, project_code: str,
                       activity: Optional[str] = None) -> pd.DataFrame:
    scope = FilterState(
        project_code=project_code or "",
        activities=(activity,) if activity else (),
    )
    rows = filter_time_entries(time_df, scope)
    if len(rows) == 0:
        return rows
    return rows[_categories(rows).map(is_unproductive).astype(bool)]


# =============================================================================
# HEADLINE METRICS
# =============================================================================

def compute_unproductive_hours(time_df: pd.DataFrame,
                               project_code: str,
                               activity: Optional[str] = None) -> float:
    """
    Unproductive hours for a whole project (or one of its activities).

    Ignores stage, type and date selections: this is always the full
    project figure.
    """
    return _sum(_unproductive_rows(time_df, project_code, activity), "hours")


def compute_headline_metrics(plan_df: pd.DataFrame,
                             time_df: pd.DataFrame,
                             filters: FilterState) -> HeadlineMetrics:
    """
    Compute headline metrics for the current selection.

    Returns zeroed metrics when no project is selected.
    """
    if not filters.has_project:
        return HeadlineMetrics()

    plan = filter_plan_rows(plan_df, filters)

    if filters.uses_time_entries:
        consumed = _sum(filter_time_entries(time_df, filters), "hours")
    else:
        consumed = _sum(plan, "executed_hours")

    return HeadlineMetrics(
        sold_hours=_sum(plan, "sold_hours"),
        planned_hours=_sum(plan, "planned_hours"),
        consumed_hours=consumed,
        unproductive_hours=compute_unproductive_hours(time_df, filters.project_code),
        balance_hours=_sum(plan, "balance_hours"),
    )


# =============================================================================
# ACTIVITY & STAGE BREAKDOWN
# =============================================================================

def compute_activity_metrics(plan_df: pd.DataFrame,
                             time_df: pd.DataFrame,
                             filters: FilterState,
                             activities: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    One metrics record per activity of the selected project.

    Each record is computed like the headline metrics, scoped to that single
    activity: stage and activity selections do not apply, type and date
    selections still switch consumed hours to the time log.

    Args:
        activities: Activities to report (default: every activity of the
                    project in the plan dataset)

    Returns DataFrame with ACTIVITY_METRIC_COLUMNS.
    """
    if not filters.has_project:
        return pd.DataFrame(columns=ACTIVITY_METRIC_COLUMNS)

    if activities is None:
        activities = get_project_activities(plan_df, filters.project_code)
    activities = [a for a in dict.fromkeys(str(a).strip() for a in activities) if a and a != ALL_ACTIVITIES]
    if not activities:
        return pd.DataFrame(columns=ACTIVITY_METRIC_COLUMNS)

    scope = replace(filters, stage=ALL_STAGES, activities=tuple(activities))
    plan = filter_plan_rows(plan_df, scope)

    if len(plan) > 0:
        agg = plan.groupby("item_description")[_PLAN_SUMS].sum()
    else:
        agg = pd.DataFrame(columns=_PLAN_SUMS, dtype=float)
    agg = agg.reindex(activities, fill_value=0.0).astype(float)

    if filters.uses_time_entries:
        consumed = _hours_by_activity(filter_time_entries(time_df, scope))
    else:
        consumed = agg["executed_hours"]
    agg["consumed_hours"] = consumed.reindex(activities, fill_value=0.0).astype(float)

    unproductive = _hours_by_activity(_unproductive_rows(time_df, filters.project_code))
    agg["unproductive_hours"] = unproductive.reindex(activities, fill_value=0.0).astype(float)

    agg.index = pd.Index(activities, name="activity")
    result = agg.reset_index()
    result["stage"] = map_activities_to_stages(result["activity"])

    return result[ACTIVITY_METRIC_COLUMNS]


def compute_stage_groups(activity_metrics: Union[pd.DataFrame, List[Dict[str, Any]]]) -> pd.DataFrame:
    """
    Group activity metrics into the canonical stages.

    Activities outside the canonical stages are dropped, stages with no
    activities are omitted, order follows CANONICAL_STAGES.
    consumption_ratio = consumed / planned * 100 (0 when planned is 0).

    Returns DataFrame with STAGE_GROUP_COLUMNS.
    """
    df = pd.DataFrame(activity_metrics)
    if len(df) == 0 or "stage" not in df.columns:
        return pd.DataFrame(columns=STAGE_GROUP_COLUMNS)

    df = df[df["stage"].isin(CANONICAL_STAGES)]
    if len(df) == 0:
        return pd.DataFrame(columns=STAGE_GROUP_COLUMNS)

    grouped = df.groupby("stage").agg(
        sold_hours=("sold_hours", "sum"),
        planned_hours=("planned_hours", "sum"),
        consumed_hours=("consumed_hours", "sum"),
        unproductive_hours=("unproductive_hours", "sum"),
    ).reset_index()

    planned = grouped["planned_hours"].astype(float)
    grouped["consumption_ratio"] = np.where(
        planned > 0,
        grouped["consumed_hours"] / planned.where(planned > 0, 1.0) * 100,
        0.0,
    )

    order = {stage: i for i, stage in enumerate(CANONICAL_STAGES)}
    grouped = grouped.sort_values("stage", key=lambda s: s.map(order)).reset_index(drop=True)

    return grouped[STAGE_GROUP_COLUMNS]


def compute_project_summary(plan_df: pd.DataFrame,
                            time_df: pd.DataFrame,
                            filters: FilterState) -> ProjectSummary:
    """Headline metrics, activity breakdown and stage groups in one pass."""
    activities = compute_activity_metrics(plan_df, time_df, filters)
    return ProjectSummary(
        filters=filters,
        headline=compute_headline_metrics(plan_df, time_df, filters),
        activities=activities,
        stage_groups=compute_stage_groups(activities),
    )
