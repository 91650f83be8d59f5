"""
Filter state and the predicates that apply it to plan and time-entry rows.

The plan dataset has no date or activity-type dimension, so the date and
type checks apply to time entries only. Both row kinds share the project,
stage and activity checks.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Tuple

import pandas as pd

from project_hours.config import (
    ALL_STAGES,
    ALL_ACTIVITIES,
    ALL_TYPES,
    ALL_CAUSES,
)
from project_hours.data.classification import classify_activity_types, map_activities_to_stages
from project_hours.data.dates import date_in_range_mask


# =============================================================================
# FILTER STATE
# =============================================================================

@dataclass(frozen=True)
class FilterState:
    """Everything currently selected. Immutable; change it with apply_filter_change."""
    project_code: str = ""
    stage: str = ALL_STAGES
    activities: Tuple[str, ...] = ()
    activity_types: Tuple[str, ...] = ()
    period_start: str = ""
    period_end: str = ""
    cause_stage: str = ALL_CAUSES

    @property
    def has_project(self) -> bool:
        return bool(self.project_code.strip())

    @property
    def has_stage_filter(self) -> bool:
        return self.stage not in ("", ALL_STAGES)

    @property
    def has_activity_filter(self) -> bool:
        return len(self.activities) > 0 and ALL_ACTIVITIES not in self.activities

    @property
    def has_type_filter(self) -> bool:
        return len(self.activity_types) > 0 and ALL_TYPES not in self.activity_types

    @property
    def has_date_filter(self) -> bool:
        return bool(self.period_start or self.period_end)

    @property
    def uses_time_entries(self) -> bool:
        """Consumed hours must come from the time log (only it carries type and date)."""
        return self.has_type_filter or self.has_date_filter

    @property
    def has_cause_filter(self) -> bool:
        return self.cause_stage not in ("", ALL_STAGES)


FILTER_FIELDS = tuple(f.name for f in fields(FilterState))
_SEQUENCE_FIELDS = {"activities", "activity_types"}


def _clean_value(field_name: str, value: Any):
    if field_name in _SEQUENCE_FIELDS:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(str(v).strip() for v in value)
    return "" if value is None else str(value).strip()


def apply_filter_change(state: FilterState, field_name: str, value: Any) -> FilterState:
    """
    Return a new FilterState with one field changed.

    Activity and cause options are project-scoped, so a new project resets
    both to "all". Activity options are also stage-scoped, so any stage
    selection resets the activity list.
    """
    if field_name not in FILTER_FIELDS:
        raise ValueError(f"Unknown filter field: {field_name}")

    value = _clean_value(field_name, value)
    changes = {field_name: value}

    if field_name == "project_code" and value != state.project_code:
        changes["activities"] = (ALL_ACTIVITIES,)
        changes["cause_stage"] = ALL_CAUSES
    elif field_name == "stage":
        changes["activities"] = (ALL_ACTIVITIES,)

    return replace(state, **changes)


# =============================================================================
# ROW MASKS
# =============================================================================

def _text(values: pd.Series) -> pd.Series:
    return values.astype(object).where(values.notna(), "").astype(str).str.strip()


def _base_mask(df: pd.DataFrame, filters: FilterState, description_col: str) -> pd.Series:
    """Project, stage and activity checks shared by both row kinds."""
    if len(df) == 0 or not filters.has_project:
        return pd.Series(False, index=df.index)

    mask = _text(df["project_code"]) == filters.project_code.strip()

    if filters.has_stage_filter:
        mask &= map_activities_to_stages(df[description_col]) == filters.stage

    if filters.has_activity_filter:
        mask &= _text(df[description_col]).isin(filters.activities)

    return mask


def plan_row_mask(plan_df: pd.DataFrame, filters: FilterState) -> pd.Series:
    """Boolean mask of plan rows matching the filters (True = keep)."""
    return _base_mask(plan_df, filters, "item_description")


def time_entry_mask(time_df: pd.DataFrame, filters: FilterState) -> pd.Series:
    """Boolean mask of time entries matching the filters (True = keep)."""
    mask = _base_mask(time_df, filters, "activity_description")
    if not mask.any():
        return mask

    if filters.has_date_filter:
        mask &= date_in_range_mask(time_df["entry_date"], filters.period_start, filters.period_end)

    if filters.has_type_filter:
        if "activity_category" in time_df.columns:
            categories = time_df["activity_category"]
        else:
            categories = classify_activity_types(time_df["activity_type"])
        mask &= categories.isin(filters.activity_types)

    return mask


def filter_plan_rows(plan_df: pd.DataFrame, filters: FilterState) -> pd.DataFrame:
    return plan_df[plan_row_mask(plan_df, filters)].copy()


def filter_time_entries(time_df: pd.DataFrame, filters: FilterState) -> pd.DataFrame:
    return time_df[time_entry_mask(time_df, filters)].copy()


# =============================================================================
# SINGLE-ROW PREDICATES
# =============================================================================

def matches_plan_row(row: Mapping[str, Any], filters: FilterState) -> bool:
    """Single-record form of plan_row_mask (canonical keys)."""
    return bool(plan_row_mask(pd.DataFrame([dict(row)]), filters).iloc[0])


def matches_time_entry_row(row: Mapping[str, Any], filters: FilterState) -> bool:
    """Single-record form of time_entry_mask (canonical keys)."""
    return bool(time_entry_mask(pd.DataFrame([dict(row)]), filters).iloc[0])
