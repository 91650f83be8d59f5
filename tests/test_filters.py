"""
Tests for filter state transitions and row predicates.
"""
import pytest
import pandas as pd
import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import ALL_ACTIVITIES, ALL_CAUSES, ALL_STAGES, ALL_TYPES
from project_hours.data.filters import (
    FilterState,
    apply_filter_change,
    plan_row_mask,
    time_entry_mask,
    filter_plan_rows,
    filter_time_entries,
    matches_plan_row,
    matches_time_entry_row,
)


@pytest.fixture
def plan_df():
    return pd.DataFrame({
        "project_code": ["P1", "P1", "P1", "P2"],
        "item_description": ["Config A", "Field Visit", "Gestão", "Config A"],
        "sold_hours": [10.0, 5.0, 2.0, 7.0],
        "planned_hours": [8.0, 5.0, 2.0, 7.0],
        "executed_hours": [6.0, 5.0, 1.0, 3.0],
        "balance_hours": [2.0, 0.0, 1.0, 4.0],
    })


@pytest.fixture
def time_df():
    return pd.DataFrame({
        "project_code": ["P1", "P1", "P1", "P1", "P2"],
        "activity_description": ["Config A", "Config A", "Field Visit", "Config A", "Config A"],
        "activity_type": ["Produtivas", "Improdutivas", "Produtivas", "Produtivas", "Produtivas"],
        "entry_date": ["2024-01-10", "2024-02-05", "2024-03-20", "bad date", "2024-01-10"],
        "hours": [4.0, 1.5, 5.0, 2.0, 3.0],
    })


class TestApplyFilterChange:
    """Tests for the filter state reducer."""

    def test_new_project_resets_dependent_fields(self):
        state = FilterState(project_code="P1", activities=("Config A",), cause_stage="TAF")

        new_state = apply_filter_change(state, "project_code", "P2")

        assert new_state.project_code == "P2"
        assert new_state.activities == (ALL_ACTIVITIES,)
        assert new_state.cause_stage == ALL_CAUSES

    def test_same_project_keeps_dependent_fields(self):
        state = FilterState(project_code="P1", activities=("Config A",), cause_stage="TAF")

        new_state = apply_filter_change(state, "project_code", "P1")

        assert new_state.activities == ("Config A",)
        assert new_state.cause_stage == "TAF"

    def test_stage_change_resets_activities(self):
        state = FilterState(project_code="P1", activities=("Config A",))

        new_state = apply_filter_change(state, "stage", "TAF")

        assert new_state.stage == "TAF"
        assert new_state.activities == (ALL_ACTIVITIES,)

    def test_other_fields_untouched(self):
        state = FilterState(project_code="P1", activities=("Config A",), stage="TAF")

        new_state = apply_filter_change(state, "activity_types", ["Produtivas"])

        assert new_state.activity_types == ("Produtivas",)
        assert new_state.activities == ("Config A",)
        assert new_state.stage == "TAF"

    def test_original_state_not_mutated(self):
        state = FilterState(project_code="P1")

        apply_filter_change(state, "project_code", "P2")

        assert state.project_code == "P1"
        with pytest.raises(FrozenInstanceError):
            state.project_code = "P3"

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            apply_filter_change(FilterState(), "client", "X")

    def test_values_cleaned(self):
        state = apply_filter_change(FilterState(), "activities", "Config A")
        assert state.activities == ("Config A",)

        state = apply_filter_change(state, "period_start", None)
        assert state.period_start == ""


class TestFilterStateFlags:
    """Tests for derived selection flags."""

    def test_wildcards_are_not_filters(self):
        state = FilterState(
            project_code="P1",
            stage=ALL_STAGES,
            activities=(ALL_ACTIVITIES,),
            activity_types=(ALL_TYPES, "Produtivas"),
        )

        assert state.has_stage_filter is False
        assert state.has_activity_filter is False
        assert state.has_type_filter is False
        assert state.uses_time_entries is False

    def test_time_entries_switch(self):
        assert FilterState(activity_types=("Produtivas",)).uses_time_entries is True
        assert FilterState(period_end="2024-03").uses_time_entries is True
        assert FilterState(stage="TAF").uses_time_entries is False


class TestPlanRowMask:
    """Tests for plan row predicates."""

    def test_no_project_matches_nothing(self, plan_df):
        assert not plan_row_mask(plan_df, FilterState()).any()

    def test_project_only(self, plan_df):
        result = filter_plan_rows(plan_df, FilterState(project_code="P1"))
        assert len(result) == 3

    def test_stage_filter(self, plan_df):
        result = filter_plan_rows(plan_df, FilterState(project_code="P1", stage="Parametrização"))
        assert list(result["item_description"]) == ["Config A"]

    def test_activity_filter(self, plan_df):
        state = FilterState(project_code="P1", activities=("Field Visit", "Gestão"))
        result = filter_plan_rows(plan_df, state)
        assert sorted(result["item_description"]) == ["Field Visit", "Gestão"]

    def test_type_and_date_ignored(self, plan_df):
        """The plan has neither dimension, so those filters never narrow it."""
        base = FilterState(project_code="P1")
        narrowed = FilterState(project_code="P1", activity_types=("Improdutivas",),
                               period_start="2030-01", period_end="2030-12")

        assert plan_row_mask(plan_df, base).equals(plan_row_mask(plan_df, narrowed))

    def test_idempotent(self, plan_df):
        state = FilterState(project_code="P1", stage="Parametrização")
        once = filter_plan_rows(plan_df, state)
        twice = filter_plan_rows(once, state)
        assert once.equals(twice)


class TestTimeEntryMask:
    """Tests for time entry predicates."""

    def test_type_filter(self, time_df):
        state = FilterState(project_code="P1", activity_types=("Improdutivas",))
        result = filter_time_entries(time_df, state)
        assert result["hours"].tolist() == [1.5]

    def test_type_filter_uses_precomputed_category(self, time_df):
        """When activity_category is present it is used as is."""
        df = time_df.assign(activity_category="Translado")
        state = FilterState(project_code="P1", activity_types=("Translado",))
        assert time_entry_mask(df, state).sum() == 4

    def test_date_filter_excludes_unparsable(self, time_df):
        state = FilterState(project_code="P1", period_start="2024-01", period_end="2024-02")
        result = filter_time_entries(time_df, state)
        assert result["hours"].tolist() == [4.0, 1.5]

    def test_no_date_filter_keeps_unparsable(self, time_df):
        result = filter_time_entries(time_df, FilterState(project_code="P1"))
        assert len(result) == 4

    def test_stage_filter(self, time_df):
        state = FilterState(project_code="P1", stage="Técnico Campo")
        result = filter_time_entries(time_df, state)
        assert result["activity_description"].tolist() == ["Field Visit"]

    def test_idempotent(self, time_df):
        state = FilterState(project_code="P1", activity_types=("Produtivas",),
                            period_start="2024-01", period_end="2024-03")
        once = filter_time_entries(time_df, state)
        twice = filter_time_entries(once, state)
        assert once["hours"].tolist() == [4.0, 5.0]
        assert once.equals(twice)

    def test_non_default_index(self, time_df):
        df = time_df.set_index(pd.Index([9, 9, 8, 7, 6]))
        state = FilterState(project_code="P1", period_start="2024-03")
        assert time_entry_mask(df, state).sum() == 1


class TestSingleRowPredicates:
    """Tests for the single-record forms."""

    def test_matches_plan_row(self):
        row = {"project_code": "P1", "item_description": "Config A"}
        assert matches_plan_row(row, FilterState(project_code="P1")) is True
        assert matches_plan_row(row, FilterState(project_code="P1", stage="TAF")) is False

    def test_matches_time_entry_row(self):
        row = {
            "project_code": "P1",
            "activity_description": "Config A",
            "activity_type": "Improdutivas",
            "entry_date": 45000,
            "hours": 1.0,
        }
        assert matches_time_entry_row(row, FilterState(project_code="P1", period_start="2023-03")) is True
        assert matches_time_entry_row(row, FilterState(project_code="P1", period_start="2023-04")) is False
        assert matches_time_entry_row(row, FilterState(project_code="P1", activity_types=("Produtivas",))) is False
