"""
Tests for unproductive-time cause views.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import ALL_STAGES
from project_hours.metrics.causes import (
    CAUSE_CHART_COLUMNS,
    CAUSE_TABLE_COLUMNS,
    UNSPECIFIED_LABEL,
    CauseMetrics,
    get_available_cause_stages,
    get_cause_chart_data,
    get_cause_table_data,
    calculate_cause_metrics,
)


@pytest.fixture
def cause_df():
    return pd.DataFrame({
        "project_code": ["P1", "P1", "P1", "P1", "P2"],
        "stage": ["TAF", "Parametrização", "TAF", "Comercial", "TAC"],
        "cause": ["Cliente", "Infra", "Fornecedor", "", "Cliente"],
        "hours": [3.0, 2.0, 5.0, 0.0, 4.0],
    })


@pytest.fixture
def detail_df():
    return pd.DataFrame({
        "project_code": ["P1", "P1", "P1"],
        "stage": ["TAF", "TAF", "PTAF"],
        "cause": ["Cliente", "Fornecedor", "Cliente"],
        "detail": ["Sem acesso", "Atraso de peças", "Reunião cancelada"],
        "hours": [2.0, 6.0, 1.0],
    })


@pytest.fixture
def stage_groups():
    return pd.DataFrame({
        "stage": ["Parametrização", "TAF"],
        "sold_hours": [10.0, 20.0],
        "planned_hours": [8.0, 16.0],
        "consumed_hours": [6.0, 20.0],
        "unproductive_hours": [1.5, 4.0],
        "consumption_ratio": [75.0, 125.0],
    })


class TestAvailableCauseStages:
    """Tests for cause stage options."""

    def test_canonical_first_then_alphabetical(self, cause_df):
        stages = get_available_cause_stages(cause_df, "P1")

        assert stages == ["Parametrização", "TAF", "Comercial"]

    def test_no_project(self, cause_df):
        assert get_available_cause_stages(cause_df, "") == []
        assert get_available_cause_stages(cause_df, None) == []


class TestCauseChartData:
    """Tests for chart series."""

    def test_by_stage(self, cause_df):
        chart = get_cause_chart_data(cause_df, "P1", ALL_STAGES)

        assert list(chart.columns) == CAUSE_CHART_COLUMNS
        assert list(chart["label"]) == ["Parametrização", "TAF", "Comercial"]
        assert chart["hours"].tolist() == [2.0, 8.0, 0.0]
        assert chart["share_pct"].sum() == pytest.approx(100.0)

    def test_by_cause_within_stage(self, cause_df):
        chart = get_cause_chart_data(cause_df, "P1", "TAF")

        assert list(chart["label"]) == ["Fornecedor", "Cliente"]
        assert chart["share_pct"].tolist() == [62.5, 37.5]

    def test_blank_cause_labelled(self, cause_df):
        chart = get_cause_chart_data(cause_df, "P1", "Comercial")

        assert list(chart["label"]) == [UNSPECIFIED_LABEL]
        assert chart["share_pct"].tolist() == [0.0]

    def test_no_rows(self, cause_df):
        chart = get_cause_chart_data(cause_df, "P9")

        assert len(chart) == 0
        assert list(chart.columns) == CAUSE_CHART_COLUMNS


class TestCauseTableData:
    """Tests for the detail table join."""

    def test_joins_stage_totals(self, cause_df, detail_df):
        table = get_cause_table_data(cause_df, detail_df, "P1")

        assert list(table.columns) == CAUSE_TABLE_COLUMNS
        # canonical order: PTAF before TAF, hours descending within a stage
        assert list(table["stage"]) == ["PTAF", "TAF", "TAF"]
        assert list(table["detail"]) == ["Reunião cancelada", "Atraso de peças", "Sem acesso"]

        taf = table[table["stage"] == "TAF"]
        assert taf["stage_hours"].tolist() == [8.0, 8.0]
        assert taf["share_of_stage_pct"].tolist() == [75.0, 25.0]

    def test_unmatched_stage_gets_zero_total(self, cause_df, detail_df):
        table = get_cause_table_data(cause_df, detail_df, "P1", "PTAF")

        assert len(table) == 1
        assert table["stage_hours"].iloc[0] == 0.0
        assert table["share_of_stage_pct"].iloc[0] == 0.0

    def test_no_cause_rows(self, detail_df):
        empty = pd.DataFrame(columns=["project_code", "stage", "cause", "hours"])

        table = get_cause_table_data(empty, detail_df, "P1", "TAF")

        assert len(table) == 2
        assert (table["stage_hours"] == 0.0).all()

    def test_no_project(self, cause_df, detail_df):
        table = get_cause_table_data(cause_df, detail_df, "")

        assert len(table) == 0
        assert list(table.columns) == CAUSE_TABLE_COLUMNS


class TestCalculateCauseMetrics:
    """Tests for the cause panel summary."""

    def test_selected_stage(self, stage_groups):
        metrics = calculate_cause_metrics(stage_groups, "TAF")

        assert metrics.stage == "TAF"
        assert metrics.unproductive_hours == 4.0
        assert metrics.consumed_hours == 20.0
        assert metrics.consumption_ratio == 125.0

    def test_wildcard_zeroed(self, stage_groups):
        assert calculate_cause_metrics(stage_groups, "") == CauseMetrics()
        assert calculate_cause_metrics(stage_groups, ALL_STAGES) == CauseMetrics()

    def test_missing_stage_zeroed(self, stage_groups):
        """A stage with no group returns zeros rather than raising."""
        assert calculate_cause_metrics(stage_groups, "TAC") == CauseMetrics()

    def test_empty_groups(self):
        assert calculate_cause_metrics(pd.DataFrame(), "TAF") == CauseMetrics()
