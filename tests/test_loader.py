"""
Tests for source file discovery and loading.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import config
from project_hours.data.loader import get_source_paths, read_source_table, load_table, get_data_status


@pytest.fixture
def data_dir(tmp_path):
    plan = pd.DataFrame({
        "Cod Projeto": ["P1"],
        "Descrição do Item": ["Config A"],
        "Hs Orçadas": [10],
        "Hs Programadas": [8],
        "Hs Executadas": [6],
        "Hs Saldo": [2],
    })
    with pd.ExcelWriter(tmp_path / config.plan_file, engine="openpyxl") as writer:
        plan.to_excel(writer, sheet_name=config.plan_sheet, index=False)

    time_entries = pd.DataFrame({
        "Código do Projeto": ["P1"],
        "Descrição da Atividade": ["Config A"],
        "Descrição Tipo Atividade": ["Improdutivas"],
        "Data Apontamento": ["2024-01-10"],
        "Horas Decimal": [1.5],
    })
    time_entries.to_csv(tmp_path / config.time_file.replace(".xlsx", ".csv"), index=False)

    return tmp_path


class TestSourcePaths:
    """Tests for workbook / csv path resolution."""

    def test_cause_sheets_share_workbook(self, tmp_path):
        causes = get_source_paths("causes", tmp_path)
        details = get_source_paths("cause_details", tmp_path)

        assert causes["xlsx"] == details["xlsx"]
        assert causes["csv"] != details["csv"]
        assert causes["csv"].name.endswith("_causas.csv")


class TestLoadTable:
    """Tests for reading and normalising source tables."""

    def test_reads_named_sheet(self, data_dir):
        df = load_table("plan", data_dir)

        assert df["project_code"].tolist() == ["P1"]
        assert df["sold_hours"].tolist() == [10.0]

    def test_csv_fallback(self, data_dir):
        df = load_table("time_entries", data_dir)

        assert df["hours"].tolist() == [1.5]
        assert df["activity_category"].tolist() == ["Improdutivas"]

    def test_missing_file(self, data_dir):
        assert read_source_table("causes", data_dir) is None
        assert load_table("causes", data_dir) is None


class TestDataStatus:
    """Tests for data availability report."""

    def test_status(self, data_dir):
        status = get_data_status(data_dir)

        assert status["plan"]["xlsx_exists"] is True
        assert status["time_entries"]["csv_exists"] is True
        assert status["causes"]["required"] is False
        assert status["time_entries"]["required"] is True
