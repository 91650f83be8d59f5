"""
Export utilities for stage groups, cause tables and project summaries.
"""
import pandas as pd
import json
from typing import Optional
from datetime import datetime
from io import BytesIO

from project_hours.config import STAGE_CHART_LABELS
from project_hours.metrics.hours import ProjectSummary


def _stamp() -> str:
    return datetime.now().strftime('%Y%m%d')


def export_dataframe_csv(df: pd.DataFrame, filename: Optional[str] = None) -> tuple:
    """
    Export dataframe to CSV bytes.

    Returns: (csv_bytes, filename)
    """
    if filename is None:
        filename = f"export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"

    csv_bytes = df.to_csv(index=False).encode('utf-8')

    return csv_bytes, filename


def export_stage_groups_csv(stage_groups: pd.DataFrame,
                            project_code: str,
                            filename: Optional[str] = None) -> tuple:
    """
    Export stage groups with the chart labels as headers.

    Returns: (csv_bytes, filename)
    """
    export_df = stage_groups.rename(columns={"stage": "Etapa", **STAGE_CHART_LABELS})

    if filename is None:
        filename = f"etapas_{project_code}_{_stamp()}.csv"

    return export_dataframe_csv(export_df, filename)


def export_cause_table_csv(table_df: pd.DataFrame,
                           project_code: str,
                           filename: Optional[str] = None) -> tuple:
    """
    Export cause detail rows to CSV.

    Returns: (csv_bytes, filename)
    """
    if filename is None:
        filename = f"causas_{project_code}_{_stamp()}.csv"

    return export_dataframe_csv(table_df, filename)


def export_summary_json(summary: ProjectSummary, filename: Optional[str] = None) -> tuple:
    """
    Export a project summary (filters, headline, activities, stages) to JSON.

    Returns: (json_bytes, filename)
    """
    if filename is None:
        filename = f"resumo_{summary.filters.project_code}_{_stamp()}.json"

    json_bytes = json.dumps(summary.to_dict(), indent=2, ensure_ascii=False, default=str).encode('utf-8')

    return json_bytes, filename


def export_summary_excel(summary: ProjectSummary,
                         cause_table: Optional[pd.DataFrame] = None,
                         filename: Optional[str] = None) -> tuple:
    """
    Export a project summary as a multi-sheet workbook.

    Returns: (excel_bytes, filename)
    """
    if filename is None:
        filename = f"resumo_{summary.filters.project_code}_{_stamp()}.xlsx"

    headline = pd.DataFrame([summary.headline.to_dict()])

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        headline.to_excel(writer, sheet_name="Resumo", index=False)
        summary.stage_groups.to_excel(writer, sheet_name="Etapas", index=False)
        summary.activities.to_excel(writer, sheet_name="Atividades", index=False)
        if cause_table is not None and len(cause_table) > 0:
            cause_table.to_excel(writer, sheet_name="Causas", index=False)

    return buffer.getvalue(), filename
