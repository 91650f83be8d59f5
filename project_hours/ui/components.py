"""
Reusable UI components and blocks.
"""
import streamlit as st
import pandas as pd
from typing import Optional, List, Dict, Any

from project_hours.config import ALL_ACTIVITIES, ALL_TYPES
from project_hours.data.filters import FilterState
from project_hours.metrics.causes import CauseMetrics
from project_hours.metrics.hours import HeadlineMetrics
from project_hours.ui.formatting import fmt_hours, fmt_percent, fmt_count


def kpi_strip(metrics: Dict[str, Any],
              format_map: Optional[Dict[str, str]] = None):
    """
    Render horizontal strip of KPI cards.

    Args:
        metrics: Dict of {label: value}
        format_map: Dict of {label: format_type} where format_type is
                    'hours', 'percent', 'count' or 'text'
    """
    if format_map is None:
        format_map = {}

    cols = st.columns(len(metrics))

    formatters = {
        "hours": fmt_hours,
        "percent": fmt_percent,
        "count": fmt_count,
        "text": lambda x: str(x) if pd.notna(x) else "—",
    }

    for i, (label, value) in enumerate(metrics.items()):
        with cols[i]:
            formatter = formatters.get(format_map.get(label, "hours"), str)
            st.metric(label=label, value=formatter(value))


def headline_kpis(metrics: HeadlineMetrics):
    """Render the five headline hour metrics."""
    kpi_strip({
        "Horas Vendidas": metrics.sold_hours,
        "Horas Planejadas": metrics.planned_hours,
        "Horas Consumidas": metrics.consumed_hours,
        "Horas Improdutivas": metrics.unproductive_hours,
        "Saldo de Horas": metrics.balance_hours,
    })


def cause_kpis(metrics: CauseMetrics):
    """Render the cause panel summary for the selected cause stage."""
    kpi_strip(
        {
            "Etapa": metrics.stage or "—",
            "Horas Improdutivas": metrics.unproductive_hours,
            "Horas Consumidas": metrics.consumed_hours,
            "Variação PlanXCons": metrics.consumption_ratio,
        },
        format_map={"Etapa": "text", "Variação PlanXCons": "percent"},
    )


def empty_state(message: str, icon: str = "📭"):
    """
    Render empty state message.
    """
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(f"### {icon}")
        st.markdown(f"**{message}**")


def filter_chips(filters: FilterState):
    """
    Display active filters as chips.
    """
    active: List[str] = []

    if filters.has_stage_filter:
        active.append(f"Etapa: {filters.stage}")
    if filters.has_activity_filter:
        active.append(f"Atividades: {len([a for a in filters.activities if a != ALL_ACTIVITIES])}")
    if filters.has_type_filter:
        active.append("Tipos: " + ", ".join(t for t in filters.activity_types if t != ALL_TYPES))
    if filters.has_date_filter:
        active.append(f"Período: {filters.period_start or '…'} → {filters.period_end or '…'}")
    if filters.has_cause_filter:
        active.append(f"Causa: {filters.cause_stage}")

    if active:
        chips = " | ".join([f"`{f}`" for f in active])
        st.caption(f"Filtros ativos: {chips}")
    if filters.uses_time_entries:
        st.caption("Horas consumidas recalculadas a partir dos apontamentos detalhados.")


def download_button(data: bytes,
                    filename: str,
                    label: str = "Download CSV",
                    mime: str = "text/csv",
                    key: str = "download"):
    """
    Render download button for exported bytes.
    """
    st.download_button(
        label=label,
        data=data,
        file_name=filename,
        mime=mime,
        key=key
    )
