"""
Layout components: header, sidebar filters, section headers.
"""
import pandas as pd
import streamlit as st
from typing import List, Optional

from project_hours.config import ALL_STAGES, ALL_ACTIVITIES, ALL_CAUSES, CANONICAL_STAGES
from project_hours.data.filters import FilterState
from project_hours.metrics.filter_options import AvailableFilters, get_stage_activities
from project_hours.ui.state import WIDGET_KEYS, on_widget_change, reset_filters


# =============================================================================
# HEADER
# =============================================================================

def render_header(filters: FilterState):
    """Render app header with the selected project."""
    col1, col2 = st.columns([3, 1])

    with col1:
        st.title("Projetos em Horas")

    with col2:
        if filters.has_project:
            st.caption(f"Projeto: {filters.project_code}")
        else:
            st.caption("Nenhum projeto selecionado")


def _month_options(period_min: str, period_max: str) -> List[str]:
    if not period_min or not period_max:
        return [""]
    months = pd.period_range(period_min, period_max, freq="M").strftime("%Y-%m").tolist()
    return [""] + months


# =============================================================================
# SIDEBAR
# =============================================================================

def render_sidebar_filters(available: AvailableFilters, filters: FilterState):
    """Render sidebar filter controls bound to the filter state."""
    with st.sidebar:
        st.header("Filtros")

        st.selectbox(
            "Código do Projeto",
            options=[""] + available.project_codes,
            format_func=lambda v: v or "Selecione...",
            key=WIDGET_KEYS["project_code"],
            on_change=on_widget_change,
            args=("project_code",),
        )

        st.selectbox(
            "Etapa do Projeto",
            options=[ALL_STAGES] + CANONICAL_STAGES,
            format_func=lambda v: "Todas" if v == ALL_STAGES else v,
            key=WIDGET_KEYS["stage"],
            on_change=on_widget_change,
            args=("stage",),
        )

        activity_options = [ALL_ACTIVITIES] + get_stage_activities(available.activities, filters.stage)
        st.multiselect(
            "Atividade",
            options=activity_options,
            format_func=lambda v: "Todas" if v == ALL_ACTIVITIES else v,
            key=WIDGET_KEYS["activities"],
            on_change=on_widget_change,
            args=("activities",),
        )

        st.multiselect(
            "Tipo de Atividade",
            options=available.activity_types,
            key=WIDGET_KEYS["activity_types"],
            on_change=on_widget_change,
            args=("activity_types",),
        )

        months = _month_options(available.period_min, available.period_max)
        col1, col2 = st.columns(2)
        with col1:
            st.selectbox(
                "Início",
                options=months,
                format_func=lambda v: v or "—",
                key=WIDGET_KEYS["period_start"],
                on_change=on_widget_change,
                args=("period_start",),
            )
        with col2:
            st.selectbox(
                "Fim",
                options=months,
                format_func=lambda v: v or "—",
                key=WIDGET_KEYS["period_end"],
                on_change=on_widget_change,
                args=("period_end",),
            )

        st.selectbox(
            "Classificação da Causa",
            options=[ALL_CAUSES] + available.cause_stages,
            format_func=lambda v: v or "Todas",
            key=WIDGET_KEYS["cause_stage"],
            on_change=on_widget_change,
            args=("cause_stage",),
        )

        st.button("Limpar filtros", on_click=reset_filters)


# =============================================================================
# SECTIONS
# =============================================================================

def section_header(title: str, description: Optional[str] = None):
    """Render section header with optional description."""
    st.subheader(title)
    if description:
        st.caption(description)
