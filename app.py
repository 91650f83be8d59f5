"""
Projetos em Horas

Main entry point for Streamlit app.
"""
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Projetos em Horas",
    page_icon="⏱️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add repo root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from project_hours.config import config, SOURCE_FILES
from project_hours.data.loader import (
    load_plan_rows,
    load_time_entries,
    load_cause_rows,
    load_cause_details,
    get_data_status,
)
from project_hours.exports import (
    export_stage_groups_csv,
    export_cause_table_csv,
    export_summary_excel,
)
from project_hours.logger import setup_logging
from project_hours.metrics.causes import (
    calculate_cause_metrics,
    get_cause_chart_data,
    get_cause_table_data,
)
from project_hours.metrics.filter_options import derive_available_filters
from project_hours.metrics.hours import compute_project_summary
from project_hours.ui.charts import stage_hours_chart, cause_chart, horizontal_bar
from project_hours.ui.components import (
    headline_kpis,
    cause_kpis,
    empty_state,
    filter_chips,
    download_button,
)
from project_hours.ui.formatting import format_metric_df
from project_hours.ui.layout import render_header, render_sidebar_filters, section_header
from project_hours.ui.state import init_state, get_filters


@st.cache_resource
def _init_logging():
    return setup_logging()


def main():
    """Main app entry point."""
    _init_logging()
    init_state()

    # Check data availability
    status = get_data_status()
    missing = [name for name, info in status.items()
               if info["required"] and not (info["xlsx_exists"] or info["csv_exists"])]

    if missing:
        st.error("Arquivos de dados não encontrados!")
        st.markdown(f"""
        ### Configuração necessária

        Coloque os arquivos em: `{config.data_dir}`

        Obrigatórios:
        - `{config.plan_file}` (aba `{config.plan_sheet}`)
        - `{config.time_file}`

        Opcional:
        - `{config.cause_file}` (abas `{SOURCE_FILES['causes']['sheet']}` e `{SOURCE_FILES['cause_details']['sheet']}`)
        """)
        st.info("Depois de copiar os arquivos, recarregue a página.")
        return

    with st.spinner("Carregando dados..."):
        plan_df = load_plan_rows()
        time_df = load_time_entries()
        cause_df = load_cause_rows()
        detail_df = load_cause_details()

    filters = get_filters()
    available = derive_available_filters(plan_df, time_df, cause_df, filters.project_code)

    render_sidebar_filters(available, filters)
    render_header(filters)
    filter_chips(filters)

    summary = compute_project_summary(plan_df, time_df, filters)
    headline_kpis(summary.headline)

    if not filters.has_project:
        empty_state("Selecione um projeto na barra lateral para ver as métricas.")
        return

    # =========================================================================
    # STAGES
    # =========================================================================
    st.markdown("---")
    section_header("Horas por Etapa", "Vendido, planejado, consumido e improdutivo por etapa do projeto")

    if len(summary.stage_groups) > 0:
        st.plotly_chart(stage_hours_chart(summary.stage_groups), use_container_width=True)
        st.dataframe(format_metric_df(summary.stage_groups), use_container_width=True, hide_index=True)
    else:
        st.info("Nenhuma atividade do projeto corresponde às etapas padrão.")

    with st.expander("Detalhe por atividade"):
        if len(summary.activities) > 0:
            st.plotly_chart(
                horizontal_bar(summary.activities, x="consumed_hours", y="activity", title="Horas consumidas"),
                use_container_width=True,
            )
            st.dataframe(format_metric_df(summary.activities), use_container_width=True, hide_index=True)

    # =========================================================================
    # CAUSES
    # =========================================================================
    st.markdown("---")
    section_header("Causas de Horas Improdutivas")

    cause_kpis(calculate_cause_metrics(summary.stage_groups, filters.cause_stage))

    chart_df = get_cause_chart_data(cause_df, filters.project_code, filters.cause_stage)
    table_df = get_cause_table_data(cause_df, detail_df, filters.project_code, filters.cause_stage)

    col1, col2 = st.columns([1, 1])
    with col1:
        if len(chart_df) > 0:
            st.plotly_chart(
                cause_chart(chart_df, by_stage=not filters.has_cause_filter),
                use_container_width=True,
            )
        else:
            st.info("Sem causas registradas para este projeto.")
    with col2:
        if len(table_df) > 0:
            st.dataframe(format_metric_df(table_df), use_container_width=True, hide_index=True)

    # =========================================================================
    # EXPORTS
    # =========================================================================
    st.markdown("---")
    c1, c2, c3 = st.columns(3)
    with c1:
        data, filename = export_stage_groups_csv(summary.stage_groups, filters.project_code)
        download_button(data, filename, label="Etapas (CSV)", key="dl_stages")
    with c2:
        data, filename = export_cause_table_csv(table_df, filters.project_code)
        download_button(data, filename, label="Causas (CSV)", key="dl_causes")
    with c3:
        data, filename = export_summary_excel(summary, table_df)
        download_button(
            data, filename, label="Resumo (Excel)",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key="dl_summary",
        )


if __name__ == "__main__":
    main()
