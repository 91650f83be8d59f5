"""
Glossary & Method Page

Definitions, formulas and classification rules behind the hour metrics.
"""
import streamlit as st
import pandas as pd
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import CANONICAL_STAGES, STAGE_CHART_LABELS
from project_hours.data.classification import ACTIVITY_TYPE_RULES, STAGE_RULES
from project_hours.ui.layout import section_header
from project_hours.ui.state import init_state


st.set_page_config(page_title="Glossário e Método", page_icon="📖", layout="wide")

init_state()


def _rules_table(rules, result_label: str) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Ordem": i + 1, "Padrão (texto normalizado)": pattern.pattern, result_label: result}
         for i, (pattern, result) in enumerate(rules)]
    )


def main():
    st.title("Glossário e Método")
    st.caption("Definições, fórmulas e regras de classificação")

    section_header("Métricas")

    st.markdown("""
    | Métrica | Fórmula | Observações |
    |--------|---------|-------|
    | **Horas Vendidas** | `Σ Hs Orçadas` | Linhas do plano filtradas por projeto, etapa e atividade |
    | **Horas Planejadas** | `Σ Hs Programadas` | Idem |
    | **Horas Consumidas** | `Σ Hs Executadas` | Sem filtro de tipo ou período |
    | **Horas Consumidas** | `Σ Horas Decimal` | Com filtro de tipo ou período: recalculadas dos apontamentos |
    | **Horas Improdutivas** | `Σ Horas Decimal` (tipo *Improdutivas*) | Sempre o projeto inteiro, ignora etapa, tipo e período |
    | **Saldo de Horas** | `Σ Hs Saldo` | Linhas do plano filtradas |
    | **Variação PlanXCons** | `Consumido / Planejado × 100` | 0 quando não há horas planejadas |
    """)

    st.info(
        "As duas fontes de horas consumidas (plano e apontamentos) não são "
        "reconciliadas automaticamente; diferenças indicam divergência nos dados de origem."
    )

    st.markdown("---")
    section_header("Etapas", " → ".join(CANONICAL_STAGES))
    st.markdown(
        "Atividades que não correspondem a nenhuma regra ficam fora dos gráficos por etapa. "
        f"Colunas do gráfico: {', '.join(STAGE_CHART_LABELS.values())}."
    )
    st.dataframe(_rules_table(STAGE_RULES, "Etapa"), use_container_width=True, hide_index=True)

    st.markdown("---")
    section_header("Tipos de Atividade", "Primeira regra que casar define a categoria; sem regra → Outras")
    st.dataframe(_rules_table(ACTIVITY_TYPE_RULES, "Categoria"), use_container_width=True, hide_index=True)


main()
