"""
Standard chart wrappers using Plotly.
"""
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import pandas as pd
from typing import Optional

from project_hours.config import STAGE_CHART_LABELS


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "primary": "#1f77b4",
    "secondary": "#ff7f0e",
    "success": "#28a745",
    "warning": "#ffc107",
    "danger": "#dc3545",
    "neutral": "#6c757d",
    "light": "#f8f9fa",
}

STAGE_BAR_COLORS = {
    "sold_hours": CHART_COLORS["primary"],
    "planned_hours": CHART_COLORS["secondary"],
    "consumed_hours": CHART_COLORS["success"],
    "unproductive_hours": CHART_COLORS["danger"],
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# STAGE CHART
# =============================================================================

def stage_hours_chart(stage_groups: pd.DataFrame, title: str = "Horas por Etapa") -> go.Figure:
    """
    Grouped bars of sold / planned / consumed / unproductive hours per stage,
    with the consumption ratio as a line on a secondary axis.
    """
    fig = make_subplots(specs=[[{"secondary_y": True}]])

    for col, color in STAGE_BAR_COLORS.items():
        fig.add_trace(
            go.Bar(
                name=STAGE_CHART_LABELS[col],
                x=stage_groups["stage"],
                y=stage_groups[col],
                marker_color=color,
            ),
            secondary_y=False,
        )

    fig.add_trace(
        go.Scatter(
            name=STAGE_CHART_LABELS["consumption_ratio"],
            x=stage_groups["stage"],
            y=stage_groups["consumption_ratio"],
            mode="lines+markers",
            line={"color": CHART_COLORS["neutral"], "dash": "dot"},
        ),
        secondary_y=True,
    )

    fig.update_yaxes(title_text="Horas", secondary_y=False)
    fig.update_yaxes(title_text="%", secondary_y=True)
    fig.update_layout(barmode="group", title=title)

    return apply_layout(fig)


# =============================================================================
# CAUSE CHART
# =============================================================================

def cause_chart(chart_df: pd.DataFrame, title: str = "", by_stage: bool = True) -> go.Figure:
    """
    Bar chart of unproductive hours per stage (or per cause within a stage).
    """
    fig = px.bar(
        chart_df,
        x="label" if by_stage else "hours",
        y="hours" if by_stage else "label",
        orientation="v" if by_stage else "h",
        title=title,
        text=chart_df["share_pct"].map(lambda v: f"{v:.0f}%"),
        color_discrete_sequence=[CHART_COLORS["danger"]],
    )

    fig.update_traces(textposition="outside")
    if not by_stage:
        fig.update_layout(yaxis={"categoryorder": "total ascending"})
    fig.update_layout(xaxis_title=None, yaxis_title=None)

    return apply_layout(fig)


def horizontal_bar(df: pd.DataFrame, x: str, y: str,
                   title: str = "", color: Optional[str] = None,
                   text: Optional[str] = None) -> go.Figure:
    """
    Create horizontal bar chart.
    """
    fig = px.bar(
        df, x=x, y=y, orientation="h",
        title=title,
        color=color,
        text=text,
    )

    fig.update_traces(textposition="outside")
    fig.update_layout(yaxis={"categoryorder": "total ascending"})

    return apply_layout(fig)
