"""
Session state management for Streamlit app.

The FilterState lives in st.session_state; widgets only forward their
values through apply_filter_change, then get re-synced so the reset rules
(new project → activities and cause reset) show up in the controls.
"""
import streamlit as st
from dataclasses import asdict
from typing import Any

from project_hours.data.filters import FilterState, apply_filter_change


# =============================================================================
# STATE KEYS
# =============================================================================

FILTERS_KEY = "filters"

WIDGET_KEYS = {
    "project_code": "w_project_code",
    "stage": "w_stage",
    "activities": "w_activities",
    "activity_types": "w_activity_types",
    "period_start": "w_period_start",
    "period_end": "w_period_end",
    "cause_stage": "w_cause_stage",
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """
    Initialize filter state and restore widget values.

    Streamlit drops the state of widgets not drawn in a run (e.g. while on
    another page), so missing widget keys are re-synced from the filters.
    """
    if FILTERS_KEY not in st.session_state:
        st.session_state[FILTERS_KEY] = FilterState()
        sync_widgets()
    elif any(key not in st.session_state for key in WIDGET_KEYS.values()):
        sync_widgets()


def get_filters() -> FilterState:
    """Get the current filter state."""
    init_state()
    return st.session_state[FILTERS_KEY]


def set_filter(field_name: str, value: Any) -> FilterState:
    """Apply one filter change through the reducer and store the result."""
    filters = apply_filter_change(get_filters(), field_name, value)
    st.session_state[FILTERS_KEY] = filters
    return filters


def reset_filters():
    """Reset all filters to defaults."""
    st.session_state[FILTERS_KEY] = FilterState()
    sync_widgets()


def sync_widgets():
    """Push the filter state back into the widget keys."""
    values = asdict(st.session_state[FILTERS_KEY])
    for field_name, widget_key in WIDGET_KEYS.items():
        value = values[field_name]
        st.session_state[widget_key] = list(value) if isinstance(value, tuple) else value


def on_widget_change(field_name: str):
    """Widget callback: route the widget value through the reducer."""
    set_filter(field_name, st.session_state[WIDGET_KEYS[field_name]])
    sync_widgets()
