"""
Tests for session state syncing between filters and sidebar widgets.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from project_hours.config import ALL_ACTIVITIES, ALL_CAUSES
from project_hours.data.filters import FilterState
from project_hours.ui import state


@pytest.fixture
def session(monkeypatch):
    """Plain dict standing in for st.session_state."""
    fake = {}
    monkeypatch.setattr(state.st, "session_state", fake)
    return fake


class TestInitState:
    """Tests for state initialisation."""

    def test_first_run_sets_defaults(self, session):
        state.init_state()

        assert session[state.FILTERS_KEY] == FilterState()
        assert session[state.WIDGET_KEYS["project_code"]] == ""
        assert session[state.WIDGET_KEYS["activities"]] == []

    def test_restores_dropped_widget_keys(self, session):
        """Widget state dropped while on another page is rebuilt from the filters."""
        session[state.FILTERS_KEY] = FilterState(project_code="P1", cause_stage="TAF")

        state.init_state()

        assert session[state.WIDGET_KEYS["project_code"]] == "P1"
        assert session[state.WIDGET_KEYS["cause_stage"]] == "TAF"

    def test_partial_widget_keys_restored(self, session):
        session[state.FILTERS_KEY] = FilterState(project_code="P1")
        session[state.WIDGET_KEYS["project_code"]] = "P1"

        state.init_state()

        assert all(key in session for key in state.WIDGET_KEYS.values())

    def test_present_widget_values_untouched(self, session):
        session[state.FILTERS_KEY] = FilterState(project_code="P1")
        for key in state.WIDGET_KEYS.values():
            session[key] = "sentinel"

        state.init_state()

        assert session[state.WIDGET_KEYS["project_code"]] == "sentinel"


class TestWidgetCallbacks:
    """Tests for routing widget changes through the reducer."""

    def test_reselecting_after_navigation_keeps_project(self, session):
        """After widget keys are rebuilt, the selector already shows the stored project."""
        session[state.FILTERS_KEY] = FilterState(project_code="P1", activities=("Config A",))
        state.init_state()

        assert session[state.WIDGET_KEYS["project_code"]] == state.get_filters().project_code

    def test_project_change_resets_widgets(self, session):
        session[state.FILTERS_KEY] = FilterState(project_code="P1", activities=("Config A",),
                                                 cause_stage="TAF")
        state.init_state()

        session[state.WIDGET_KEYS["project_code"]] = "P2"
        state.on_widget_change("project_code")

        assert state.get_filters().project_code == "P2"
        assert session[state.WIDGET_KEYS["activities"]] == [ALL_ACTIVITIES]
        assert session[state.WIDGET_KEYS["cause_stage"]] == ALL_CAUSES

    def test_reset_filters(self, session):
        session[state.FILTERS_KEY] = FilterState(project_code="P1")

        state.reset_filters()

        assert session[state.FILTERS_KEY] == FilterState()
        assert session[state.WIDGET_KEYS["project_code"]] == ""
