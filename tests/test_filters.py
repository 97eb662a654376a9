"""Tests for the filter pipeline."""

from __future__ import annotations

from icrollup.services.enrichment import enrich_snapshot
from icrollup.services.filters import (
    CONTINUOUS,
    DELAYED,
    STATUS_FILTER_VALUES,
    FilterState,
    apply_filters,
)


def _ids(rows):
    return sorted(r.id for r in rows)


class TestFilterState:
    def test_defaults_pass_through(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        pre, final = apply_filters(rows, FilterState())
        assert _ids(pre) == _ids(rows)
        assert _ids(final) == _ids(rows)

    def test_toggle_component(self):
        state = FilterState().toggle_component("comp-kos")
        assert state.component_id == "comp-kos"
        assert state.toggle_component("comp-kos").component_id is None
        assert state.toggle_component("comp-rds").component_id == "comp-rds"

    def test_without_status_keeps_other_controls(self):
        state = FilterState(search="x", status=DELAYED)
        assert state.without_status() == FilterState(search="x")

    def test_status_values_include_pseudo_statuses(self):
        assert DELAYED in STATUS_FILTER_VALUES
        assert CONTINUOUS in STATUS_FILTER_VALUES
        assert "NO_ACTION" in STATUS_FILTER_VALUES


class TestStatusFilter:
    """Status filtering only narrows the final set."""

    def test_delayed_returns_only_late_action(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        pre, final = apply_filters(rows, FilterState(status=DELAYED))
        assert _ids(final) == ["a-2"]
        assert len(pre) == 3

    def test_completed(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(status="COMPLETED"))
        assert _ids(final) == ["a-1"]

    def test_no_action(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(status="NO_ACTION"))
        assert _ids(final) == ["no-action:cond-1"]

    def test_continuous_excludes_synthetic(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(status=CONTINUOUS))
        assert final == []


class TestOtherFilters:
    def test_component_filter(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        _, final = apply_filters(rows, FilterState(component_id="comp-kos"))
        assert len(final) == 3
        _, final = apply_filters(rows, FilterState(component_id="comp-other"))
        assert final == []

    def test_standard_filter(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(standard_id="std-1"))
        assert len(final) == 3

    def test_responsible_department_matches_all_units(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        _, final = apply_filters(rows, FilterState(responsible_department_id="d-1"))
        # a-1 names d-1 explicitly, a-2 is assigned to all units
        assert _ids(final) == ["a-1", "a-2"]
        _, final = apply_filters(rows, FilterState(responsible_department_id="d-2"))
        assert _ids(final) == ["a-2"]

    def test_collaborating_department(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        _, final = apply_filters(rows, FilterState(collaborating_department_id="d-2"))
        assert _ids(final) == ["a-2"]
        _, final = apply_filters(rows, FilterState(collaborating_department_id="d-1"))
        assert final == []

    def test_search_on_title_with_turkish_case(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        _, final = apply_filters(rows, FilterState(search="HASSAS GÖREVLERİN"))
        assert _ids(final) == ["a-2"]

    def test_search_on_code(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(search="kos1.2.1"))
        assert _ids(final) == ["a-1"]

    def test_search_matches_narrative_of_synthetic_row(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(search="OK"))
        assert _ids(final) == ["no-action:cond-1"]

    def test_blank_search_ignored(self, sample_snapshot, today):
        _, final = apply_filters(enrich_snapshot(sample_snapshot, today), FilterState(search="   "))
        assert len(final) == 3

    def test_pre_status_ignores_status(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        pre, final = apply_filters(rows, FilterState(search="görev", status="COMPLETED"))
        assert _ids(pre) == ["a-1", "a-2"]
        assert _ids(final) == ["a-1"]
