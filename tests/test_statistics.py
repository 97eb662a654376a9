"""Tests for global and per-component counters."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

from icrollup.services.domain import ActionRecord, ActionStatus, Component, Condition, Standard
from icrollup.services.enrichment import enrich_snapshot
from icrollup.services.filters import FilterState, apply_filters
from icrollup.services.statistics import compute_component_stats, compute_global_stats


class TestGlobalStats:
    """Counters over the pre-status working set."""

    def test_sample_scenario(self, sample_snapshot, today):
        stats = compute_global_stats(enrich_snapshot(sample_snapshot, today))
        assert stats["total"] == 2
        assert stats["completed"] == 1
        assert stats["completed_pct"] == 50.0
        assert stats["in_progress"] == 1
        assert stats["in_progress_pct"] == 50.0
        assert stats["delayed"] == 1
        assert stats["no_action"] == 1
        assert stats["cancelled"] == 0

    def test_empty(self):
        stats = compute_global_stats([])
        assert stats["total"] == 0
        assert stats["completed_pct"] == 0.0

    def test_cancelled_in_denominator(self, sample_snapshot, today):
        cancelled = ActionRecord(
            id="a-3", code="KOS1.2.3", title="İptal", condition_id="cond-2", status=ActionStatus.CANCELLED,
        )
        snapshot = replace(sample_snapshot, actions=sample_snapshot.actions + (cancelled,))
        stats = compute_global_stats(enrich_snapshot(snapshot, today))
        assert stats["total"] == 3
        assert stats["cancelled"] == 1
        assert stats["completed_pct"] == 33.3
        named = stats["completed"] + stats["in_progress"] + stats["not_started"] + stats["ongoing"]
        assert named + stats["cancelled"] == stats["total"]

    def test_continuous_and_ongoing(self, sample_snapshot, today):
        ongoing = ActionRecord(
            id="a-4", code="KOS1.2.4", title="Sürekli", condition_id="cond-2",
            status=ActionStatus.ONGOING, is_continuous=True, target_date=today - timedelta(days=40),
        )
        snapshot = replace(sample_snapshot, actions=sample_snapshot.actions + (ongoing,))
        stats = compute_global_stats(enrich_snapshot(snapshot, today))
        assert stats["ongoing"] == 1
        assert stats["continuous"] == 1
        # Ongoing actions never count as delayed
        assert stats["delayed"] == 1


class TestComponentStats:
    def _snapshot(self, sample_snapshot):
        rds = Component(id="comp-rds", code="RDS", name="Risk Değerlendirme")
        std = Standard(id="std-2", code="RDS-1", name="Planlama", component_id="comp-rds")
        cond = Condition(
            id="cond-3", code="RDS1.1", description="Plan hazırlanmalı.", standard_id="std-2",
            provides_reasonable_assurance=True,
        )
        action = ActionRecord(id="a-5", code="RDS1.1.1", title="Plan", condition_id="cond-3")
        return replace(
            sample_snapshot,
            components=sample_snapshot.components + (rds,),
            standards=sample_snapshot.standards + (std,),
            conditions=sample_snapshot.conditions + (cond,),
            actions=sample_snapshot.actions + (action,),
        )

    def test_one_entry_per_component_in_order(self, sample_snapshot, today):
        rows = enrich_snapshot(self._snapshot(sample_snapshot), today)
        stats = compute_component_stats(rows, rows)
        assert [s["code"] for s in stats] == ["KOS", "RDS"]
        kos = stats[0]
        assert kos["standard_count"] == 1
        assert kos["condition_count"] == 2
        assert kos["action_count"] == 2
        assert kos["in_progress"] == 1
        assert kos["delayed"] == 1
        assert stats[1]["not_started"] == 1

    def test_selected_flag(self, sample_snapshot, today):
        rows = enrich_snapshot(self._snapshot(sample_snapshot), today)
        stats = compute_component_stats(rows, rows, "comp-rds")
        assert [s["selected"] for s in stats] == [False, True]

    def test_filtered_working_set_keeps_all_cards(self, sample_snapshot, today):
        rows = enrich_snapshot(self._snapshot(sample_snapshot), today)
        _, working = apply_filters(rows, FilterState(search="RDS1"))
        stats = compute_component_stats(rows, working)
        assert [s["code"] for s in stats] == ["KOS", "RDS"]
        assert stats[0]["action_count"] == 0
        assert stats[1]["action_count"] == 1

    def test_reasonable_assurance_counts_synthetic_rows(self, sample_snapshot, today):
        condition = replace(sample_snapshot.conditions[0], provides_reasonable_assurance=True)
        snapshot = replace(sample_snapshot, conditions=(condition,) + sample_snapshot.conditions[1:])
        rows = enrich_snapshot(snapshot, today)
        stats = compute_component_stats(rows, rows)
        assert stats[0]["reasonable_assurance_count"] == 1
