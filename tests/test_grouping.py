"""Tests for the component → standard → condition tree."""

from __future__ import annotations

import functools

from icrollup.services.domain import ActionRecord, Classification, RealAction, UnaddressedCondition
from icrollup.services.enrichment import enrich_snapshot
from icrollup.services.grouping import (
    OTHER_KEY,
    OTHER_LABEL,
    build_tree,
    compare_component_codes,
)


def _row(id, component=None, standard=None, condition=None):
    cls = Classification(
        condition_id=condition,
        condition_code=condition,
        condition_description=f"desc {condition}" if condition else None,
        standard_code=standard,
        standard_name=f"name {standard}" if standard else None,
        component_id=f"id-{component}" if component else None,
        component_code=component,
        component_name=f"name {component}" if component else None,
    )
    return RealAction(record=ActionRecord(id=id, code=id, title=id, condition_id=condition), classification=cls)


class TestComponentOrder:
    def test_canonical_order(self):
        codes = ["IS", "KOS", "BIS", "RDS", "KFS"]
        ordered = sorted(codes, key=functools.cmp_to_key(compare_component_codes))
        assert ordered == ["KOS", "RDS", "KFS", "BIS", "IS"]

    def test_unknown_after_known_alphabetically(self):
        codes = ["ZZZ", "ÇEV", "KOS", "CEV", OTHER_KEY]
        ordered = sorted(codes, key=functools.cmp_to_key(compare_component_codes))
        assert ordered == ["KOS", "CEV", "ÇEV", "ZZZ", OTHER_KEY]


class TestBuildTree:
    """Grouping is exhaustive and ordered at every level."""

    def test_sample_tree_shape(self, sample_snapshot, today):
        tree = build_tree(enrich_snapshot(sample_snapshot, today))
        assert [c.code for c in tree] == ["KOS"]
        standard = tree[0].standards[0]
        assert standard.code == "KOS-1"
        assert [c.code for c in standard.conditions] == ["KOS1.1", "KOS1.2"]
        c1, c2 = standard.conditions
        assert len(c1.rows) == 1 and isinstance(c1.rows[0], UnaddressedCondition)
        assert c1.current_situation == "ok"
        assert [r.id for r in c2.rows] == ["a-1", "a-2"]

    def test_every_row_in_exactly_one_leaf(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        tree = build_tree(rows)
        leaf_ids = [r.id for c in tree for r in c.rows]
        assert sorted(leaf_ids) == sorted(r.id for r in rows)
        assert len(leaf_ids) == len(set(leaf_ids))

    def test_missing_classification_goes_to_other(self):
        rows = [_row("a", "KOS", "KOS-1", "C1"), _row("b")]
        tree = build_tree(rows)
        assert [c.key for c in tree] == ["KOS", OTHER_KEY]
        other = tree[-1]
        assert other.name == OTHER_LABEL
        assert other.standards[0].key == OTHER_KEY
        assert other.standards[0].conditions[0].rows[0].id == "b"

    def test_standards_numeric_order(self):
        rows = [_row("a", "KOS", "KOS-10", "C1"), _row("b", "KOS", "KOS-2", "C1"), _row("c", "KOS", "KOS-1", "C1")]
        tree = build_tree(rows)
        assert [s.code for s in tree[0].standards] == ["KOS-1", "KOS-2", "KOS-10"]

    def test_other_standard_last_within_component(self):
        rows = [_row("a", "KOS", None, None), _row("b", "KOS", "KOS-3", "C1")]
        tree = build_tree(rows)
        assert [s.key for s in tree[0].standards] == ["KOS-3", OTHER_KEY]

    def test_conditions_numeric_order(self):
        rows = [_row("a", "RDS", "RDS-1", "RDS1.10"), _row("b", "RDS", "RDS-1", "RDS1.9")]
        tree = build_tree(rows)
        assert [c.code for c in tree[0].standards[0].conditions] == ["RDS1.9", "RDS1.10"]

    def test_deterministic(self, sample_snapshot, today):
        rows = enrich_snapshot(sample_snapshot, today)
        assert build_tree(rows) == build_tree(list(reversed(rows)))

    def test_empty(self):
        assert build_tree([]) == []
