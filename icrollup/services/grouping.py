"""Three-level rollup tree: component → standard → condition → actions."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterable

from icrollup.services.collation import compare_natural
from icrollup.services.domain import RollupRow
from icrollup.services.sorting import SortState, sort_rows

OTHER_KEY = "other"
OTHER_LABEL = "Diğer"

# Canonical order of the public internal-control components
COMPONENT_ORDER = {
    "KOS": 0,  # Kontrol Ortamı Standartları
    "RDS": 1,  # Risk Değerlendirme Standartları
    "KFS": 2,  # Kontrol Faaliyetleri Standartları
    "BIS": 3,  # Bilgi ve İletişim Standartları
    "IS": 4,   # İzleme Standartları
}


@dataclass(frozen=True)
class ConditionGroup:
    key: str
    code: str | None
    description: str
    current_situation: str | None
    provides_reasonable_assurance: bool
    rows: tuple[RollupRow, ...]


@dataclass(frozen=True)
class StandardGroup:
    key: str
    code: str | None
    name: str
    conditions: tuple[ConditionGroup, ...]

    @property
    def rows(self) -> list[RollupRow]:
        return [row for condition in self.conditions for row in condition.rows]


@dataclass(frozen=True)
class ComponentGroup:
    key: str
    id: str | None
    code: str | None
    name: str
    standards: tuple[StandardGroup, ...]

    @property
    def rows(self) -> list[RollupRow]:
        return [row for standard in self.standards for row in standard.rows]


def compare_component_codes(a: str, b: str) -> int:
    """Known components by canonical ordinal, unknown ones after them in
    Turkish alphabetical order, the ``other`` bucket last."""
    def rank(code: str) -> int:
        if code == OTHER_KEY:
            return 2
        return 0 if code in COMPONENT_ORDER else 1

    rank_a, rank_b = rank(a), rank(b)
    if rank_a != rank_b:
        return -1 if rank_a < rank_b else 1
    if rank_a == 0:
        return COMPONENT_ORDER[a] - COMPONENT_ORDER[b]
    return compare_natural(a, b)


def compare_codes_other_last(a: str, b: str) -> int:
    if (a == OTHER_KEY) != (b == OTHER_KEY):
        return 1 if a == OTHER_KEY else -1
    return compare_natural(a, b)


def _key(code: str | None) -> str:
    return code if code else OTHER_KEY


def build_tree(rows: Iterable[RollupRow], sort: SortState | None = None) -> list[ComponentGroup]:
    """Group rows into the ordered rollup tree.

    Every row lands in exactly one leaf; rows whose classification could
    not be resolved go into ``other`` buckets instead of being dropped.
    """
    buckets: dict[str, dict[str, dict[str, list[RollupRow]]]] = {}
    first_seen: dict[tuple[str, ...], RollupRow] = {}

    for row in rows:
        cls = row.classification
        path = (_key(cls.component_code), _key(cls.standard_code), _key(cls.condition_code))
        buckets.setdefault(path[0], {}).setdefault(path[1], {}).setdefault(path[2], []).append(row)
        first_seen.setdefault(path[:1], row)
        first_seen.setdefault(path[:2], row)
        first_seen.setdefault(path, row)

    tree: list[ComponentGroup] = []
    for component_key in sorted(buckets, key=functools.cmp_to_key(compare_component_codes)):
        standards: list[StandardGroup] = []
        by_standard = buckets[component_key]

        for standard_key in sorted(by_standard, key=functools.cmp_to_key(compare_codes_other_last)):
            conditions: list[ConditionGroup] = []
            by_condition = by_standard[standard_key]

            for condition_key in sorted(by_condition, key=functools.cmp_to_key(compare_codes_other_last)):
                cls = first_seen[(component_key, standard_key, condition_key)].classification
                conditions.append(ConditionGroup(
                    key=condition_key,
                    code=cls.condition_code,
                    description=cls.condition_description or OTHER_LABEL,
                    current_situation=cls.current_situation,
                    provides_reasonable_assurance=cls.provides_reasonable_assurance,
                    rows=tuple(sort_rows(by_condition[condition_key], sort)),
                ))

            cls = first_seen[(component_key, standard_key)].classification
            standards.append(StandardGroup(
                key=standard_key,
                code=cls.standard_code,
                name=cls.standard_name or OTHER_LABEL,
                conditions=tuple(conditions),
            ))

        cls = first_seen[(component_key,)].classification
        tree.append(ComponentGroup(
            key=component_key,
            id=cls.component_id,
            code=cls.component_code,
            name=cls.component_name or OTHER_LABEL,
            standards=tuple(standards),
        ))

    return tree
