"""Single-key sorting of actions within their condition group."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterable

from icrollup.services.collation import compare_natural
from icrollup.services.domain import RollupRow

SORT_KEYS = ("delay", "code", "standard", "target_date", "progress")
DEFAULT_SORT_KEY = "delay"


@dataclass(frozen=True)
class SortState:
    """The one active sort column and its direction."""

    key: str = DEFAULT_SORT_KEY
    ascending: bool = True

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{self.key}'")

    def toggle(self, key: str) -> SortState:
        """Same column flips the direction; a new column starts ascending."""
        if key == self.key:
            return SortState(key=key, ascending=not self.ascending)
        return SortState(key=key, ascending=True)


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_dates_nulls_last(a: RollupRow, b: RollupRow) -> int:
    if a.target_date is None or b.target_date is None:
        return _cmp(a.target_date is None, b.target_date is None)
    return _cmp(a.target_date, b.target_date)


def _primary(a: RollupRow, b: RollupRow, key: str) -> int:
    if key == "delay":
        return _cmp(a.delay_days, b.delay_days)
    if key == "code":
        return compare_natural(a.code, b.code)
    if key == "standard":
        return compare_natural(a.classification.standard_code, b.classification.standard_code)
    if key == "target_date":
        if a.target_date is None or b.target_date is None:
            return 0
        return _cmp(a.target_date, b.target_date)
    if key == "progress":
        return _cmp(a.progress, b.progress)
    return 0


def compare_rows(a: RollupRow, b: RollupRow, sort: SortState) -> int:
    """Total order over rows of one condition group.

    NO_ACTION rows come first. Then the active key in the requested
    direction. Rows without a target date sort last under ``target_date``
    in both directions. Ties fall back to target date (for ``delay``),
    action code, then id, all ascending.
    """
    result = _cmp(not a.is_synthetic, not b.is_synthetic)
    if result:
        return result

    if sort.key == "target_date":
        nulls = _cmp(a.target_date is None, b.target_date is None)
        if nulls:
            return nulls

    result = _primary(a, b, sort.key)
    if not sort.ascending:
        result = -result
    if result:
        return result

    if sort.key == "delay":
        result = _cmp_dates_nulls_last(a, b)
        if result:
            return result

    return compare_natural(a.code, b.code) or _cmp(a.id, b.id)


def sort_rows(rows: Iterable[RollupRow], sort: SortState | None = None) -> list[RollupRow]:
    if sort is None:
        sort = SortState()
    return sorted(rows, key=functools.cmp_to_key(lambda a, b: compare_rows(a, b, sort)))
