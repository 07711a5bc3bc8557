"""Tests for finding tied extrema over assertions."""

from decimal import Decimal

import pytest

from src.db.models import AssertionRecord
from src.export.extrema import (
    CURRENT_RISK,
    DIFFICULTY,
    DILUTED_MARGIN,
    ESTIMATED_SAMPLES,
    MARGIN,
    OPTIMISTIC_SAMPLES,
    TRACKED_STATISTICS,
    ExtremumType,
    compare_with_tolerance,
    extremum_value,
    find_extrema,
    find_extremum,
)


def with_margins(margins):
    return [
        AssertionRecord(
            id=i + 1,
            contest_name="Mayor",
            assertion_type="NEB",
            winner="Alice",
            loser="Bob",
            margin=m,
            diluted_margin=m / 1000,
            difficulty=1.0,
        )
        for i, m in enumerate(margins)
    ]


class TestFindExtrema:
    def test_statistics_in_order(self, ties_assertions):
        results = find_extrema(ties_assertions)
        assert [r.statistic_name for r in results] == [
            MARGIN,
            DILUTED_MARGIN,
            DIFFICULTY,
            CURRENT_RISK,
            OPTIMISTIC_SAMPLES,
            ESTIMATED_SAMPLES,
        ]
        assert [r.type for r in results] == [
            ExtremumType.MIN,
            ExtremumType.MIN,
            ExtremumType.MAX,
            ExtremumType.MAX,
            ExtremumType.MAX,
            ExtremumType.MAX,
        ]

    def test_ties_contest(self, ties_assertions):
        results = {r.statistic_name: r for r in find_extrema(ties_assertions)}

        assert results[MARGIN].value == 220
        assert results[MARGIN].indices == [2, 5, 6]
        assert results[DILUTED_MARGIN].value == pytest.approx(0.22)
        assert results[DILUTED_MARGIN].indices == [2, 5, 6]
        assert results[DIFFICULTY].value == pytest.approx(3.1)
        assert results[DIFFICULTY].indices == [3]
        assert results[CURRENT_RISK].value == Decimal("0.23")
        assert results[CURRENT_RISK].indices == [2, 3]
        assert results[OPTIMISTIC_SAMPLES].value == 910
        assert results[OPTIMISTIC_SAMPLES].indices == [4]
        assert results[ESTIMATED_SAMPLES].value == 430
        assert results[ESTIMATED_SAMPLES].indices == [2, 5]

    def test_positions_not_ids(self):
        assertions = with_margins([320, 220, 220, 420, 220, 220])
        for a in assertions:
            a.id += 100
        result = find_extremum(assertions, TRACKED_STATISTICS[0])
        assert result.value == 220
        assert result.indices == [2, 3, 5, 6]

    def test_single_assertion(self):
        results = find_extrema(with_margins([50]))
        assert all(r.indices == [1] for r in results)
        assert extremum_value(results, MARGIN) == 50

    def test_every_position_ties(self):
        result = find_extremum(with_margins([7, 7, 7]), TRACKED_STATISTICS[0])
        assert result.indices == [1, 2, 3]

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            find_extrema([])

    def test_float_values_within_tolerance_tie(self):
        assertions = with_margins([100, 100])
        assertions[0].difficulty = 2.0
        assertions[1].difficulty = 2.0 + 1e-9
        result = find_extremum(assertions, TRACKED_STATISTICS[2])
        assert result.indices == [1, 2]

    def test_decimal_risk_compared_exactly(self):
        assertions = with_margins([100, 100])
        assertions[0].current_risk = Decimal("0.5")
        assertions[1].current_risk = Decimal("0.50")
        result = find_extremum(assertions, TRACKED_STATISTICS[3])
        assert result.indices == [1, 2]


class TestComparators:
    def test_tolerance(self):
        assert compare_with_tolerance(0.1 + 0.2, 0.3) == 0
        assert compare_with_tolerance(0.3, 0.31) == -1
        assert compare_with_tolerance(0.31, 0.3) == 1

    def test_unknown_statistic(self, ties_assertions):
        with pytest.raises(KeyError):
            extremum_value(find_extrema(ties_assertions), "Nope")
