"""Tied extrema over a contest's stored assertions.

For each tracked statistic we report the extreme value (min or max) and the
1-based positions of every assertion attaining it. Positions refer to the
list as given, which must already be sorted by assertion id.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from src.db.models import AssertionRecord

# Tolerance when comparing float statistics.
EPS = 0.0000001

# Statistic names, as printed in the CSV extrema table.
MARGIN = "Margin"
DILUTED_MARGIN = "Diluted margin"
DIFFICULTY = "Raire difficulty"
CURRENT_RISK = "Current risk"
OPTIMISTIC_SAMPLES = "Optimistic samples to audit"
ESTIMATED_SAMPLES = "Estimated samples to audit"


class ExtremumType(str, Enum):
    MAX = "max"
    MIN = "min"


def compare_exact(x: Any, y: Any) -> int:
    """Three-way comparison for ints and fixed-scale decimals."""
    if x == y:
        return 0
    return -1 if x < y else 1


def compare_with_tolerance(x: float, y: float) -> int:
    """Three-way comparison treating values within EPS as equal."""
    if abs(x - y) < EPS:
        return 0
    return -1 if x < y else 1


@dataclass(frozen=True)
class TrackedStatistic:
    """A statistic to find the extremum of, and how to compare it."""

    name: str
    type: ExtremumType
    getter: Callable[[AssertionRecord], Any]
    comparator: Callable[[Any, Any], int]


TRACKED_STATISTICS: list[TrackedStatistic] = [
    TrackedStatistic(MARGIN, ExtremumType.MIN, lambda a: a.margin, compare_exact),
    TrackedStatistic(
        DILUTED_MARGIN, ExtremumType.MIN, lambda a: a.diluted_margin, compare_with_tolerance
    ),
    TrackedStatistic(
        DIFFICULTY, ExtremumType.MAX, lambda a: a.difficulty, compare_with_tolerance
    ),
    TrackedStatistic(
        CURRENT_RISK, ExtremumType.MAX, lambda a: Decimal(a.current_risk), compare_exact
    ),
    TrackedStatistic(
        OPTIMISTIC_SAMPLES,
        ExtremumType.MAX,
        lambda a: a.optimistic_samples_to_audit,
        compare_exact,
    ),
    TrackedStatistic(
        ESTIMATED_SAMPLES,
        ExtremumType.MAX,
        lambda a: a.estimated_samples_to_audit,
        compare_exact,
    ),
]


@dataclass
class ExtremumResult:
    """The extreme value of one statistic and the positions attaining it.

    Attributes:
        statistic_name: e.g. "Margin"
        type: MAX or MIN
        value: The extreme value
        indices: 1-based positions, ascending
    """

    statistic_name: str
    type: ExtremumType
    value: Any
    indices: list[int] = field(default_factory=list)


def find_extrema(
    sorted_assertions: list[AssertionRecord],
    statistics: list[TrackedStatistic] | None = None,
) -> list[ExtremumResult]:
    """Find every tracked extremum in one scan.

    Args:
        sorted_assertions: Assertions sorted ascending by id; must be non-empty
        statistics: Statistics to track (default: TRACKED_STATISTICS)

    Returns:
        One ExtremumResult per statistic, in the order given.

    Raises:
        ValueError: if the list is empty. Callers must have reported the
            missing assertions before getting here.
    """
    if not sorted_assertions:
        raise ValueError("Cannot find extrema of an empty list of assertions.")
    if statistics is None:
        statistics = TRACKED_STATISTICS

    first = sorted_assertions[0]
    results = [
        ExtremumResult(s.name, s.type, s.getter(first), [1]) for s in statistics
    ]

    for position, assertion in enumerate(sorted_assertions[1:], start=2):
        for stat, result in zip(statistics, results):
            value = stat.getter(assertion)
            comparison = stat.comparator(value, result.value)
            if comparison == 0:
                result.indices.append(position)
            elif (stat.type == ExtremumType.MAX and comparison > 0) or (
                stat.type == ExtremumType.MIN and comparison < 0
            ):
                result.value = value
                result.indices = [position]

    return results


def find_extremum(
    sorted_assertions: list[AssertionRecord], statistic: TrackedStatistic
) -> ExtremumResult:
    """Find the extremum of a single statistic."""
    return find_extrema(sorted_assertions, [statistic])[0]


def extremum_value(results: list[ExtremumResult], statistic_name: str) -> Any:
    """Look up the extreme value of a named statistic."""
    for result in results:
        if result.statistic_name == statistic_name:
            return result.value
    raise KeyError(statistic_name)
