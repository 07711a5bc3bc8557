"""Render a contest's stored assertions as JSON-ready data or CSV text."""

from typing import Any

from src.assertions.schema import GetAssertionsRequest
from src.db.models import AssertionRecord, ContestSummaryRecord
from src.export.csv_utils import (
    escape_csv,
    escape_then_join_then_escape,
    int_list_to_string,
)
from src.export.extrema import DIFFICULTY, MARGIN, ExtremumResult, extremum_value

# Metadata keys of the structured report.
CONTEST = "contest"
RISK_LIMIT = "risk_limit"
CANDIDATES = "candidates"
STATUS_RISK = "risk"

CONTEST_NAME_HEADER = "Contest name"
CANDIDATES_HEADER = "Candidates"
EXTREMUM_HEADERS = ["Extreme item", "Value", "Assertion IDs"]
CSV_HEADERS = [
    "ID",
    "Type",
    "Winner",
    "Loser",
    "Assumed continuing",
    "Difficulty",
    "Margin",
    "Diluted margin",
    "Risk",
    "Estimated samples to audit",
    "Optimistic samples to audit",
    "Two vote over count",
    "One vote over count",
    "Other discrepancy count",
    "One vote under count",
    "Two vote under count",
]


# =============================================================================
# Structured (JSON) report
# =============================================================================


def assertion_to_dict(assertion: AssertionRecord) -> dict[str, Any]:
    """Structured form of one assertion, candidates by name."""
    body: dict[str, Any] = {
        "type": assertion.assertion_type,
        "winner": assertion.winner,
        "loser": assertion.loser,
    }
    if not assertion.is_neb:
        body["continuing"] = list(assertion.assumed_continuing)

    return {
        "assertion": body,
        "difficulty": assertion.difficulty,
        "margin": assertion.margin,
        "diluted_margin": assertion.diluted_margin,
        "status": {
            STATUS_RISK: float(assertion.current_risk),
            "estimated_samples_to_audit": assertion.estimated_samples_to_audit,
            "optimistic_samples_to_audit": assertion.optimistic_samples_to_audit,
            "two_vote_over_count": assertion.two_vote_over_count,
            "one_vote_over_count": assertion.one_vote_over_count,
            "other_count": assertion.other_count,
            "one_vote_under_count": assertion.one_vote_under_count,
            "two_vote_under_count": assertion.two_vote_under_count,
        },
    }


def render_json(
    request: GetAssertionsRequest,
    summary: ContestSummaryRecord,
    sorted_assertions: list[AssertionRecord],
    extrema: list[ExtremumResult],
) -> dict[str, Any]:
    """Build the structured report: metadata plus the assertion list.

    Overall difficulty is the maximum assertion difficulty and overall
    margin the minimum assertion margin. Solver timing is not reported.
    """
    return {
        "metadata": {
            CONTEST: request.contest_name,
            RISK_LIMIT: float(request.risk_limit),
            CANDIDATES: list(request.candidates),
        },
        "solution": {
            "Ok": {
                "assertions": [assertion_to_dict(a) for a in sorted_assertions],
                "difficulty": extremum_value(extrema, DIFFICULTY),
                "margin": extremum_value(extrema, MARGIN),
                "winner": summary.winner,
                "num_candidates": len(request.candidates),
            }
        },
    }


# =============================================================================
# Spreadsheet (CSV) report
# =============================================================================


def _join_row(cells: list[str]) -> str:
    return ",".join(cells)


def make_preface(request: GetAssertionsRequest) -> str:
    """Contest name and candidate lines, followed by a blank line."""
    return (
        _join_row([CONTEST_NAME_HEADER, escape_csv(request.contest_name)])
        + "\n"
        + _join_row([CANDIDATES_HEADER, escape_then_join_then_escape(request.candidates)])
        + "\n\n"
    )


def extremum_to_csv_row(result: ExtremumResult) -> str:
    return _join_row(
        [escape_csv(result.statistic_name), str(result.value), int_list_to_string(result.indices)]
    )


def make_extrema_table(extrema: list[ExtremumResult]) -> str:
    rows = [_join_row(EXTREMUM_HEADERS)]
    rows.extend(extremum_to_csv_row(r) for r in extrema)
    return "\n".join(rows) + "\n"


def assertion_to_csv_cells(assertion: AssertionRecord) -> list[str]:
    """The CSV cells of one assertion, excluding the running index."""
    return [
        assertion.assertion_type,
        escape_csv(assertion.winner),
        escape_csv(assertion.loser),
        escape_then_join_then_escape(assertion.assumed_continuing),
        str(assertion.difficulty),
        str(assertion.margin),
        str(assertion.diluted_margin),
        str(assertion.current_risk),
        str(assertion.estimated_samples_to_audit),
        str(assertion.optimistic_samples_to_audit),
        str(assertion.two_vote_over_count),
        str(assertion.one_vote_over_count),
        str(assertion.other_count),
        str(assertion.one_vote_under_count),
        str(assertion.two_vote_under_count),
    ]


def make_contents(sorted_assertions: list[AssertionRecord]) -> str:
    """One row per assertion, numbered from 1 (not the database id)."""
    rows = [
        _join_row([str(index)] + assertion_to_csv_cells(a))
        for index, a in enumerate(sorted_assertions, start=1)
    ]
    return "\n".join(rows) + "\n"


def render_csv(
    request: GetAssertionsRequest,
    sorted_assertions: list[AssertionRecord],
    extrema: list[ExtremumResult],
) -> str:
    """Build the CSV report.

    Layout: preface, extrema table, blank line, column headers, data rows.
    """
    return (
        make_preface(request)
        + make_extrema_table(extrema)
        + "\n"
        + _join_row(CSV_HEADERS)
        + "\n"
        + make_contents(sorted_assertions)
    )
