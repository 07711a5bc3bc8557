"""Shared data for export tests: a contest with tied extrema."""

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from src.assertions.schema import GetAssertionsRequest
from src.db.models import AssertionRecord, ContestSummaryRecord
from src.db.repo import Repository

CONTEST = "Multi-winner Ties Contest"
CANDIDATES = ["Alice", "Bob", "Chuan", "Diego"]
UNIVERSE = 1000

# (type, winner, loser, continuing, difficulty, margin, risk, estimated, optimistic)
TIES_ROWS = [
    ("NEB", "Alice", "Bob", [], 2.1, 320, "0.04", 110, 100),
    ("NEB", "Chuan", "Bob", [], 1.1, 220, "0.23", 430, 200),
    ("NEB", "Diego", "Chuan", [], 3.1, 320, "0.23", 50, 110),
    ("NEN", "Alice", "Bob", ["Alice", "Bob", "Chuan"], 2.0, 420, "0.04", 320, 910),
    ("NEN", "Alice", "Diego", ["Alice", "Diego"], 1.1, 220, "0.07", 430, 210),
    ("NEN", "Alice", "Bob", ["Alice", "Bob", "Diego"], 1.2, 220, "0.04", 400, 110),
]


def make_assertion(row, assertion_id=None, contest=CONTEST):
    kind, winner, loser, continuing, difficulty, margin, risk, estimated, optimistic = row
    return AssertionRecord(
        id=assertion_id,
        contest_name=contest,
        assertion_type=kind,
        winner=winner,
        loser=loser,
        margin=margin,
        diluted_margin=margin / UNIVERSE,
        difficulty=difficulty,
        assumed_continuing=list(continuing),
        current_risk=Decimal(risk),
        estimated_samples_to_audit=estimated,
        optimistic_samples_to_audit=optimistic,
    )


@pytest.fixture
def ties_assertions():
    """The ties contest's assertions, ids deliberately not starting at 1."""
    return [make_assertion(row, assertion_id=40 + i) for i, row in enumerate(TIES_ROWS)]


@pytest.fixture
def ties_request():
    return GetAssertionsRequest(
        contest_name=CONTEST, candidates=CANDIDATES, risk_limit=Decimal("0.05")
    )


@pytest.fixture
def ties_summary():
    return ContestSummaryRecord(contest_name=CONTEST, winner="Alice")


@pytest.fixture
def repo():
    """Create a temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    repo = Repository(db_path)
    repo.connect()
    yield repo
    repo.close()
    db_path.unlink()


@pytest.fixture
def ties_repo(repo, ties_summary):
    """A repository holding the ties contest."""
    assertions = [make_assertion(row) for row in TIES_ROWS]
    repo.replace_contest_results(CONTEST, ties_summary, assertions)
    return repo
