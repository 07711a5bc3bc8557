"""Database models for the assertion result store."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

# Winner recorded in a summary when generation failed.
UNKNOWN_WINNER = "Unknown"

# Risk assigned before an audit starts: maximum risk.
DEFAULT_RISK = Decimal("1.00")


@dataclass
class AssertionRecord:
    """A persisted NEB or NEN assertion for one contest.

    Candidates are carried by name. The audit-progress fields start at
    their "audit not yet started" values and are updated by the auditing
    process, never by assertion generation.
    """

    contest_name: str
    assertion_type: str  # 'NEB' or 'NEN'
    winner: str
    loser: str
    margin: int
    diluted_margin: float
    difficulty: float
    assumed_continuing: list[str] = field(default_factory=list)
    current_risk: Decimal = DEFAULT_RISK
    estimated_samples_to_audit: int = 0
    optimistic_samples_to_audit: int = 0
    two_vote_over_count: int = 0
    one_vote_over_count: int = 0
    other_count: int = 0
    one_vote_under_count: int = 0
    two_vote_under_count: int = 0
    id: int | None = None
    created_at: datetime | None = None

    @property
    def is_neb(self) -> bool:
        return self.assertion_type == "NEB"

    def describe(self) -> str:
        """Human-readable one-liner, used in log messages."""
        if self.is_neb:
            return (
                f"{self.winner} NEB {self.loser} "
                f"with diluted margin {self.diluted_margin}"
            )
        return (
            f"{self.winner} NEN {self.loser}, assuming candidates "
            f"{self.assumed_continuing} are continuing, "
            f"with diluted margin {self.diluted_margin}"
        )


@dataclass
class AuditProgress:
    """Audit-in-progress values written back by the auditing process."""

    current_risk: Decimal = DEFAULT_RISK
    estimated_samples_to_audit: int = 0
    optimistic_samples_to_audit: int = 0
    two_vote_over_count: int = 0
    one_vote_over_count: int = 0
    other_count: int = 0
    one_vote_under_count: int = 0
    two_vote_under_count: int = 0


@dataclass
class ContestSummaryRecord:
    """Outcome of the most recent generation attempt for a contest.

    An empty error means the attempt succeeded. A warning (e.g. a trim
    timeout) may accompany a success; it never accompanies an error.
    """

    contest_name: str
    winner: str = UNKNOWN_WINNER
    error: str = ""
    warning: str = ""
    message: str = ""
    id: int | None = None
    created_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return not self.error
