from src.db.models import (
    UNKNOWN_WINNER,
    AssertionRecord,
    AuditProgress,
    ContestSummaryRecord,
)
from src.db.repo import Repository

__all__ = [
    "Repository",
    "AssertionRecord",
    "AuditProgress",
    "ContestSummaryRecord",
    "UNKNOWN_WINNER",
]
