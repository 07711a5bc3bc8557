"""Repository pattern for database operations."""

import json
import logging
import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Any

from src.db.models import AssertionRecord, AuditProgress, ContestSummaryRecord

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_ASSERTION_COLUMNS = (
    "contest_name",
    "assertion_type",
    "winner",
    "loser",
    "margin",
    "diluted_margin",
    "difficulty",
    "assumed_continuing_json",
    "current_risk",
    "estimated_samples_to_audit",
    "optimistic_samples_to_audit",
    "two_vote_over_count",
    "one_vote_over_count",
    "other_count",
    "one_vote_under_count",
    "two_vote_under_count",
)


class Repository:
    """Database repository for assertions and contest summaries."""

    def __init__(self, db_path: str | Path = "assertions.db"):
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def connect(self, enable_wal: bool = True) -> None:
        """Open database connection and ensure schema exists.

        Args:
            enable_wal: Enable WAL mode so readers see the last committed
                replacement while a writer is active (default True)
        """
        self._conn = sqlite3.connect(self.db_path, timeout=30.0)
        self._conn.row_factory = sqlite3.Row
        if enable_wal:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA busy_timeout=30000")
        self._ensure_schema()

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Repository":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._conn

    def _ensure_schema(self) -> None:
        """Create schema if it doesn't exist."""
        schema_path = Path(__file__).parent / "schema.sql"
        schema_sql = schema_path.read_text()

        cursor = self.conn.cursor()
        cursor.executescript(schema_sql)

        # Check/set schema version
        cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
        row = cursor.fetchone()
        if row is None:
            cursor.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))

        self.conn.commit()

    # --- Replace-on-regenerate ---

    def replace_contest_results(
        self,
        contest_name: str,
        summary: ContestSummaryRecord,
        assertions: list[AssertionRecord],
    ) -> list[int]:
        """Atomically swap the stored results for a contest.

        Deletes every assertion and the summary stored for ``contest_name``
        and inserts the given summary and assertions, all in one
        transaction. On any failure the transaction is rolled back and the
        previous results stay visible.

        Returns:
            The ids assigned to the new assertions, in insertion order.
        """
        cursor = self.conn.cursor()
        try:
            cursor.execute("BEGIN IMMEDIATE")
            cursor.execute("DELETE FROM assertions WHERE contest_name = ?", (contest_name,))
            deleted = cursor.rowcount
            cursor.execute("DELETE FROM contest_summaries WHERE contest_name = ?", (contest_name,))

            new_ids = []
            for assertion in assertions:
                cursor.execute(
                    f"""
                    INSERT INTO assertions ({", ".join(_ASSERTION_COLUMNS)})
                    VALUES ({", ".join("?" for _ in _ASSERTION_COLUMNS)})
                    """,
                    _assertion_params(contest_name, assertion),
                )
                new_ids.append(cursor.lastrowid)

            cursor.execute(
                """
                INSERT INTO contest_summaries (contest_name, winner, error, warning, message)
                VALUES (?, ?, ?, ?, ?)
                """,
                (contest_name, summary.winner, summary.error, summary.warning, summary.message),
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

        logger.debug(
            f"Replaced results for contest {contest_name}: "
            f"{deleted} assertions removed, {len(new_ids)} inserted"
        )
        return new_ids  # type: ignore[return-value]

    # --- Reads ---

    def get_contest_results(
        self, contest_name: str
    ) -> tuple[ContestSummaryRecord | None, list[AssertionRecord]]:
        """Read a contest's summary and assertions from one snapshot.

        Assertions are returned in ascending id order.
        """
        cursor = self.conn.cursor()
        cursor.execute("BEGIN")
        try:
            summary = self._fetch_summary(cursor, contest_name)
            assertions = self._fetch_assertions(cursor, contest_name)
        finally:
            self.conn.commit()
        return summary, assertions

    def get_contest_summary(self, contest_name: str) -> ContestSummaryRecord | None:
        """Get the summary for a contest, if one has been stored."""
        return self._fetch_summary(self.conn.cursor(), contest_name)

    def list_assertions(self, contest_name: str) -> list[AssertionRecord]:
        """List a contest's assertions in ascending id order."""
        return self._fetch_assertions(self.conn.cursor(), contest_name)

    def get_assertion(self, assertion_id: int) -> AssertionRecord | None:
        """Get an assertion by its database ID."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM assertions WHERE id = ?", (assertion_id,))
        row = cursor.fetchone()
        if row is None:
            return None
        return _row_to_assertion(row)

    def count_assertions(self, contest_name: str | None = None) -> int:
        """Count stored assertions, optionally for one contest."""
        cursor = self.conn.cursor()
        if contest_name is None:
            cursor.execute("SELECT COUNT(*) FROM assertions")
        else:
            cursor.execute(
                "SELECT COUNT(*) FROM assertions WHERE contest_name = ?", (contest_name,)
            )
        return cursor.fetchone()[0]

    def _fetch_summary(
        self, cursor: sqlite3.Cursor, contest_name: str
    ) -> ContestSummaryRecord | None:
        cursor.execute(
            "SELECT * FROM contest_summaries WHERE contest_name = ?", (contest_name,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return ContestSummaryRecord(
            id=row["id"],
            contest_name=row["contest_name"],
            winner=row["winner"],
            error=row["error"],
            warning=row["warning"],
            message=row["message"],
            created_at=row["created_at"],
        )

    def _fetch_assertions(
        self, cursor: sqlite3.Cursor, contest_name: str
    ) -> list[AssertionRecord]:
        cursor.execute(
            "SELECT * FROM assertions WHERE contest_name = ? ORDER BY id ASC",
            (contest_name,),
        )
        return [_row_to_assertion(row) for row in cursor.fetchall()]

    # --- Audit progress ---

    def update_audit_progress(self, assertion_id: int, progress: AuditProgress) -> bool:
        """Record audit-in-progress values for one assertion.

        Returns:
            True if the assertion exists and was updated.
        """
        cursor = self.conn.cursor()
        cursor.execute(
            """
            UPDATE assertions
            SET current_risk = ?,
                estimated_samples_to_audit = ?,
                optimistic_samples_to_audit = ?,
                two_vote_over_count = ?,
                one_vote_over_count = ?,
                other_count = ?,
                one_vote_under_count = ?,
                two_vote_under_count = ?
            WHERE id = ?
            """,
            (
                str(progress.current_risk),
                progress.estimated_samples_to_audit,
                progress.optimistic_samples_to_audit,
                progress.two_vote_over_count,
                progress.one_vote_over_count,
                progress.other_count,
                progress.one_vote_under_count,
                progress.two_vote_under_count,
                assertion_id,
            ),
        )
        self.conn.commit()
        return cursor.rowcount > 0


def _assertion_params(contest_name: str, assertion: AssertionRecord) -> tuple:
    return (
        contest_name,
        assertion.assertion_type,
        assertion.winner,
        assertion.loser,
        assertion.margin,
        assertion.diluted_margin,
        assertion.difficulty,
        json.dumps(assertion.assumed_continuing),
        str(assertion.current_risk),
        assertion.estimated_samples_to_audit,
        assertion.optimistic_samples_to_audit,
        assertion.two_vote_over_count,
        assertion.one_vote_over_count,
        assertion.other_count,
        assertion.one_vote_under_count,
        assertion.two_vote_under_count,
    )


def _row_to_assertion(row: sqlite3.Row) -> AssertionRecord:
    return AssertionRecord(
        id=row["id"],
        contest_name=row["contest_name"],
        assertion_type=row["assertion_type"],
        winner=row["winner"],
        loser=row["loser"],
        margin=row["margin"],
        diluted_margin=row["diluted_margin"],
        difficulty=row["difficulty"],
        assumed_continuing=json.loads(row["assumed_continuing_json"]),
        current_risk=Decimal(row["current_risk"]),
        estimated_samples_to_audit=row["estimated_samples_to_audit"],
        optimistic_samples_to_audit=row["optimistic_samples_to_audit"],
        two_vote_over_count=row["two_vote_over_count"],
        one_vote_over_count=row["one_vote_over_count"],
        other_count=row["other_count"],
        one_vote_under_count=row["one_vote_under_count"],
        two_vote_under_count=row["two_vote_under_count"],
        created_at=row["created_at"],
    )
