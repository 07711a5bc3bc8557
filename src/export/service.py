"""Retrieve a contest's stored assertions and export them.

Both export formats share one retrieval path, which refuses to guess when
the stored state is inconsistent: no summary, a failed summary, a success
summary with no assertions, or a candidate list that does not match the
stored names are all errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from src.assertions.errors import RaireErrorCode, RaireServiceException
from src.assertions.schema import GetAssertionsRequest
from src.db.models import AssertionRecord, ContestSummaryRecord
from src.export.extrema import find_extrema
from src.export.renderers import render_csv, render_json

if TYPE_CHECKING:
    from src.db.repo import Repository

logger = logging.getLogger(__name__)


class GetAssertionsService:
    """Exports stored assertions as a structured report or CSV."""

    def __init__(self, repo: Repository):
        self.repo = repo

    def load(
        self, request: GetAssertionsRequest
    ) -> tuple[ContestSummaryRecord, list[AssertionRecord]]:
        """Load the summary and id-sorted assertions for a contest.

        Raises:
            RaireServiceException: NO_ASSERTIONS_PRESENT if there is no
                summary, the summary records a failure, or there are no
                assertions; WRONG_CANDIDATE_NAMES if the stored names are not
                all in the request's candidate list.
        """
        prefix = "[load]"
        contest_name = request.contest_name
        logger.debug(
            f"{prefix} (Database access) Retrieve summary and assertions for contest "
            f"{contest_name}."
        )
        summary, assertions = self.repo.get_contest_results(contest_name)

        if summary is None:
            msg = f"No assertion generation summary for contest {contest_name}."
            logger.error(f"{prefix} {msg}")
            raise RaireServiceException(msg, RaireErrorCode.NO_ASSERTIONS_PRESENT)

        if not summary.succeeded:
            msg = (
                f"No assertions generated for contest {contest_name}. "
                f"{summary.error} {summary.message} {summary.warning}".rstrip()
            )
            logger.error(f"{prefix} {msg}")
            raise RaireServiceException(msg, RaireErrorCode.NO_ASSERTIONS_PRESENT)

        if not assertions:
            msg = f"No assertions have been generated for the contest {contest_name}."
            logger.error(f"{prefix} {msg}")
            raise RaireServiceException(msg, RaireErrorCode.NO_ASSERTIONS_PRESENT)

        candidates = set(request.candidates)
        if summary.winner not in candidates:
            msg = (
                f"Inconsistent winner and candidate list. Winner: {summary.winner}, "
                f"Candidates {request.candidates}"
            )
            logger.error(f"{prefix} {msg}")
            raise RaireServiceException(msg, RaireErrorCode.WRONG_CANDIDATE_NAMES)

        for a in assertions:
            names = {a.winner, a.loser, *a.assumed_continuing}
            if not names <= candidates:
                msg = (
                    f"Candidate list {request.candidates} is inconsistent with assertion "
                    f"{a.describe()}."
                )
                logger.error(f"{prefix} {msg}")
                raise RaireServiceException(msg, RaireErrorCode.WRONG_CANDIDATE_NAMES)

        # The store already orders by id; sort again so the export order never
        # depends on it.
        return summary, sorted(assertions, key=lambda a: a.id)

    def get_json(self, request: GetAssertionsRequest) -> dict[str, Any]:
        """Structured report for a contest."""
        prefix = "[get_json]"
        try:
            summary, assertions = self.load(request)
            extrema = find_extrema(assertions)
            report = render_json(request, summary, assertions, extrema)
            logger.debug(
                f"{prefix} {len(assertions)} assertions exported for contest "
                f"{request.contest_name}."
            )
            return report
        except RaireServiceException as e:
            logger.error(f"{prefix} RaireServiceException caught. Passing to caller: {e}")
            raise
        except Exception as e:
            logger.error(f"{prefix} Generic exception caught. Passing to caller: {e}")
            raise RaireServiceException(str(e), RaireErrorCode.INTERNAL_ERROR) from e

    def get_csv(self, request: GetAssertionsRequest) -> str:
        """CSV report for a contest."""
        prefix = "[get_csv]"
        try:
            _, assertions = self.load(request)
            extrema = find_extrema(assertions)
            csv = render_csv(request, assertions, extrema)
            logger.debug(
                f"{prefix} {len(assertions)} assertions translated to csv for contest "
                f"{request.contest_name}."
            )
            return csv
        except RaireServiceException as e:
            logger.error(f"{prefix} RaireServiceException caught. Passing to caller: {e}")
            raise
        except Exception as e:
            logger.error(f"{prefix} Generic exception caught. Passing to caller: {e}")
            raise RaireServiceException(str(e), RaireErrorCode.INTERNAL_ERROR) from e
