"""Generate assertions for a contest and store the outcome.

Usage:
    service = GenerateAssertionsService(repo, solver=my_solver)
    response = service.generate(request)

The solver is any callable taking a GenerateAssertionsRequest and returning
a SolverResult or the raw {"Ok": ...} | {"Err": ...} mapping. Whatever it
returns, the latest call's outcome replaces what was stored for the contest.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from src.assertions.errors import RaireErrorCode, RaireServiceException
from src.assertions.schema import GenerateAssertionsRequest, GenerateAssertionsResponse
from src.assertions.solver import SolverFailure, SolverResult, SolverSuccess, parse_solver_result
from src.assertions.translator import TranslatedResult, translate_result

if TYPE_CHECKING:
    from src.db.repo import Repository

logger = logging.getLogger(__name__)

Solver = Callable[[GenerateAssertionsRequest], SolverResult | Mapping[str, Any]]


def as_solver_result(result: Any) -> SolverResult:
    """Accept a parsed solver result or the raw {"Ok": ...} | {"Err": ...} mapping.

    Raises:
        RaireServiceException: INTERNAL_ERROR for anything else.
    """
    if isinstance(result, (SolverSuccess, SolverFailure)):
        return result
    if isinstance(result, Mapping):
        return parse_solver_result(result)
    msg = (
        f"[as_solver_result] Solver returned an unrecognised result: "
        f"{type(result).__name__}."
    )
    logger.error(msg)
    raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)


class GenerateAssertionsService:
    """Runs the solver, translates its result and persists it."""

    def __init__(self, repo: Repository, solver: Solver | None = None):
        self.repo = repo
        self.solver = solver

    def generate(self, request: GenerateAssertionsRequest) -> GenerateAssertionsResponse:
        """Call the solver for a contest and record the outcome.

        Raises:
            RaireServiceException: the translated solver failure (after it
                has been stored), or INTERNAL_ERROR if no solver is
                configured or the solver itself raised.
        """
        prefix = "[generate]"
        logger.debug(
            f"{prefix} Generating assertions for contest {request.contest_name}: "
            f"candidates {request.candidates}; total auditable ballots "
            f"{request.total_auditable_ballots}; time limit {request.time_limit_seconds}s."
        )
        if self.solver is None:
            msg = f"{prefix} No solver configured."
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)

        try:
            result = self.solver(request)
        except RaireServiceException:
            raise
        except Exception as e:
            msg = f"{prefix} An exception arose when generating assertions. {e}"
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from e

        return self.record_result(request, as_solver_result(result))

    def record_result(
        self, request: GenerateAssertionsRequest, result: SolverResult
    ) -> GenerateAssertionsResponse:
        """Translate and persist a solver result.

        A solver failure is stored as a zero-assertion summary and then
        raised, so later exports see a stable explanation.
        """
        prefix = "[record_result]"
        translated = translate_result(result, request)
        self.persist(request.contest_name, translated)

        if translated.failure is not None:
            logger.error(
                f"{prefix} Solver error for contest {request.contest_name}: "
                f"{translated.failure.message}"
            )
            raise translated.failure

        logger.debug(
            f"{prefix} Stored {len(translated.assertions)} assertions for contest "
            f"{request.contest_name}; winner {translated.summary.winner}."
        )
        return GenerateAssertionsResponse(
            contest_name=request.contest_name, winner=translated.summary.winner
        )

    def persist(self, contest_name: str, translated: TranslatedResult) -> None:
        """Replace everything stored for a contest with a translated result.

        Raises:
            RaireServiceException: INTERNAL_ERROR on any storage failure; the
                previous results for the contest remain in place.
        """
        prefix = "[persist]"
        logger.debug(
            f"{prefix} (Database access) Replacing results for contest {contest_name} "
            f"with {len(translated.assertions)} assertions."
        )
        try:
            self.repo.replace_contest_results(
                contest_name, translated.summary, translated.assertions
            )
        except sqlite3.Error as e:
            msg = f"{prefix} Data access exception arose when persisting assertions. {e}"
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from e
        except Exception as e:
            msg = f"{prefix} An exception arose when persisting assertions. {e}"
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from e
