"""Translate solver results into records ready to persist.

Candidate indices are resolved to names here, once, against the request's
candidate list. Every invariant is checked before anything is returned:
the first violation aborts the whole translation, so a partial assertion
set never reaches the store.
"""

import logging
from dataclasses import dataclass, field

from src.assertions.errors import RaireErrorCode, RaireServiceException
from src.assertions.schema import GenerateAssertionsRequest
from src.assertions.solver import (
    AssertionKind,
    SolverAssertion,
    SolverFailure,
    SolverResult,
    SolverSuccess,
)
from src.assertions.taxonomy import exception_for
from src.db.models import UNKNOWN_WINNER, AssertionRecord, ContestSummaryRecord

logger = logging.getLogger(__name__)


class AssertionInvariantError(ValueError):
    """A raw assertion violates a data invariant."""


@dataclass
class TranslatedResult:
    """What the persistence step writes for one contest.

    Attributes:
        summary: The single summary row for the contest
        assertions: Validated assertions (empty on failure)
        failure: The translated solver failure, if generation failed
    """

    summary: ContestSummaryRecord
    assertions: list[AssertionRecord] = field(default_factory=list)
    failure: RaireServiceException | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


def translate_assertion(
    raw: SolverAssertion,
    contest_name: str,
    universe_size: int,
    candidates: list[str],
) -> AssertionRecord:
    """Translate one raw assertion, checking every invariant.

    Raises:
        AssertionInvariantError: on an invalid index, winner == loser, a
            margin outside [0, universe_size), a non-positive universe, or
            an NEN whose winner or loser is not continuing.
    """
    if universe_size <= 0:
        raise AssertionInvariantError(
            f"An assertion must have a positive universe size (got {universe_size})."
        )
    if not 0 <= raw.margin < universe_size:
        raise AssertionInvariantError(
            f"An assertion must have a non-negative margin that is less than universe "
            f"size (margin {raw.margin}, universe size {universe_size})."
        )
    if raw.winner == raw.loser:
        raise AssertionInvariantError(
            "The winner and loser of an assertion must not be the same candidate."
        )

    winner = _name_at(raw.winner, candidates)
    loser = _name_at(raw.loser, candidates)

    continuing: list[str] = []
    if raw.type == AssertionKind.NEN:
        continuing = [_name_at(i, candidates) for i in raw.continuing]
        if winner not in continuing or loser not in continuing:
            raise AssertionInvariantError(
                f"The winner ({winner}) and loser ({loser}) of an NEN assertion must also "
                f"be continuing candidates. Continuing list: {continuing}."
            )

    return AssertionRecord(
        contest_name=contest_name,
        assertion_type=raw.type.value,
        winner=winner,
        loser=loser,
        margin=raw.margin,
        diluted_margin=raw.margin / universe_size,
        difficulty=raw.difficulty,
        assumed_continuing=continuing,
    )


def translate_result(
    result: SolverResult, request: GenerateAssertionsRequest
) -> TranslatedResult:
    """Turn a solver result into a summary plus validated assertions.

    Solver failures are not raised here: they become a failure summary with
    zero assertions, and the translated exception is attached to the
    result so the caller can report it after persisting.

    Raises:
        RaireServiceException: WRONG_CANDIDATE_NAMES if the solver's
            candidate count disagrees with the request, INTERNAL_ERROR on an
            invalid winner index or any assertion invariant violation.
    """
    prefix = "[translate_result]"
    contest_name = request.contest_name
    candidates = request.candidates

    if isinstance(result, SolverFailure):
        failure = exception_for(result, candidates)
        logger.debug(
            f"{prefix} Solver failed for contest {contest_name}: "
            f"{failure.error_code.value} ({failure.message})"
        )
        summary = ContestSummaryRecord(
            contest_name=contest_name,
            winner=UNKNOWN_WINNER,
            error=failure.error_code.value,
            message=failure.message,
        )
        return TranslatedResult(summary=summary, failure=failure)

    return TranslatedResult(
        summary=_success_summary(result, request),
        assertions=_translate_assertions(result, request),
    )


def _success_summary(
    result: SolverSuccess, request: GenerateAssertionsRequest
) -> ContestSummaryRecord:
    prefix = "[translate_result]"
    candidates = request.candidates

    if request.total_auditable_ballots <= 0:
        msg = (
            f"{prefix} Total auditable ballots for contest {request.contest_name} must be "
            f"positive (got {request.total_auditable_ballots})."
        )
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)

    if result.num_candidates != len(candidates):
        msg = (
            f"{prefix} Solver reported {result.num_candidates} candidates but the request "
            f"for contest {request.contest_name} lists {len(candidates)}: {candidates}."
        )
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.WRONG_CANDIDATE_NAMES)

    if not 0 <= result.winner < len(candidates):
        msg = (
            f"{prefix} Invalid winner index {result.winner} for contest "
            f"{request.contest_name}, candidate list {candidates}."
        )
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)

    warning = ""
    if result.warning_trim_timed_out:
        warning = RaireErrorCode.TIMEOUT_TRIMMING_ASSERTIONS.value

    return ContestSummaryRecord(
        contest_name=request.contest_name,
        winner=candidates[result.winner],
        warning=warning,
    )


def _translate_assertions(
    result: SolverSuccess, request: GenerateAssertionsRequest
) -> list[AssertionRecord]:
    prefix = "[translate_assertions]"
    logger.debug(
        f"{prefix} Translating {len(result.assertions)} assertions for contest "
        f"{request.contest_name}; universe size {request.total_auditable_ballots}; "
        f"candidates {request.candidates}."
    )
    translated = []
    try:
        for raw in result.assertions:
            translated.append(
                translate_assertion(
                    raw,
                    request.contest_name,
                    request.total_auditable_ballots,
                    request.candidates,
                )
            )
    except AssertionInvariantError as e:
        msg = (
            f"{prefix} Invalid assertion from the solver for contest "
            f"{request.contest_name}: {e}"
        )
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from e

    logger.debug(f"{prefix} Translation complete.")
    return translated


def _name_at(index: int, candidates: list[str]) -> str:
    if not 0 <= index < len(candidates):
        raise AssertionInvariantError(
            f"Candidate index {index} is invalid for candidate list {candidates}."
        )
    return candidates[index]
