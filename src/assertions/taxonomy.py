"""Translation of solver failures into the service's error vocabulary.

Every SolverErrorKind maps to exactly one RaireErrorCode. The mapping is
checked when this module is imported, so a new kind without a mapping
fails loudly instead of defaulting to INTERNAL_ERROR.
"""

import logging

from src.assertions.errors import RaireErrorCode, RaireServiceException
from src.assertions.solver import SolverErrorKind, SolverFailure

logger = logging.getLogger(__name__)

ERROR_CODES: dict[SolverErrorKind, RaireErrorCode] = {
    SolverErrorKind.TIED_WINNERS: RaireErrorCode.TIED_WINNERS,
    SolverErrorKind.TIMEOUT_FINDING_ASSERTIONS: RaireErrorCode.TIMEOUT_FINDING_ASSERTIONS,
    SolverErrorKind.TIMEOUT_TRIMMING_ASSERTIONS: RaireErrorCode.TIMEOUT_TRIMMING_ASSERTIONS,
    SolverErrorKind.TIMEOUT_CHECKING_WINNER: RaireErrorCode.TIMEOUT_CHECKING_WINNER,
    SolverErrorKind.COULD_NOT_RULE_OUT: RaireErrorCode.COULD_NOT_RULE_OUT_ALTERNATIVE,
    # Right number of candidates, wrong names versus the stored ballots.
    SolverErrorKind.INVALID_CANDIDATE_NUMBER: RaireErrorCode.WRONG_CANDIDATE_NAMES,
    # Internal coding errors: these should be caught before reaching the solver.
    SolverErrorKind.INVALID_TIMEOUT: RaireErrorCode.INTERNAL_ERROR,
    SolverErrorKind.INVALID_NUMBER_OF_CANDIDATES: RaireErrorCode.INTERNAL_ERROR,
    SolverErrorKind.INTERNAL_ERROR_DIDNT_RULE_OUT_LOSER: RaireErrorCode.INTERNAL_ERROR,
    SolverErrorKind.INTERNAL_ERROR_RULED_OUT_WINNER: RaireErrorCode.INTERNAL_ERROR,
    SolverErrorKind.INTERNAL_ERROR_TRIMMING: RaireErrorCode.INTERNAL_ERROR,
    SolverErrorKind.WRONG_WINNER: RaireErrorCode.INTERNAL_ERROR,
}

_unmapped = set(SolverErrorKind) - set(ERROR_CODES)
if _unmapped:
    raise RuntimeError(
        f"Solver error kinds without an error code: {sorted(k.value for k in _unmapped)}"
    )

_FIXED_MESSAGES: dict[SolverErrorKind, str] = {
    SolverErrorKind.TIMEOUT_FINDING_ASSERTIONS:
        "Time out finding assertions - try again with longer timeout.",
    SolverErrorKind.TIMEOUT_TRIMMING_ASSERTIONS:
        "Time out trimming assertions - the assertions are usable, but could be "
        "reduced given more trimming time.",
    SolverErrorKind.TIMEOUT_CHECKING_WINNER:
        "Time out checking winner - the election is either tied or extremely complex.",
    SolverErrorKind.INVALID_CANDIDATE_NUMBER: "Candidate list does not match database.",
}

INTERNAL_ERROR_MESSAGE = "Internal error"


def error_code_for(kind: SolverErrorKind) -> RaireErrorCode:
    """Return the error code for a solver failure kind."""
    return ERROR_CODES[kind]


def candidate_names(indices: list[int], candidates: list[str]) -> list[str]:
    """Resolve candidate indices to names.

    Raises:
        RaireServiceException: INTERNAL_ERROR if an index is out of range.
    """
    names = []
    for i in indices:
        if not 0 <= i < len(candidates):
            msg = (
                f"[candidate_names] Candidate index {i} is invalid for "
                f"candidate list {candidates}."
            )
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)
        names.append(candidates[i])
    return names


def error_message_for(failure: SolverFailure, candidates: list[str]) -> str:
    """Build the human-readable message for a solver failure.

    Tied winners are listed in candidate-list order; an elimination order
    that could not be ruled out is listed in sequence order.
    """
    if failure.kind == SolverErrorKind.TIED_WINNERS:
        tied = candidate_names(sorted(set(failure.candidates)), candidates)
        return f"Tied winners: {', '.join(tied)}."
    if failure.kind == SolverErrorKind.COULD_NOT_RULE_OUT:
        sequence = candidate_names(failure.candidates, candidates)
        return f"Could not rule out alternative elimination order: {', '.join(sequence)}."
    return _FIXED_MESSAGES.get(failure.kind, INTERNAL_ERROR_MESSAGE)


def exception_for(failure: SolverFailure, candidates: list[str]) -> RaireServiceException:
    """Translate a solver failure into the exception reported to callers."""
    return RaireServiceException(
        error_message_for(failure, candidates), error_code_for(failure.kind)
    )
