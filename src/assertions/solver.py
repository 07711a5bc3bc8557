"""Inbound shape of an assertion-generation (solver) result.

The solver is a black box. It returns either a success payload (the
assertions with their difficulty and margin, plus summary numbers) or one
failure from a closed set of kinds. These Pydantic models accept both the
flat assertion form and the nested raire form::

    {"type": "NEB", "winner": 0, "loser": 1, "difficulty": 1.1, "margin": 320}
    {"assertion": {"type": "NEB", "winner": 0, "loser": 1},
     "difficulty": 1.1, "margin": 320}

Failures arrive as ``{"Err": "TimeoutCheckingWinner"}`` or, when they carry
candidate indices, ``{"Err": {"TiedWinners": [0, 2]}}``.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.assertions.errors import RaireErrorCode, RaireServiceException

logger = logging.getLogger(__name__)


class AssertionKind(str, Enum):
    """Assertion variants the solver produces."""

    NEB = "NEB"  # Not Eliminated Before
    NEN = "NEN"  # Not Eliminated Next


class SolverErrorKind(str, Enum):
    """Closed set of solver failure reasons."""

    TIED_WINNERS = "TiedWinners"
    TIMEOUT_FINDING_ASSERTIONS = "TimeoutFindingAssertions"
    TIMEOUT_TRIMMING_ASSERTIONS = "TimeoutTrimmingAssertions"
    TIMEOUT_CHECKING_WINNER = "TimeoutCheckingWinner"
    COULD_NOT_RULE_OUT = "CouldNotRuleOut"
    INVALID_CANDIDATE_NUMBER = "InvalidCandidateNumber"
    INVALID_TIMEOUT = "InvalidTimeout"
    INVALID_NUMBER_OF_CANDIDATES = "InvalidNumberOfCandidates"
    INTERNAL_ERROR_DIDNT_RULE_OUT_LOSER = "InternalErrorDidntRuleOutLoser"
    INTERNAL_ERROR_RULED_OUT_WINNER = "InternalErrorRuledOutWinner"
    INTERNAL_ERROR_TRIMMING = "InternalErrorTrimming"
    WRONG_WINNER = "WrongWinner"


class SolverAssertion(BaseModel):
    """One assertion with its difficulty and margin, candidates as indices."""

    model_config = ConfigDict(extra="ignore")

    type: AssertionKind
    winner: int
    loser: int
    continuing: list[int] = Field(default_factory=list)
    difficulty: float
    margin: int

    @model_validator(mode="before")
    @classmethod
    def flatten_nested_assertion(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("assertion"), Mapping):
            flat = {k: v for k, v in data.items() if k != "assertion"}
            flat.update(data["assertion"])
            return flat
        return data


class SolverSuccess(BaseModel):
    """A successful solver run. Timing fields are accepted and dropped."""

    model_config = ConfigDict(extra="ignore")

    assertions: list[SolverAssertion] = Field(default_factory=list)
    difficulty: float
    margin: int
    winner: int
    num_candidates: int
    warning_trim_timed_out: bool = False


class SolverFailure(BaseModel):
    """A failed solver run.

    Attributes:
        kind: The failure reason
        candidates: Candidate indices the failure refers to: the tied
            winners, the elimination order that could not be ruled out, or
            the expected winners. Empty for other kinds.
    """

    kind: SolverErrorKind
    candidates: list[int] = Field(default_factory=list)


SolverResult = Union[SolverSuccess, SolverFailure]


def parse_solver_result(payload: Mapping[str, Any]) -> SolverResult:
    """Parse a raw ``{"Ok": ...} | {"Err": ...}`` mapping.

    Raises:
        RaireServiceException: INTERNAL_ERROR if the payload is malformed
            or names a failure kind this service does not know.
    """
    prefix = "[parse_solver_result]"
    ok = payload.get("Ok")
    if ok is not None:
        try:
            return SolverSuccess.model_validate(ok)
        except ValidationError as e:
            msg = f"{prefix} Malformed solver success payload: {e}"
            logger.error(msg)
            raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from e

    err = payload.get("Err")
    if err is None:
        msg = f"{prefix} Solver returned neither a result nor an error."
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)

    if isinstance(err, str):
        tag, detail = err, None
    elif isinstance(err, Mapping) and len(err) == 1:
        tag, detail = next(iter(err.items()))
    else:
        msg = f"{prefix} Malformed solver error payload: {err!r}"
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR)

    try:
        kind = SolverErrorKind(tag)
    except ValueError:
        # A kind the taxonomy has no mapping for: surface it, never guess.
        msg = f"{prefix} Unrecognised solver error kind {tag!r}."
        logger.error(msg)
        raise RaireServiceException(msg, RaireErrorCode.INTERNAL_ERROR) from None

    candidates = list(detail) if isinstance(detail, list) else []
    return SolverFailure(kind=kind, candidates=candidates)
