"""Assertion generation: solver results in, persisted records out."""

from src.assertions.errors import ERROR_CODE_KEY, RaireErrorCode, RaireServiceException
from src.assertions.schema import (
    GenerateAssertionsRequest,
    GenerateAssertionsResponse,
    GetAssertionsRequest,
)
from src.assertions.service import GenerateAssertionsService
from src.assertions.solver import (
    AssertionKind,
    SolverAssertion,
    SolverErrorKind,
    SolverFailure,
    SolverResult,
    SolverSuccess,
    parse_solver_result,
)
from src.assertions.translator import TranslatedResult, translate_result

__all__ = [
    "ERROR_CODE_KEY",
    "RaireErrorCode",
    "RaireServiceException",
    "GenerateAssertionsRequest",
    "GenerateAssertionsResponse",
    "GetAssertionsRequest",
    "GenerateAssertionsService",
    "AssertionKind",
    "SolverAssertion",
    "SolverErrorKind",
    "SolverFailure",
    "SolverResult",
    "SolverSuccess",
    "parse_solver_result",
    "TranslatedResult",
    "translate_result",
]
