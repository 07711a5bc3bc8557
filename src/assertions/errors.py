"""Error codes and the exception raised across the assertion service."""

from enum import Enum


# Name of the response header that carries the error code.
ERROR_CODE_KEY = "error_code"


class RaireErrorCode(str, Enum):
    """Stable error vocabulary returned to callers.

    The first group is user-actionable; INTERNAL_ERROR covers programming,
    configuration and storage errors the user can do nothing about.
    """

    # The contest is a tie and cannot be audited.
    TIED_WINNERS = "TIED_WINNERS"
    # Fewer auditable ballots than stored votes for the contest. Raised by
    # upstream validation against the ballot store, never by this service.
    INVALID_TOTAL_AUDITABLE_BALLOTS = "INVALID_TOTAL_AUDITABLE_BALLOTS"
    # The contest is tied or too complex to distinguish from a tie.
    TIMEOUT_CHECKING_WINNER = "TIMEOUT_CHECKING_WINNER"
    # May succeed if given more time.
    TIMEOUT_FINDING_ASSERTIONS = "TIMEOUT_FINDING_ASSERTIONS"
    # Assertions are usable but not minimal.
    TIMEOUT_TRIMMING_ASSERTIONS = "TIMEOUT_TRIMMING_ASSERTIONS"
    COULD_NOT_RULE_OUT_ALTERNATIVE = "COULD_NOT_RULE_OUT_ALTERNATIVE"
    # The request's candidate list disagrees with stored data.
    WRONG_CANDIDATE_NAMES = "WRONG_CANDIDATE_NAMES"
    # Retrieval requested for a contest with no usable stored assertions.
    NO_ASSERTIONS_PRESENT = "NO_ASSERTIONS_PRESENT"

    INTERNAL_ERROR = "INTERNAL_ERROR"


class RaireServiceException(Exception):
    """Assertion generation or retrieval failed.

    Attributes:
        error_code: The RaireErrorCode callers branch on
        message: Human-readable explanation
    """

    def __init__(self, message: str, error_code: RaireErrorCode):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
