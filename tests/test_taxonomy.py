"""Tests for translating solver failures into error codes and messages."""

import pytest

from src.assertions.errors import RaireErrorCode, RaireServiceException
from src.assertions.solver import SolverErrorKind, SolverFailure
from src.assertions.taxonomy import (
    ERROR_CODES,
    INTERNAL_ERROR_MESSAGE,
    error_code_for,
    error_message_for,
    exception_for,
)

CANDIDATES = ["Alice", "Bob", "Chuan", "Diego"]


class TestErrorCodes:
    def test_every_kind_is_mapped(self):
        assert set(ERROR_CODES) == set(SolverErrorKind)

    @pytest.mark.parametrize(
        "kind,code",
        [
            (SolverErrorKind.TIED_WINNERS, RaireErrorCode.TIED_WINNERS),
            (SolverErrorKind.TIMEOUT_FINDING_ASSERTIONS, RaireErrorCode.TIMEOUT_FINDING_ASSERTIONS),
            (
                SolverErrorKind.TIMEOUT_TRIMMING_ASSERTIONS,
                RaireErrorCode.TIMEOUT_TRIMMING_ASSERTIONS,
            ),
            (SolverErrorKind.TIMEOUT_CHECKING_WINNER, RaireErrorCode.TIMEOUT_CHECKING_WINNER),
            (SolverErrorKind.COULD_NOT_RULE_OUT, RaireErrorCode.COULD_NOT_RULE_OUT_ALTERNATIVE),
            (SolverErrorKind.INVALID_CANDIDATE_NUMBER, RaireErrorCode.WRONG_CANDIDATE_NAMES),
            (SolverErrorKind.INVALID_TIMEOUT, RaireErrorCode.INTERNAL_ERROR),
            (SolverErrorKind.INVALID_NUMBER_OF_CANDIDATES, RaireErrorCode.INTERNAL_ERROR),
            (SolverErrorKind.INTERNAL_ERROR_DIDNT_RULE_OUT_LOSER, RaireErrorCode.INTERNAL_ERROR),
            (SolverErrorKind.INTERNAL_ERROR_RULED_OUT_WINNER, RaireErrorCode.INTERNAL_ERROR),
            (SolverErrorKind.INTERNAL_ERROR_TRIMMING, RaireErrorCode.INTERNAL_ERROR),
            (SolverErrorKind.WRONG_WINNER, RaireErrorCode.INTERNAL_ERROR),
        ],
    )
    def test_mapping(self, kind, code):
        assert error_code_for(kind) == code

    def test_ballot_count_code_reserved_for_upstream(self):
        assert RaireErrorCode.INVALID_TOTAL_AUDITABLE_BALLOTS not in ERROR_CODES.values()


class TestErrorMessages:
    def test_tied_winners_in_candidate_order(self):
        failure = SolverFailure(kind=SolverErrorKind.TIED_WINNERS, candidates=[3, 0])
        assert error_message_for(failure, CANDIDATES) == "Tied winners: Alice, Diego."

    def test_could_not_rule_out_in_sequence_order(self):
        failure = SolverFailure(kind=SolverErrorKind.COULD_NOT_RULE_OUT, candidates=[2, 0, 1])
        assert (
            error_message_for(failure, CANDIDATES)
            == "Could not rule out alternative elimination order: Chuan, Alice, Bob."
        )

    def test_timeout_checking_winner(self):
        failure = SolverFailure(kind=SolverErrorKind.TIMEOUT_CHECKING_WINNER)
        assert error_message_for(failure, CANDIDATES) == (
            "Time out checking winner - the election is either tied or extremely complex."
        )

    def test_wrong_candidate_names(self):
        failure = SolverFailure(kind=SolverErrorKind.INVALID_CANDIDATE_NUMBER)
        assert error_message_for(failure, CANDIDATES) == "Candidate list does not match database."

    def test_internal_kinds_share_message(self):
        failure = SolverFailure(kind=SolverErrorKind.WRONG_WINNER, candidates=[1])
        assert error_message_for(failure, CANDIDATES) == INTERNAL_ERROR_MESSAGE

    def test_invalid_candidate_index(self):
        failure = SolverFailure(kind=SolverErrorKind.TIED_WINNERS, candidates=[0, 7])
        with pytest.raises(RaireServiceException) as exc_info:
            error_message_for(failure, CANDIDATES)
        assert exc_info.value.error_code == RaireErrorCode.INTERNAL_ERROR


class TestExceptionFor:
    def test_exception_carries_code_and_message(self):
        failure = SolverFailure(kind=SolverErrorKind.TIMEOUT_FINDING_ASSERTIONS)
        exc = exception_for(failure, CANDIDATES)
        assert exc.error_code == RaireErrorCode.TIMEOUT_FINDING_ASSERTIONS
        assert exc.message == "Time out finding assertions - try again with longer timeout."
        assert str(exc) == exc.message
