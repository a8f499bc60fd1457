import pytest

from paperdao.errors import (
    CannotRemoveLastMember,
    ContractError,
    DataFrozen,
    FeatureNotImplemented,
    InvalidVotingThreshold,
    NotDaoMember,
    NotFoundError,
    ProposalExpired,
    StdError,
    TokenNotFound,
)


@pytest.mark.parametrize(
    "cls, text",
    [
        (TokenNotFound, "Token does not exist"),
        (DataFrozen, "Data is frozen"),
        (NotDaoMember, "Not a DAO member"),
        (ProposalExpired, "Proposal has expired"),
        (CannotRemoveLastMember, "Cannot remove last DAO member"),
        (InvalidVotingThreshold, "Invalid voting threshold"),
        (FeatureNotImplemented, "Feature not implemented yet"),
    ],
)
def test_default_messages(cls, text):
    assert str(cls()) == text


def test_std_error_keeps_custom_message():
    err = StdError("Voting period must be greater than 0")
    assert str(err) == "Voting period must be greater than 0"
    assert isinstance(err, ContractError)


def test_not_found_is_std_error():
    err = NotFoundError("DaoConfig not found")
    assert isinstance(err, StdError)
    assert isinstance(err, ContractError)
    assert str(err) == "DaoConfig not found"


def test_specific_error_caught_as_contract_error():
    err = NotDaoMember()
    assert isinstance(err, ContractError)
    assert not isinstance(err, StdError)
    assert str(err) == "Not a DAO member"