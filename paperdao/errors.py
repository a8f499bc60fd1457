"""Errors raised by the contract."""


class ContractError(Exception):
    """Base class of every error the contract raises."""

    message = "Contract error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.message)

    def __str__(self) -> str:
        return str(self.args[0])


class StdError(ContractError):
    """A generic failure with a free-form message."""

    message = "Generic error"


class NotFoundError(StdError):
    """A stored value that was asked for is missing."""

    message = "Value not found"


class Unauthorized(ContractError):
    message = "Unauthorized"


class TokenNotFound(ContractError):
    message = "Token does not exist"


class DataFrozen(ContractError):
    message = "Data is frozen"


class InsufficientPayment(ContractError):
    message = "Insufficient payment"


class PaymentFailed(ContractError):
    message = "Payment failed"


class TokenExists(ContractError):
    message = "Token already exists"


class NotAuthorized(ContractError):
    message = "Not authorized"


class NotDaoMember(ContractError):
    message = "Not a DAO member"


class ProposalNotFound(ContractError):
    message = "Proposal not found"


class ProposalExpired(ContractError):
    message = "Proposal has expired"


class ProposalAlreadyExecuted(ContractError):
    message = "Proposal already executed"


class VotingPeriodActive(ContractError):
    message = "Voting period has not ended"


class ProposalDidNotPass(ContractError):
    message = "Proposal did not pass"


class CannotRemoveLastMember(ContractError):
    message = "Cannot remove last DAO member"


class MemberAlreadyExists(ContractError):
    message = "Member already exists"


class MemberDoesNotExist(ContractError):
    message = "Member does not exist"


class InvalidVotingThreshold(ContractError):
    message = "Invalid voting threshold"


class FeatureNotImplemented(ContractError):
    message = "Feature not implemented yet"