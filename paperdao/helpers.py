"""Membership, proposal-state and configuration checks shared by the contract."""

from __future__ import annotations

from collections.abc import Iterable

from .context import Env
from .errors import (
    InvalidVotingThreshold,
    NotDaoMember,
    ProposalAlreadyExecuted,
    ProposalDidNotPass,
    ProposalExpired,
    ProposalNotFound,
    StdError,
)
from .msg import Proposal, ProposalStatus
from .state import ContractState

MIN_VOTING_PERIOD = 3_600
MAX_VOTING_PERIOD = 2_592_000


def is_dao_member(state: ContractState, address: str) -> bool:
    """Return whether ``address`` is currently a DAO member."""
    return state.dao_members.get(address, False)


def ensure_dao_member(state: ContractState, address: str) -> None:
    """Raise NotDaoMember unless ``address`` is a DAO member."""
    if not is_dao_member(state, address):
        raise NotDaoMember()


def ensure_proposal_exists(state: ContractState, proposal_id: int) -> Proposal:
    """Return the stored proposal, raising ProposalNotFound if there is none."""
    try:
        return state.proposals[proposal_id]
    except KeyError:
        raise ProposalNotFound() from None


def is_proposal_expired(env: Env, proposal: Proposal) -> bool:
    """Return whether the block time is past the proposal's voting end."""
    return env.time > proposal.voting_end


def is_proposal_active(proposal: Proposal) -> bool:
    return proposal.status is ProposalStatus.ACTIVE


def can_vote_on_proposal(env: Env, proposal: Proposal) -> bool:
    """Return whether the proposal is active and not yet expired."""
    return is_proposal_active(proposal) and not is_proposal_expired(env, proposal)


def ensure_can_vote_on_proposal(env: Env, proposal: Proposal) -> None:
    """Raise if the proposal is not open for voting."""
    if not is_proposal_active(proposal):
        raise StdError("Proposal is not active")
    if is_proposal_expired(env, proposal):
        raise ProposalExpired()


def update_proposal_status(proposal: Proposal, env: Env) -> None:
    """Mark an active proposal as expired once its voting period is over."""
    if proposal.status is ProposalStatus.ACTIVE and env.time > proposal.voting_end:
        proposal.status = ProposalStatus.EXPIRED


def is_proposal_executed(proposal: Proposal) -> bool:
    return proposal.status is ProposalStatus.EXECUTED


def is_proposal_passed(proposal: Proposal) -> bool:
    return proposal.status is ProposalStatus.PASSED


def ensure_can_execute_proposal(env: Env, proposal: Proposal) -> None:
    """Raise unless the proposal has passed, is unexecuted and not expired."""
    if not is_proposal_passed(proposal):
        raise ProposalDidNotPass()
    if is_proposal_executed(proposal):
        raise ProposalAlreadyExecuted()
    if is_proposal_expired(env, proposal):
        raise ProposalExpired()


def validate_proposal_status_transition(
    current_status: ProposalStatus, new_status: ProposalStatus
) -> None:
    """Allow Active -> anything and Passed -> Executed; raise otherwise."""
    if current_status is ProposalStatus.ACTIVE:
        return
    if current_status is ProposalStatus.PASSED and new_status is ProposalStatus.EXECUTED:
        return
    raise StdError("Invalid proposal status transition")


def get_dao_member_count(state: ContractState) -> int:
    """Count addresses whose membership flag is set."""
    return sum(1 for is_member in state.dao_members.values() if is_member)


def validate_dao_config(
    voting_period: int | None,
    approval_threshold: int | None,
    min_members: int | None,
) -> None:
    """Check the optional DAO configuration values that were supplied."""
    if approval_threshold is not None and not 0 < approval_threshold <= 100:
        raise InvalidVotingThreshold()
    if voting_period is not None and voting_period == 0:
        raise StdError("Voting period must be greater than 0")
    if min_members is not None and min_members == 0:
        raise StdError("Minimum members must be greater than 0")


def check_and_expire_proposal(env: Env, proposal: Proposal) -> bool:
    """Expire an active proposal past its deadline; return whether it changed."""
    if is_proposal_expired(env, proposal) and proposal.status is ProposalStatus.ACTIVE:
        proposal.status = ProposalStatus.EXPIRED
        return True
    return False


def validate_voting_period(voting_period: int) -> None:
    """Require a voting period between one hour and thirty days."""
    if voting_period == 0:
        raise StdError("Voting period must be greater than 0")
    if voting_period < MIN_VOTING_PERIOD:
        raise StdError("Voting period must be at least 1 hour")
    if voting_period > MAX_VOTING_PERIOD:
        raise StdError("Voting period cannot exceed 30 days")


def is_within_voting_window(env: Env, proposal: Proposal) -> bool:
    """Return whether the block time lies between creation and voting end."""
    return proposal.created_at <= env.time <= proposal.voting_end


def get_remaining_voting_time(env: Env, proposal: Proposal) -> int:
    """Seconds left until voting ends; negative once it has ended."""
    return proposal.voting_end - env.time


def is_proposal_expiring_soon(env: Env, proposal: Proposal, warning_seconds: int) -> bool:
    """Return whether voting ends within ``warning_seconds`` but has not ended."""
    remaining = get_remaining_voting_time(env, proposal)
    return 0 < remaining <= warning_seconds


def batch_check_proposal_expiration(
    state: ContractState, env: Env, proposal_ids: Iterable[int]
) -> list[tuple[int, bool]]:
    """Return ``(id, expired)`` for each proposal; raise if any is missing."""
    return [
        (proposal_id, is_proposal_expired(env, ensure_proposal_exists(state, proposal_id)))
        for proposal_id in proposal_ids
    ]


def validate_status_transition_timing(
    env: Env, proposal: Proposal, new_status: ProposalStatus
) -> None:
    """Check time constraints on moving a proposal to ``new_status``."""
    if new_status is ProposalStatus.EXECUTED:
        if is_proposal_expired(env, proposal):
            raise ProposalExpired()
    elif new_status is ProposalStatus.EXPIRED:
        if not is_proposal_expired(env, proposal):
            raise StdError("Cannot mark proposal as expired before voting period ends")