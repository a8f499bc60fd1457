"""Voting on DAO proposals and evaluating their outcome."""

from __future__ import annotations

from typing import Optional, TypeVar

from .context import Env, MessageInfo, Response
from .errors import ContractError, NotFoundError, ProposalNotFound, StdError
from .helpers import ensure_can_vote_on_proposal, ensure_dao_member, ensure_proposal_exists
from .msg import (
    ArticlePublication,
    DaoConfig,
    Proposal,
    ProposalStatus,
    ProposalType,
    Vote,
    VoteChoice,
    VoteCount,
)
from .proposals import execute_article_publication_proposal
from .state import ContractState

T = TypeVar("T")

_TALLY_FIELDS = {
    VoteChoice.YES: "yes",
    VoteChoice.NO: "no",
    VoteChoice.ABSTAIN: "abstain",
}


def _require(value: Optional[T], kind: str) -> T:
    if value is None:
        raise NotFoundError(f"{kind} not found")
    return value


def _vote_count(state: ContractState, proposal_id: int) -> VoteCount:
    try:
        return state.vote_counts[proposal_id]
    except KeyError:
        raise ProposalNotFound() from None


def _required_yes_votes(count: VoteCount, config: DaoConfig) -> int:
    """Yes votes needed to pass, rounded up."""
    return -(-(count.total_eligible * config.approval_threshold) // 100)


def _adjust_tally(count: VoteCount, choice: VoteChoice, delta: int) -> None:
    name = _TALLY_FIELDS[choice]
    setattr(count, name, getattr(count, name) + delta)


def vote_on_proposal(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    proposal_id: int,
    choice: VoteChoice,
) -> Response:
    """Cast or change a member's vote and re-evaluate the proposal."""
    ensure_dao_member(state, info.sender)
    proposal = ensure_proposal_exists(state, proposal_id)
    ensure_can_vote_on_proposal(env, proposal)

    if proposal_id not in state.vote_counts:
        raise NotFoundError("vote count not found")
    vote_count = state.vote_counts[proposal_id]

    key = (proposal_id, info.sender)
    previous = state.votes.get(key)
    state.votes[key] = Vote(voter=info.sender, choice=choice, timestamp=env.time)

    if previous is not None:
        _adjust_tally(vote_count, previous.choice, -1)
    _adjust_tally(vote_count, choice, 1)

    status = check_and_update_proposal_status(state, env, proposal_id)

    return (
        Response()
        .add_attribute("method", "vote_on_proposal")
        .add_attribute("proposal_id", proposal_id)
        .add_attribute("voter", info.sender)
        .add_attribute("choice", choice.value)
        .add_attribute("proposal_status", status.value)
        .add_attribute("vote_updated", previous is not None)
        .add_attribute("yes_votes", vote_count.yes)
        .add_attribute("no_votes", vote_count.no)
        .add_attribute("abstain_votes", vote_count.abstain)
        .add_attribute("total_eligible", vote_count.total_eligible)
    )


def _try_auto_execute(state: ContractState, env: Env, proposal: Proposal) -> bool:
    """Publish a passed article proposal; return whether it succeeded."""
    data = proposal.execution_data
    if not isinstance(data, ArticlePublication):
        return False
    try:
        execute_article_publication_proposal(
            state, env, proposal, data.ipfs_hash, data.doi, data.metadata_uri
        )
    except ContractError:
        return False
    return True


def check_and_update_proposal_status(
    state: ContractState, env: Env, proposal_id: int
) -> ProposalStatus:
    """Move an active proposal to Expired, Passed/Executed or Rejected as its tally allows."""
    try:
        proposal = state.proposals[proposal_id]
    except KeyError:
        raise ProposalNotFound() from None

    if proposal.status is not ProposalStatus.ACTIVE:
        return proposal.status

    if env.time > proposal.voting_end:
        proposal.status = ProposalStatus.EXPIRED
        return ProposalStatus.EXPIRED

    if check_approval_threshold(state, proposal_id):
        proposal.status = ProposalStatus.PASSED
        if proposal.proposal_type is ProposalType.ARTICLE_PUBLICATION and _try_auto_execute(
            state, env, proposal
        ):
            proposal.status = ProposalStatus.EXECUTED
            return ProposalStatus.EXECUTED
        return ProposalStatus.PASSED

    if check_impossible_to_pass(state, proposal_id):
        proposal.status = ProposalStatus.REJECTED
        return ProposalStatus.REJECTED

    return ProposalStatus.ACTIVE


def calculate_vote_statistics(state: ContractState, proposal_id: int) -> VoteCount:
    """Return the stored tally of a proposal."""
    return _vote_count(state, proposal_id)


def check_approval_threshold(state: ContractState, proposal_id: int) -> bool:
    """Return whether the yes votes reach the approval threshold."""
    count = _vote_count(state, proposal_id)
    config = _require(state.dao_config, "dao config")
    return count.yes >= _required_yes_votes(count, config)


def check_impossible_to_pass(state: ContractState, proposal_id: int) -> bool:
    """Return whether the proposal cannot pass even if every remaining voter says yes."""
    count = _vote_count(state, proposal_id)
    config = _require(state.dao_config, "dao config")
    total_voted = count.yes + count.no + count.abstain
    if total_voted > count.total_eligible:
        raise StdError(
            f"Cannot Sub with {count.total_eligible} and {total_voted}"
        )
    remaining = count.total_eligible - total_voted
    return count.yes + remaining < _required_yes_votes(count, config)


def get_detailed_vote_statistics(
    state: ContractState, proposal_id: int
) -> tuple[VoteCount, bool, bool, int]:
    """Return the tally, whether it passed, whether it cannot pass, and the yes votes required."""
    count = calculate_vote_statistics(state, proposal_id)
    passed = check_approval_threshold(state, proposal_id)
    impossible = check_impossible_to_pass(state, proposal_id)
    config = _require(state.dao_config, "dao config")
    return count, passed, impossible, _required_yes_votes(count, config)