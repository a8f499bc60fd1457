"""Read-only queries over the contract state."""

from __future__ import annotations

import copy
from typing import Optional, TypeVar

from .context import validate_address
from .errors import NotFoundError
from .helpers import is_dao_member
from .msg import (
    AccessLevel,
    BaseCitationFeeResponse,
    Citation,
    ContractInfoResponse,
    DaoConfigResponse,
    DaoMembersResponse,
    DataItem,
    DataVersion,
    NumTokensResponse,
    OwnerOfResponse,
    ProposalResponse,
    ProposalsResponse,
    ProposalStatus,
    TokenInfoResponse,
    VoteChoice,
    VoteCount,
    VoteCountResponse,
    VoteResponse,
    VotingPowerResponse,
)
from .state import ContractState, load

T = TypeVar("T")

DEFAULT_LIMIT = 30
MAX_LIMIT = 100


def _require(value: Optional[T], kind: str) -> T:
    if value is None:
        raise NotFoundError(f"{kind} not found")
    return value


def _limit(limit: Optional[int]) -> int:
    return min(DEFAULT_LIMIT if limit is None else limit, MAX_LIMIT)


def query_owner_of(state: ContractState, token_id: str) -> OwnerOfResponse:
    return OwnerOfResponse(owner=load(state.token_owners, token_id, "token owner"))


def query_token_info(state: ContractState, token_id: str) -> TokenInfoResponse:
    owner = load(state.token_owners, token_id, "token owner")
    data_item = load(state.data_items, token_id, "data item")
    return TokenInfoResponse(token_id=token_id, owner=owner, data_item=copy.deepcopy(data_item))


def query_citations(state: ContractState, paper_id: str) -> list[Citation]:
    """Return a paper's citations, empty if it has none."""
    return copy.deepcopy(state.citations.get(paper_id, []))


def query_all_tokens(
    state: ContractState, start_after: Optional[str], limit: Optional[int]
) -> list[str]:
    """Token ids in key order, after ``start_after``, at most ``limit`` (30 by default, 100 at most)."""
    ids = sorted(state.token_owners)
    if start_after is not None:
        ids = [token_id for token_id in ids if token_id > start_after]
    return ids[: _limit(limit)]


def query_num_tokens(state: ContractState) -> NumTokensResponse:
    return NumTokensResponse(count=_require(state.token_count, "token count"))


def query_contract_info(state: ContractState) -> ContractInfoResponse:
    return ContractInfoResponse(
        name=_require(state.contract_name, "contract name"),
        symbol=_require(state.contract_symbol, "contract symbol"),
        owner=_require(state.contract_owner, "contract owner"),
    )


def query_data_item(state: ContractState, token_id: str) -> DataItem:
    return copy.deepcopy(load(state.data_items, token_id, "data item"))


def query_data_versions(state: ContractState, token_id: str) -> list[DataVersion]:
    return copy.deepcopy(load(state.data_versions, token_id, "data versions"))


def query_authorized_users(state: ContractState, token_id: str) -> list[str]:
    return list(state.authorized_users.get(token_id, []))


def query_access_level(state: ContractState, token_id: str, user: str) -> AccessLevel:
    return state.access_controls.get((token_id, user), AccessLevel.NONE)


def query_paper_doi(state: ContractState, paper_id: str) -> str:
    return load(state.paper_dois, paper_id, "paper doi")


def query_base_citation_fee(state: ContractState) -> BaseCitationFeeResponse:
    return BaseCitationFeeResponse(fee=_require(state.base_citation_fee, "base citation fee"))


def query_dao_members(state: ContractState) -> DaoMembersResponse:
    """Active members in address order; raises if a stored address is malformed."""
    members = [
        validate_address(address)
        for address, is_member in sorted(state.dao_members.items())
        if is_member
    ]
    return DaoMembersResponse(members=members, total_count=len(members))


def query_dao_config(state: ContractState) -> DaoConfigResponse:
    return DaoConfigResponse(config=copy.deepcopy(_require(state.dao_config, "dao config")))


def query_proposal(state: ContractState, proposal_id: int) -> ProposalResponse:
    return ProposalResponse(
        proposal=copy.deepcopy(load(state.proposals, proposal_id, "proposal"))
    )


def query_proposals(
    state: ContractState,
    start_after: Optional[int],
    limit: Optional[int],
    status_filter: Optional[ProposalStatus],
) -> ProposalsResponse:
    """A page of proposals in id order, optionally of one status, with the total that match."""
    matching = [
        proposal
        for _, proposal in sorted(state.proposals.items())
        if status_filter is None or proposal.status is status_filter
    ]
    page = [
        proposal
        for proposal in matching
        if start_after is None or proposal.id > start_after
    ][: _limit(limit)]
    return ProposalsResponse(proposals=copy.deepcopy(page), total_count=len(matching))


def query_vote(state: ContractState, proposal_id: int, voter: str) -> VoteResponse:
    voter_addr = validate_address(voter)
    return VoteResponse(vote=copy.deepcopy(state.votes.get((proposal_id, voter_addr))))


def query_vote_count(state: ContractState, proposal_id: int) -> VoteCountResponse:
    """The stored tally, or one counted from individual votes if none is stored."""
    load(state.proposals, proposal_id, "proposal")

    stored = state.vote_counts.get(proposal_id)
    if stored is not None:
        return VoteCountResponse(vote_count=copy.deepcopy(stored))

    choices = [
        vote.choice
        for (pid, _), vote in sorted(state.votes.items())
        if pid == proposal_id
    ]
    vote_count = VoteCount(
        yes=choices.count(VoteChoice.YES),
        no=choices.count(VoteChoice.NO),
        abstain=choices.count(VoteChoice.ABSTAIN),
        total_eligible=query_dao_members(state).total_count,
    )
    return VoteCountResponse(vote_count=vote_count)


def query_member_voting_power(state: ContractState, member: str) -> VotingPowerResponse:
    """Every member has one vote; non-members have none."""
    member_addr = validate_address(member)
    member_flag = is_dao_member(state, member_addr)
    return VotingPowerResponse(power=1 if member_flag else 0, is_member=member_flag)