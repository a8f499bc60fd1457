"""DAO proposals: submission of article, membership and configuration proposals, and their execution."""

from __future__ import annotations

from typing import Optional, TypeVar

from .context import Env, MessageInfo, Response, validate_address
from .errors import (
    CannotRemoveLastMember,
    ContractError,
    InvalidVotingThreshold,
    MemberAlreadyExists,
    MemberDoesNotExist,
    NotFoundError,
    StdError,
)
from .helpers import (
    ensure_can_execute_proposal,
    ensure_dao_member,
    ensure_proposal_exists,
    is_dao_member,
    validate_dao_config,
    validate_voting_period,
)
from .msg import (
    ArticlePublication,
    ConfigUpdate,
    DaoConfig,
    MemberAction,
    MemberChange,
    Proposal,
    ProposalStatus,
    ProposalType,
    VoteCount,
)
from .state import ContractState
from .tokens import create_paper_item

T = TypeVar("T")

_IPFS_PREFIXES = ("Qm", "bafy")


def _require(value: Optional[T], kind: str) -> T:
    if value is None:
        raise NotFoundError(f"{kind} not found")
    return value


def count_dao_members(state: ContractState) -> int:
    """Return the number of stored DAO member entries."""
    return len(state.dao_members)


def _store_new_proposal(state: ContractState, proposal: Proposal) -> None:
    """Save a proposal, start its vote tally and advance the counter."""
    state.proposals[proposal.id] = proposal
    state.vote_counts[proposal.id] = VoteCount(
        yes=0, no=0, abstain=0, total_eligible=count_dao_members(state)
    )
    state.proposal_counter = proposal.id + 1


def _ensure_member_count(state: ContractState, min_members: int) -> None:
    current = count_dao_members(state)
    if current < min_members:
        raise StdError(
            f"Current member count ({current}) is less than required minimum ({min_members})"
        )


def submit_article_proposal(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    ipfs_hash: str,
    doi: str,
    metadata_uri: str,
    title: str,
    description: str,
) -> Response:
    """Propose publishing an article; anyone may submit."""
    if not ipfs_hash.strip():
        raise StdError("IPFS hash cannot be empty")
    if not doi.strip():
        raise StdError("DOI cannot be empty")
    if not metadata_uri.strip():
        raise StdError("Metadata URI cannot be empty")
    if not title.strip():
        raise StdError("Title cannot be empty")
    if not ipfs_hash.startswith(_IPFS_PREFIXES):
        raise StdError("Invalid IPFS hash format")
    if "/" not in doi:
        raise StdError("Invalid DOI format")

    config = _require(state.dao_config, "dao config")
    proposal_id = _require(state.proposal_counter, "proposal counter")
    voting_end = env.time + config.voting_period

    _store_new_proposal(
        state,
        Proposal(
            id=proposal_id,
            proposer=info.sender,
            proposal_type=ProposalType.ARTICLE_PUBLICATION,
            title=title,
            description=description,
            created_at=env.time,
            voting_end=voting_end,
            status=ProposalStatus.ACTIVE,
            execution_data=ArticlePublication(
                ipfs_hash=ipfs_hash, doi=doi, metadata_uri=metadata_uri
            ),
        ),
    )

    return (
        Response()
        .add_attribute("method", "submit_article_proposal")
        .add_attribute("proposal_id", proposal_id)
        .add_attribute("proposer", info.sender)
        .add_attribute("article_ipfs_hash", ipfs_hash)
        .add_attribute("article_doi", doi)
        .add_attribute("voting_end", voting_end)
        .add_attribute("proposal_type", "article_publication")
    )


def submit_member_proposal(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    member_address: str,
    action: MemberAction,
    title: str,
    description: str,
) -> Response:
    """Propose adding or removing a DAO member; only members may submit."""
    ensure_dao_member(state, info.sender)
    target = validate_address(member_address)

    if action is MemberAction.ADD:
        if is_dao_member(state, target):
            raise MemberAlreadyExists()
        proposal_type = ProposalType.ADD_MEMBER
    else:
        if not is_dao_member(state, target):
            raise MemberDoesNotExist()
        if count_dao_members(state) <= 1:
            raise CannotRemoveLastMember()
        proposal_type = ProposalType.REMOVE_MEMBER

    config = _require(state.dao_config, "dao config")
    proposal_id = _require(state.proposal_counter, "proposal counter")
    proposal = Proposal(
        id=proposal_id,
        proposer=info.sender,
        proposal_type=proposal_type,
        title=title,
        description=description,
        created_at=env.time,
        voting_end=env.time + config.voting_period,
        status=ProposalStatus.ACTIVE,
        execution_data=MemberChange(member_address=target, action=action),
    )
    _store_new_proposal(state, proposal)

    return (
        Response()
        .add_attribute("method", "submit_member_proposal")
        .add_attribute("proposal_id", proposal_id)
        .add_attribute("proposer", info.sender)
        .add_attribute("target_member", target)
        .add_attribute("action", action.value)
        .add_attribute("voting_end", proposal.voting_end)
    )


def update_dao_config(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    voting_period: Optional[int],
    approval_threshold: Optional[int],
    min_members: Optional[int],
) -> Response:
    """Propose a DAO configuration change; omitted values keep their current setting."""
    ensure_dao_member(state, info.sender)
    validate_dao_config(voting_period, approval_threshold, min_members)

    current = _require(state.dao_config, "dao config")
    new_config = DaoConfig(
        voting_period=current.voting_period if voting_period is None else voting_period,
        approval_threshold=(
            current.approval_threshold if approval_threshold is None else approval_threshold
        ),
        min_members=current.min_members if min_members is None else min_members,
    )
    validate_voting_period(new_config.voting_period)
    _ensure_member_count(state, new_config.min_members)

    proposal_id = _require(state.proposal_counter, "proposal counter")
    voting_end = env.time + current.voting_period
    description = (
        "Update DAO configuration - "
        f"Voting Period: {current.voting_period} -> {new_config.voting_period}, "
        f"Approval Threshold: {current.approval_threshold}% -> "
        f"{new_config.approval_threshold}%, "
        f"Min Members: {current.min_members} -> {new_config.min_members}"
    )
    _store_new_proposal(
        state,
        Proposal(
            id=proposal_id,
            proposer=info.sender,
            proposal_type=ProposalType.UPDATE_CONFIG,
            title="DAO Configuration Update",
            description=description,
            created_at=env.time,
            voting_end=voting_end,
            status=ProposalStatus.ACTIVE,
            execution_data=ConfigUpdate(new_config=new_config),
        ),
    )

    return (
        Response()
        .add_attribute("method", "update_dao_config")
        .add_attribute("proposal_id", proposal_id)
        .add_attribute("proposer", info.sender)
        .add_attribute("old_voting_period", current.voting_period)
        .add_attribute("new_voting_period", new_config.voting_period)
        .add_attribute("old_approval_threshold", current.approval_threshold)
        .add_attribute("new_approval_threshold", new_config.approval_threshold)
        .add_attribute("old_min_members", current.min_members)
        .add_attribute("new_min_members", new_config.min_members)
        .add_attribute("voting_end", voting_end)
        .add_attribute("proposal_type", "config_update")
    )


def execute_article_publication_proposal(
    state: ContractState,
    env: Env,
    proposal: Proposal,
    ipfs_hash: str,
    doi: str,
    metadata_uri: str,
) -> Response:
    """Publish the article of an approved proposal as a paper owned by its proposer."""
    if not ipfs_hash.strip():
        raise StdError("IPFS hash cannot be empty during execution")
    if not doi.strip():
        raise StdError("DOI cannot be empty during execution")
    if not metadata_uri.strip():
        raise StdError("Metadata URI cannot be empty during execution")

    if doi in state.paper_dois.values():
        raise StdError(f"DOI {doi} already exists")

    try:
        response = create_paper_item(
            state, env, MessageInfo(sender=proposal.proposer), ipfs_hash, doi, metadata_uri
        )
    except ContractError as error:
        raise StdError(f"Failed to create paper item: {error}") from error

    return (
        response.add_attribute("dao_approved", "true")
        .add_attribute("proposal_id", proposal.id)
        .add_attribute("execution_method", "dao_proposal")
    )


def _reduce_eligible_voters(state: ContractState) -> None:
    """Drop one eligible voter from the tally of every active proposal."""
    for proposal_id, proposal in sorted(state.proposals.items()):
        if proposal.status is not ProposalStatus.ACTIVE:
            continue
        count = state.vote_counts.get(proposal_id)
        if count is not None and count.total_eligible > 0:
            count.total_eligible -= 1


def _execute_member_change(
    state: ContractState, change: MemberChange, response: Response
) -> None:
    target = validate_address(change.member_address)
    if change.action is MemberAction.ADD:
        state.dao_members[target] = True
        response.add_attribute("action", "member_added").add_attribute("new_member", target)
        return
    if count_dao_members(state) <= 1:
        raise CannotRemoveLastMember()
    _reduce_eligible_voters(state)
    state.dao_members.pop(target, None)
    response.add_attribute("action", "member_removed").add_attribute(
        "removed_member", target
    )


def _execute_config_update(
    state: ContractState, new_config: DaoConfig, response: Response
) -> None:
    if not 0 < new_config.approval_threshold <= 100:
        raise InvalidVotingThreshold()
    if new_config.min_members == 0:
        raise StdError("Minimum members must be at least 1")
    validate_voting_period(new_config.voting_period)
    _ensure_member_count(state, new_config.min_members)

    old = _require(state.dao_config, "dao config")
    state.dao_config = new_config
    (
        response.add_attribute("action", "config_updated")
        .add_attribute("old_voting_period", old.voting_period)
        .add_attribute("new_voting_period", new_config.voting_period)
        .add_attribute("old_approval_threshold", old.approval_threshold)
        .add_attribute("new_approval_threshold", new_config.approval_threshold)
        .add_attribute("old_min_members", old.min_members)
        .add_attribute("new_min_members", new_config.min_members)
        .add_attribute("execution_status", "success")
    )


def execute_proposal(
    state: ContractState, env: Env, info: MessageInfo, proposal_id: int
) -> Response:
    """Carry out a passed proposal and mark it executed; only members may do so."""
    ensure_dao_member(state, info.sender)
    proposal = ensure_proposal_exists(state, proposal_id)
    ensure_can_execute_proposal(env, proposal)

    response = (
        Response()
        .add_attribute("method", "execute_proposal")
        .add_attribute("proposal_id", proposal_id)
        .add_attribute("executor", info.sender)
    )

    data = proposal.execution_data
    if isinstance(data, MemberChange):
        _execute_member_change(state, data, response)
    elif isinstance(data, ArticlePublication):
        try:
            article = execute_article_publication_proposal(
                state, env, proposal, data.ipfs_hash, data.doi, data.metadata_uri
            )
        except ContractError:
            proposal.status = ProposalStatus.REJECTED
            raise
        (
            response.add_attribute("action", "article_published")
            .add_attribute("article_ipfs_hash", data.ipfs_hash)
            .add_attribute("article_doi", data.doi)
            .add_attribute("original_proposer", proposal.proposer)
            .add_attribute("execution_status", "success")
        )
        response.attributes.extend(article.attributes)
        response.messages.extend(article.messages)
    elif isinstance(data, ConfigUpdate):
        _execute_config_update(state, data.new_config, response)

    proposal.status = ProposalStatus.EXECUTED
    return response.add_attribute("status", "executed")