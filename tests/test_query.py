import pytest

from paperdao.context import Env, MessageInfo
from paperdao.errors import NotFoundError, StdError
from paperdao.instantiate import instantiate
from paperdao.msg import (
    AccessLevel,
    DaoConfig,
    InstantiateMsg,
    ProposalStatus,
    VoteChoice,
    VoteCount,
)
from paperdao.proposals import submit_article_proposal
from paperdao.query import (
    query_access_level,
    query_all_tokens,
    query_authorized_users,
    query_base_citation_fee,
    query_citations,
    query_contract_info,
    query_dao_config,
    query_dao_members,
    query_data_item,
    query_data_versions,
    query_member_voting_power,
    query_num_tokens,
    query_owner_of,
    query_paper_doi,
    query_proposal,
    query_proposals,
    query_token_info,
    query_vote,
    query_vote_count,
)
from paperdao.state import ContractState
from paperdao.tokens import cite_paper, create_paper_item, grant_access, update_data_item
from paperdao.context import Coin
from paperdao.voting import vote_on_proposal

DOI = "10.1000/test.paper"


@pytest.fixture
def state():
    s = ContractState()
    instantiate(
        s,
        Env(),
        MessageInfo(sender="creator"),
        InstantiateMsg(name="Research Data NFT", symbol="RDN", owner="creator"),
    )
    return s


def _paper(state, owner="author", doi=DOI):
    create_paper_item(
        state, Env(), MessageInfo(sender=owner), "QmPaperTest", doi, "https://example.com/paper.json"
    )
    return str(state.token_id_counter - 1)


def _proposal(state, doi="10.1000/a.b"):
    submit_article_proposal(
        state, Env(), MessageInfo(sender="author"), "QmX", doi, "uri", "Title", "desc"
    )
    return state.proposal_counter - 1


def test_owner_and_token_info(state):
    token_id = _paper(state)
    assert query_owner_of(state, token_id).owner == "author"
    info = query_token_info(state, token_id)
    assert info.token_id == token_id
    assert info.owner == "author"
    assert info.data_item.ipfs_hash == "QmPaperTest"


def test_owner_of_missing(state):
    with pytest.raises(NotFoundError):
        query_owner_of(state, "9")


def test_citations(state):
    token_id = _paper(state)
    assert query_citations(state, token_id) == []
    cite_paper(state, Env(), MessageInfo(sender="citer", funds=[Coin("inj", 100_000)]), token_id)
    citations = query_citations(state, token_id)
    assert len(citations) == 1
    assert citations[0].amount == 100_000


def test_all_tokens_ordering_and_paging(state):
    for n in range(12):
        _paper(state, doi=f"10.1/{n}")
    tokens = query_all_tokens(state, None, None)
    assert tokens == sorted(tokens)
    assert set(tokens) == {str(n) for n in range(12)}
    assert tokens.index("10") < tokens.index("2")
    after = query_all_tokens(state, "1", 2)
    assert after == ["10", "11"]


def test_all_tokens_limits(state):
    for n in range(101):
        _paper(state, doi=f"10.1/{n}")
    assert len(query_all_tokens(state, None, None)) == 30
    assert len(query_all_tokens(state, None, 500)) == 100


def test_counts_and_contract_info(state):
    _paper(state)
    assert query_num_tokens(state).count == 1
    info = query_contract_info(state)
    assert info.name == "Research Data NFT"
    assert info.symbol == "RDN"
    assert info.owner == "creator"
    assert query_base_citation_fee(state).fee == 100_000


def test_data_item_and_versions(state):
    token_id = _paper(state)
    update_data_item(state, Env(), MessageInfo(sender="author"), token_id, "QmNew", "uri2")
    assert query_data_item(state, token_id).ipfs_hash == "QmNew"
    versions = query_data_versions(state, token_id)
    assert [v.ipfs_hash for v in versions] == ["QmPaperTest", "QmNew"]
    with pytest.raises(NotFoundError):
        query_data_versions(state, "5")


def test_returned_items_are_copies(state):
    token_id = _paper(state)
    item = query_data_item(state, token_id)
    item.ipfs_hash = "changed"
    assert state.data_items[token_id].ipfs_hash == "QmPaperTest"


def test_access_queries(state):
    token_id = _paper(state)
    assert query_access_level(state, token_id, "reader") is AccessLevel.NONE
    assert query_authorized_users(state, token_id) == []
    grant_access(state, Env(), MessageInfo(sender="author"), token_id, "reader", AccessLevel.READ)
    assert query_access_level(state, token_id, "reader") is AccessLevel.READ
    assert query_authorized_users(state, token_id) == ["reader"]


def test_paper_doi(state):
    token_id = _paper(state)
    assert query_paper_doi(state, token_id) == DOI
    with pytest.raises(NotFoundError):
        query_paper_doi(state, "42")


def test_dao_members(state):
    state.dao_members["zed"] = False
    state.dao_members["alice"] = True
    res = query_dao_members(state)
    assert res.members == ["alice", "creator"]
    assert res.total_count == len(res.members)


def test_dao_members_invalid_address(state):
    state.dao_members["BadAddress"] = True
    with pytest.raises(StdError):
        query_dao_members(state)


def test_dao_config(state):
    assert query_dao_config(state).config == DaoConfig(
        voting_period=604800, approval_threshold=51, min_members=1
    )


def test_proposal_query(state):
    pid = _proposal(state)
    assert query_proposal(state, pid).proposal.proposer == "author"
    with pytest.raises(NotFoundError):
        query_proposal(state, 99)


def test_proposals_filter_and_paging(state):
    ids = [_proposal(state, doi=f"10.1/{n}") for n in range(4)]
    state.proposals[ids[1]].status = ProposalStatus.REJECTED
    everything = query_proposals(state, None, None, None)
    assert [p.id for p in everything.proposals] == ids
    assert everything.total_count == len(ids)
    active = query_proposals(state, None, None, ProposalStatus.ACTIVE)
    assert all(p.status is ProposalStatus.ACTIVE for p in active.proposals)
    assert active.total_count == len(ids) - 1
    page = query_proposals(state, ids[0], 1, ProposalStatus.ACTIVE)
    assert [p.id for p in page.proposals] == [ids[2]]
    assert page.total_count == active.total_count


def test_vote_query(state):
    state.dao_members["alice"] = True
    pid = _proposal(state)
    assert query_vote(state, pid, "creator").vote is None
    vote_on_proposal(state, Env(), MessageInfo(sender="creator"), pid, VoteChoice.NO)
    vote = query_vote(state, pid, "creator").vote
    assert vote.voter == "creator"
    assert vote.choice is VoteChoice.NO
    with pytest.raises(StdError):
        query_vote(state, pid, "X")


def test_vote_count_stored_and_recounted(state):
    state.dao_members["alice"] = True
    pid = _proposal(state)
    vote_on_proposal(state, Env(), MessageInfo(sender="creator"), pid, VoteChoice.ABSTAIN)
    stored = query_vote_count(state, pid).vote_count
    assert stored == state.vote_counts[pid]
    del state.vote_counts[pid]
    recounted = query_vote_count(state, pid).vote_count
    assert recounted == VoteCount(
        yes=0, no=0, abstain=1, total_eligible=query_dao_members(state).total_count
    )


def test_vote_count_missing_proposal(state):
    with pytest.raises(NotFoundError):
        query_vote_count(state, 3)


def test_member_voting_power(state):
    member = query_member_voting_power(state, "creator")
    assert member.is_member is True
    assert member.power == 1
    outsider = query_member_voting_power(state, "stranger")
    assert outsider.is_member is False
    assert outsider.power == 0