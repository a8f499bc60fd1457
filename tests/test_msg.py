import json

from paperdao.msg import (
    AccessLevel,
    ArticlePublication,
    Citation,
    ConfigUpdate,
    DaoConfig,
    DataItem,
    MemberAction,
    MemberChange,
    Proposal,
    ProposalStatus,
    ProposalType,
    VoteResponse,
    to_json,
)


def _item():
    return DataItem(
        owner="creator",
        ipfs_hash="QmTest",
        price=1000,
        is_public=False,
        total_earned=0,
        created_at=10,
        last_updated=10,
        metadata_uri="https://example.com/metadata.json",
        is_frozen=False,
    )


def test_uint128_fields_are_strings():
    item = _item()
    decoded = json.loads(to_json(item))
    assert decoded["price"] == str(item.price)
    assert decoded["total_earned"] == str(item.total_earned)
    assert decoded["created_at"] == item.created_at


def test_citation_amount_is_string():
    decoded = json.loads(to_json(Citation(citer="citer", amount=100_000, timestamp=5)))
    assert decoded == {"citer": "citer", "amount": "100000", "timestamp": 5}


def test_unit_enums_use_variant_names():
    assert json.loads(to_json(ProposalStatus.ACTIVE)) == "Active"
    assert json.loads(to_json(AccessLevel.NONE)) == "None"
    assert MemberAction.ADD.value == "Add"


def test_execution_data_is_externally_tagged():
    data = ArticlePublication(ipfs_hash="QmA", doi="10.1000/x", metadata_uri="uri")
    decoded = json.loads(to_json(data))
    assert list(decoded) == ["ArticlePublication"]
    assert decoded["ArticlePublication"]["doi"] == "10.1000/x"


def test_nested_config_update():
    config = DaoConfig(voting_period=604800, approval_threshold=51, min_members=1)
    decoded = json.loads(to_json(ConfigUpdate(new_config=config)))
    assert decoded["ConfigUpdate"]["new_config"]["approval_threshold"] == 51


def test_proposal_round_trip_fields():
    proposal = Proposal(
        id=3,
        proposer="creator",
        proposal_type=ProposalType.ADD_MEMBER,
        title="Add",
        description="d",
        created_at=1,
        voting_end=2,
        status=ProposalStatus.ACTIVE,
        execution_data=MemberChange(member_address="new_member", action=MemberAction.ADD),
    )
    decoded = json.loads(to_json(proposal))
    assert decoded["proposal_type"] == "AddMember"
    assert decoded["execution_data"]["MemberChange"]["action"] == "Add"
    assert decoded["id"] == proposal.id


def test_missing_option_becomes_null():
    assert json.loads(to_json(VoteResponse(vote=None))) == {"vote": None}


def test_proposal_default_execution_data_and_mutation():
    proposal = Proposal(1, "p", ProposalType.UPDATE_CONFIG, "t", "d", 0, 5, ProposalStatus.ACTIVE)
    assert proposal.execution_data is None
    proposal.status = ProposalStatus.EXPIRED
    assert json.loads(to_json(proposal))["status"] == "Expired"


def test_lists_serialise_elementwise():
    decoded = json.loads(to_json([ProposalStatus.PASSED, ProposalStatus.REJECTED]))
    assert decoded == ["Passed", "Rejected"]