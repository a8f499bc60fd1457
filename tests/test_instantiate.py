import pytest

from paperdao.context import Coin, Env, MessageInfo
from paperdao.errors import StdError
from paperdao.instantiate import instantiate
from paperdao.msg import InstantiateMsg
from paperdao.state import ContractState


def _setup(owner="creator"):
    state = ContractState()
    msg = InstantiateMsg(name="Research Data NFT", symbol="RDN", owner=owner)
    info = MessageInfo(sender="creator", funds=[Coin("earth", 1000)])
    return state, instantiate(state, Env(), info, msg)


def test_contract_info_saved():
    state, response = _setup()
    assert state.contract_name == "Research Data NFT"
    assert state.contract_symbol == "RDN"
    assert state.contract_owner == "creator"
    assert response.messages == []


def test_dao_initialised():
    state, response = _setup()
    assert response.attribute("dao_initialized") == "true"
    assert response.attribute("first_dao_member") == "creator"
    assert state.dao_members == {"creator": True}
    assert state.dao_config.voting_period == 604800
    assert state.dao_config.approval_threshold == 51
    assert state.dao_config.min_members == 1
    assert state.proposal_counter == 0


def test_counters_and_fee():
    state, response = _setup()
    assert state.token_id_counter == 0
    assert state.token_count == 0
    assert state.base_citation_fee == 100_000
    assert response.attribute("base_citation_fee") == "1000000"


def test_response_attributes_order():
    _, response = _setup()
    keys = [key for key, _ in response.attributes]
    assert keys[:4] == ["action", "name", "symbol", "owner"]
    assert response.attribute("action") == "instantiate"


def test_invalid_owner_rejected():
    with pytest.raises(StdError):
        _setup(owner="ab")


def test_invalid_owner_leaves_state_untouched():
    state = ContractState()
    msg = InstantiateMsg(name="n", symbol="s", owner="Creator")
    with pytest.raises(StdError):
        instantiate(state, Env(), MessageInfo(sender="creator"), msg)
    assert state.dao_members == {}
    assert state.contract_name is None