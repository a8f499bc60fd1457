import pytest

from paperdao.context import BankSend, Coin, Env, MessageInfo, Response, validate_address
from paperdao.errors import StdError


def test_add_attribute_chains_and_keeps_order():
    response = Response().add_attribute("method", "approve").add_attribute("token_id", 7)
    assert response.attributes == [("method", "approve"), ("token_id", "7")]


def test_bool_attribute_is_lowercase():
    response = Response().add_attribute("frozen", True).add_attribute("other", False)
    assert response.attribute("frozen") == "true"
    assert response.attribute("other") == "false"


def test_attribute_returns_first_match():
    response = Response().add_attribute("a", "1").add_attribute("a", "2")
    assert response.attribute("a") == "1"


def test_attribute_missing_raises_key_error():
    with pytest.raises(KeyError):
        Response().attribute("missing")


def test_add_message_collects_messages():
    send = BankSend(to_address="author", amount=[Coin(denom="inj", amount=95)])
    response = Response().add_message(send)
    assert response.messages == [send]
    assert response.messages[0].amount[0].denom == "inj"


def test_message_info_funds_not_shared():
    first = MessageInfo(sender="creator")
    second = MessageInfo(sender="author")
    first.funds.append(Coin("inj", 1))
    assert second.funds == []


def test_env_time_settable():
    assert Env(time=1000).time == 1000


def test_validate_address_accepts_normalised():
    assert validate_address("creator") == "creator"
    assert validate_address("new_member") == "new_member"


@pytest.mark.parametrize("address", ["", "ab", "Creator", " creator", "x" * 91])
def test_validate_address_rejects(address):
    with pytest.raises(StdError):
        validate_address(address)