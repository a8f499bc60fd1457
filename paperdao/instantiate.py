"""Contract initialisation."""

from __future__ import annotations

from .context import Env, MessageInfo, Response, validate_address
from .msg import DaoConfig, InstantiateMsg
from .state import ContractState

DEFAULT_BASE_CITATION_FEE = 100_000
DEFAULT_VOTING_PERIOD = 604_800
DEFAULT_APPROVAL_THRESHOLD = 51
DEFAULT_MIN_MEMBERS = 1


def instantiate(
    state: ContractState, env: Env, info: MessageInfo, msg: InstantiateMsg
) -> Response:
    """Set up contract info, counters and the DAO with the owner as first member."""
    owner = validate_address(msg.owner)

    state.contract_name = msg.name
    state.contract_symbol = msg.symbol
    state.contract_owner = owner
    state.token_id_counter = 0
    state.token_count = 0
    state.base_citation_fee = DEFAULT_BASE_CITATION_FEE

    state.dao_members[owner] = True
    state.dao_config = DaoConfig(
        voting_period=DEFAULT_VOTING_PERIOD,
        approval_threshold=DEFAULT_APPROVAL_THRESHOLD,
        min_members=DEFAULT_MIN_MEMBERS,
    )
    state.proposal_counter = 0

    return (
        Response()
        .add_attribute("action", "instantiate")
        .add_attribute("name", msg.name)
        .add_attribute("symbol", msg.symbol)
        .add_attribute("owner", owner)
        .add_attribute("dao_initialized", "true")
        .add_attribute("first_dao_member", owner)
        .add_attribute("base_citation_fee", "1000000")
    )