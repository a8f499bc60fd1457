"""Contract entry points: message dispatch for execution and queries.

Messages use the JSON shape of externally tagged, snake_case variants, for
example ``{"vote_on_proposal": {"proposal_id": 0, "choice": "Yes"}}``. They
may be given as a mapping or as JSON text or bytes. Query results are
returned as compact JSON text.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Optional, Union

from .context import Env, MessageInfo, Response
from .errors import StdError
from .instantiate import instantiate as _instantiate
from .msg import (
    AccessLevel,
    InstantiateMsg,
    MemberAction,
    ProposalStatus,
    VoteChoice,
    to_json,
)
from .proposals import (
    execute_proposal,
    submit_article_proposal,
    submit_member_proposal,
    update_dao_config,
)
from .query import (
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
from .state import ContractState
from .tokens import (
    approve,
    approve_all,
    cite_paper,
    create_paper_item,
    freeze_data,
    grant_access,
    request_access,
    revoke_all,
    set_base_citation_fee,
    submit_correction,
    transfer_nft,
    update_data_item,
)
from .voting import vote_on_proposal

Message = Union[Mapping[str, Any], str, bytes]

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_U128_MAX = 2**128 - 1


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise StdError(f"Error parsing message: expected a string, found {value!r}")
    return value


def _flag(value: Any) -> bool:
    if not isinstance(value, bool):
        raise StdError(f"Error parsing message: expected a boolean, found {value!r}")
    return value


def _unsigned(maximum: int) -> Callable[[Any], int]:
    def convert(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
            raise StdError(
                f"Error parsing message: expected an integer in 0..={maximum}, found {value!r}"
            )
        return value

    return convert


def _uint128(value: Any) -> int:
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    return _unsigned(_U128_MAX)(value)


def _enum(kind: type[Enum]) -> Callable[[Any], Enum]:
    def convert(value: Any) -> Enum:
        try:
            return kind(value)
        except ValueError:
            raise StdError(
                f"Error parsing message: unknown variant {value!r} of {kind.__name__}"
            ) from None

    return convert


_u32 = _unsigned(_U32_MAX)
_u64 = _unsigned(_U64_MAX)

# A field: (name, converter, optional).
_Field = tuple[str, Callable[[Any], Any], bool]


def _required(name: str, convert: Callable[[Any], Any] = _text) -> _Field:
    return (name, convert, False)


def _optional(name: str, convert: Callable[[Any], Any]) -> _Field:
    return (name, convert, True)


_EXECUTE: dict[str, tuple[Callable[..., Response], tuple[_Field, ...]]] = {
    "request_access": (request_access, (_required("token_id"),)),
    "update_data_item": (
        update_data_item,
        (
            _required("token_id"),
            _required("new_ipfs_hash"),
            _required("new_metadata_uri"),
        ),
    ),
    "freeze_data": (freeze_data, (_required("token_id"), _required("freeze", _flag))),
    "grant_access": (
        grant_access,
        (
            _required("token_id"),
            _required("grantee"),
            _required("level", _enum(AccessLevel)),
        ),
    ),
    "transfer_nft": (transfer_nft, (_required("recipient"), _required("token_id"))),
    "approve": (approve, (_required("spender"), _required("token_id"))),
    "approve_all": (approve_all, (_required("operator"),)),
    "revoke_all": (revoke_all, (_required("operator"),)),
    "set_base_citation_fee": (set_base_citation_fee, (_required("fee", _uint128),)),
    "cite_paper": (cite_paper, (_required("paper_id"),)),
    "create_paper_item": (
        create_paper_item,
        (_required("ipfs_hash"), _required("doi"), _required("metadata_uri")),
    ),
    "submit_correction": (
        submit_correction,
        (_required("original_paper_id"), _required("new_ipfs_hash")),
    ),
    "submit_article_proposal": (
        submit_article_proposal,
        (
            _required("ipfs_hash"),
            _required("doi"),
            _required("metadata_uri"),
            _required("title"),
            _required("description"),
        ),
    ),
    "submit_member_proposal": (
        submit_member_proposal,
        (
            _required("member_address"),
            _required("action", _enum(MemberAction)),
            _required("title"),
            _required("description"),
        ),
    ),
    "vote_on_proposal": (
        vote_on_proposal,
        (_required("proposal_id", _u64), _required("choice", _enum(VoteChoice))),
    ),
    "execute_proposal": (execute_proposal, (_required("proposal_id", _u64),)),
    "update_dao_config": (
        update_dao_config,
        (
            _optional("voting_period", _u64),
            _optional("approval_threshold", _u64),
            _optional("min_members", _u64),
        ),
    ),
}

_QUERY: dict[str, tuple[Callable[..., Any], tuple[_Field, ...]]] = {
    "owner_of": (query_owner_of, (_required("token_id"),)),
    "token_info": (query_token_info, (_required("token_id"),)),
    "all_tokens": (
        query_all_tokens,
        (_optional("start_after", _text), _optional("limit", _u32)),
    ),
    "num_tokens": (query_num_tokens, ()),
    "contract_info": (query_contract_info, ()),
    "get_data_item": (query_data_item, (_required("token_id"),)),
    "get_data_versions": (query_data_versions, (_required("token_id"),)),
    "get_authorized_users": (query_authorized_users, (_required("token_id"),)),
    "check_access_level": (
        query_access_level,
        (_required("token_id"), _required("user")),
    ),
    "get_citations": (query_citations, (_required("paper_id"),)),
    "get_paper_doi": (query_paper_doi, (_required("paper_id"),)),
    "get_base_citation_fee": (query_base_citation_fee, ()),
    "get_dao_members": (query_dao_members, ()),
    "get_dao_config": (query_dao_config, ()),
    "get_proposal": (query_proposal, (_required("proposal_id", _u64),)),
    "get_proposals": (
        query_proposals,
        (
            _optional("start_after", _u64),
            _optional("limit", _u32),
            _optional("status_filter", _enum(ProposalStatus)),
        ),
    ),
    "get_vote": (query_vote, (_required("proposal_id", _u64), _required("voter"))),
    "get_vote_count": (query_vote_count, (_required("proposal_id", _u64),)),
    "get_member_voting_power": (query_member_voting_power, (_required("member"),)),
}


def _decode(msg: Message) -> Mapping[str, Any]:
    if isinstance(msg, (str, bytes, bytearray)):
        try:
            msg = json.loads(msg)
        except ValueError as error:
            raise StdError(f"Error parsing message: {error}") from None
    if not isinstance(msg, Mapping):
        raise StdError("Error parsing message: expected an object")
    return msg


def _split(msg: Message, known: Mapping[str, Any]) -> tuple[str, Mapping[str, Any]]:
    decoded = _decode(msg)
    if len(decoded) != 1:
        raise StdError("Error parsing message: expected exactly one variant")
    (name, body), = decoded.items()
    if name not in known:
        raise StdError(f"Error parsing message: unknown variant `{name}`")
    if not isinstance(body, Mapping):
        raise StdError(f"Error parsing message: variant `{name}` needs an object")
    return name, body


def _arguments(body: Mapping[str, Any], spec: tuple[_Field, ...]) -> list[Any]:
    values = []
    for name, convert, optional in spec:
        value = body.get(name)
        if value is None:
            if not optional:
                raise StdError(f"Error parsing message: missing field `{name}`")
            values.append(None)
        else:
            values.append(convert(value))
    return values


def execute(state: ContractState, env: Env, info: MessageInfo, msg: Message) -> Response:
    """Dispatch an execute message to its handler and return the response."""
    name, body = _split(msg, _EXECUTE)
    handler, spec = _EXECUTE[name]
    return handler(state, env, info, *_arguments(body, spec))


def query(state: ContractState, env: Env, msg: Message) -> str:
    """Dispatch a query message and return its result as JSON text."""
    name, body = _split(msg, _QUERY)
    handler, spec = _QUERY[name]
    return to_json(handler(state, *_arguments(body, spec)))


def _instantiate_msg(msg: Union[InstantiateMsg, Message]) -> InstantiateMsg:
    if isinstance(msg, InstantiateMsg):
        return msg
    body = _decode(msg)
    name, symbol, owner = _arguments(
        body, (_required("name"), _required("symbol"), _required("owner"))
    )
    return InstantiateMsg(name=name, symbol=symbol, owner=owner)


class Contract:
    """A contract instance holding its own state."""

    def __init__(self, state: Optional[ContractState] = None) -> None:
        self.state = state if state is not None else ContractState()

    def instantiate(
        self, env: Env, info: MessageInfo, msg: Union[InstantiateMsg, Message]
    ) -> Response:
        """Initialise the contract from an InstantiateMsg or its JSON form."""
        return _instantiate(self.state, env, info, _instantiate_msg(msg))

    def execute(self, env: Env, info: MessageInfo, msg: Message) -> Response:
        return execute(self.state, env, info, msg)

    def query(self, env: Env, msg: Message) -> str:
        return query(self.state, env, msg)