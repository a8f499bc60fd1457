"""Message, record and response types, and their JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Optional, Union

_U128 = {"uint128": True}


class AccessLevel(Enum):
    NONE = "None"
    READ = "Read"
    WRITE = "Write"


class ProposalType(Enum):
    ARTICLE_PUBLICATION = "ArticlePublication"
    ADD_MEMBER = "AddMember"
    REMOVE_MEMBER = "RemoveMember"
    UPDATE_CONFIG = "UpdateConfig"


class ProposalStatus(Enum):
    ACTIVE = "Active"
    PASSED = "Passed"
    REJECTED = "Rejected"
    EXECUTED = "Executed"
    EXPIRED = "Expired"


class VoteChoice(Enum):
    YES = "Yes"
    NO = "No"
    ABSTAIN = "Abstain"


class MemberAction(Enum):
    ADD = "Add"
    REMOVE = "Remove"


@dataclass
class InstantiateMsg:
    name: str
    symbol: str
    owner: str


@dataclass
class DataItem:
    owner: str
    ipfs_hash: str
    price: int = field(metadata=_U128)
    is_public: bool
    total_earned: int = field(metadata=_U128)
    created_at: int
    last_updated: int
    metadata_uri: str
    is_frozen: bool


@dataclass
class DataVersion:
    ipfs_hash: str
    timestamp: int


@dataclass
class TokenInfoResponse:
    token_id: str
    owner: str
    data_item: DataItem


@dataclass
class ContractInfoResponse:
    name: str
    symbol: str
    owner: str


@dataclass
class OwnerOfResponse:
    owner: str


@dataclass
class NumTokensResponse:
    count: int


@dataclass
class Citation:
    citer: str
    amount: int = field(metadata=_U128)
    timestamp: int


@dataclass
class BaseCitationFeeResponse:
    fee: int = field(metadata=_U128)


@dataclass
class DaoConfig:
    """Voting period in seconds, approval threshold in percent, minimum members."""

    voting_period: int
    approval_threshold: int
    min_members: int


@dataclass
class ArticlePublication:
    ipfs_hash: str
    doi: str
    metadata_uri: str


@dataclass
class MemberChange:
    member_address: str
    action: MemberAction


@dataclass
class ConfigUpdate:
    new_config: DaoConfig


ExecutionData = Union[ArticlePublication, MemberChange, ConfigUpdate]
_EXECUTION_VARIANTS = (ArticlePublication, MemberChange, ConfigUpdate)


@dataclass
class Proposal:
    id: int
    proposer: str
    proposal_type: ProposalType
    title: str
    description: str
    created_at: int
    voting_end: int
    status: ProposalStatus
    execution_data: Optional[ExecutionData] = None


@dataclass
class Vote:
    voter: str
    choice: VoteChoice
    timestamp: int


@dataclass
class VoteCount:
    yes: int
    no: int
    abstain: int
    total_eligible: int


@dataclass
class DaoMembersResponse:
    members: list[str]
    total_count: int


@dataclass
class ProposalsResponse:
    proposals: list[Proposal]
    total_count: int


@dataclass
class VotingPowerResponse:
    power: int
    is_member: bool


@dataclass
class DaoConfigResponse:
    config: DaoConfig


@dataclass
class ProposalResponse:
    proposal: Proposal


@dataclass
class VoteResponse:
    vote: Optional[Vote]


@dataclass
class VoteCountResponse:
    vote_count: VoteCount


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        body = {
            f.name: (
                str(getattr(value, f.name))
                if f.metadata.get("uint128")
                else _plain(getattr(value, f.name))
            )
            for f in fields(value)
        }
        if isinstance(value, _EXECUTION_VARIANTS):
            return {type(value).__name__: body}
        return body
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    return value


def to_json(value: Any) -> str:
    """Serialise a message, record or response to compact JSON."""
    return json.dumps(_plain(value), separators=(",", ":"))