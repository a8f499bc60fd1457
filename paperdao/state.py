"""Contract storage."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Optional, TypeVar

from .errors import NotFoundError
from .msg import (
    AccessLevel,
    Citation,
    DaoConfig,
    DataItem,
    DataVersion,
    Proposal,
    Vote,
    VoteCount,
)

V = TypeVar("V")


@dataclass
class ContractState:
    """All persisted contract data.

    Single values are ``None`` until the contract is instantiated. Keyed
    collections are plain dicts; iteration in key order matches storage order.
    """

    contract_name: Optional[str] = None
    contract_symbol: Optional[str] = None
    contract_owner: Optional[str] = None

    token_id_counter: Optional[int] = None
    token_count: Optional[int] = None

    token_owners: dict[str, str] = field(default_factory=dict)
    token_approvals: dict[str, str] = field(default_factory=dict)
    operator_approvals: dict[tuple[str, str], bool] = field(default_factory=dict)

    data_items: dict[str, DataItem] = field(default_factory=dict)
    data_versions: dict[str, list[DataVersion]] = field(default_factory=dict)
    access_controls: dict[tuple[str, str], AccessLevel] = field(default_factory=dict)
    authorized_users: dict[str, list[str]] = field(default_factory=dict)

    citations: dict[str, list[Citation]] = field(default_factory=dict)
    paper_dois: dict[str, str] = field(default_factory=dict)
    base_citation_fee: Optional[int] = None

    dao_members: dict[str, bool] = field(default_factory=dict)
    dao_config: Optional[DaoConfig] = None
    proposals: dict[int, Proposal] = field(default_factory=dict)
    proposal_counter: Optional[int] = None
    votes: dict[tuple[int, str], Vote] = field(default_factory=dict)
    vote_counts: dict[int, VoteCount] = field(default_factory=dict)


def load(mapping: Mapping[Hashable, V], key: Hashable, kind: str) -> V:
    """Return ``mapping[key]``, raising NotFoundError naming ``kind`` if absent."""
    try:
        return mapping[key]
    except KeyError:
        raise NotFoundError(f"{kind} not found") from None