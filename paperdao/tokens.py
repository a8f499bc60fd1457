"""Paper and data tokens: creation, corrections, citations, access and transfers."""

from __future__ import annotations

from typing import Optional, TypeVar

from .context import BankSend, Coin, Env, MessageInfo, Response, validate_address
from .errors import (
    DataFrozen,
    InsufficientPayment,
    NotAuthorized,
    NotFoundError,
    TokenExists,
    TokenNotFound,
)
from .msg import AccessLevel, Citation, DataItem, DataVersion
from .state import ContractState, load

DENOM = "inj"
DAO_SHARE_PERCENT = 5

T = TypeVar("T")


def _require(value: Optional[T], kind: str) -> T:
    if value is None:
        raise NotFoundError(f"{kind} not found")
    return value


def _payment(info: MessageInfo) -> int:
    return next((coin.amount for coin in info.funds if coin.denom == DENOM), 0)


def _token_owner(state: ContractState, token_id: str) -> str:
    try:
        return state.token_owners[token_id]
    except KeyError:
        raise TokenNotFound() from None


def _data_item(state: ContractState, token_id: str) -> DataItem:
    try:
        return state.data_items[token_id]
    except KeyError:
        raise TokenNotFound() from None


def is_approved_or_owner(state: ContractState, spender: str, token_id: str) -> bool:
    """Return whether ``spender`` owns the token, is approved for it, or is an operator."""
    owner = load(state.token_owners, token_id, "token owner")
    if owner == spender:
        return True
    if state.token_approvals.get(token_id) == spender:
        return True
    return state.operator_approvals.get((owner, spender), False)


def _ensure_approved_or_owner(state: ContractState, spender: str, token_id: str) -> None:
    if not is_approved_or_owner(state, spender, token_id):
        raise NotAuthorized()


def _mint(
    state: ContractState,
    env: Env,
    owner: str,
    ipfs_hash: str,
    metadata_uri: str,
    doi: str,
) -> str:
    """Create a new public, free token and return its id."""
    token_id = _require(state.token_id_counter, "token id counter")
    count = _require(state.token_count, "token count")
    token_key = str(token_id)
    if token_key in state.token_owners:
        raise TokenExists()

    state.token_owners[token_key] = owner
    state.data_items[token_key] = DataItem(
        owner=owner,
        ipfs_hash=ipfs_hash,
        price=0,
        is_public=True,
        total_earned=0,
        created_at=env.time,
        last_updated=env.time,
        metadata_uri=metadata_uri,
        is_frozen=False,
    )
    state.data_versions[token_key] = [DataVersion(ipfs_hash=ipfs_hash, timestamp=env.time)]
    state.paper_dois[token_key] = doi
    state.token_id_counter = token_id + 1
    state.token_count = count + 1
    return token_key


def create_paper_item(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    ipfs_hash: str,
    doi: str,
    metadata_uri: str,
) -> Response:
    """Mint a public paper token owned by the sender."""
    token_id = _mint(state, env, info.sender, ipfs_hash, metadata_uri, doi)
    return (
        Response()
        .add_attribute("method", "create_paper_item")
        .add_attribute("token_id", token_id)
        .add_attribute("owner", info.sender)
        .add_attribute("ipfs_hash", ipfs_hash)
        .add_attribute("paper_doi", doi)
        .add_attribute("paper_type", "academic_paper")
    )


def cite_paper(state: ContractState, env: Env, info: MessageInfo, paper_id: str) -> Response:
    """Record a paid citation and split the payment between author and DAO."""
    paper_owner = _token_owner(state, paper_id)
    base_fee = _require(state.base_citation_fee, "base citation fee")

    payment = _payment(info)
    if payment < base_fee:
        raise InsufficientPayment()

    state.citations.setdefault(paper_id, []).append(
        Citation(citer=info.sender, amount=payment, timestamp=env.time)
    )

    response = (
        Response()
        .add_attribute("method", "cite_paper")
        .add_attribute("paper_id", paper_id)
        .add_attribute("citer", info.sender)
        .add_attribute("amount", payment)
    )

    if payment > 0:
        dao_share = payment * DAO_SHARE_PERCENT // 100
        author_share = payment - dao_share
        contract_owner = _require(state.contract_owner, "contract owner")
        response.add_message(
            BankSend(to_address=paper_owner, amount=[Coin(DENOM, author_share)])
        ).add_message(BankSend(to_address=contract_owner, amount=[Coin(DENOM, dao_share)]))

    return response


def submit_correction(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    original_paper_id: str,
    new_ipfs_hash: str,
) -> Response:
    """Mint a corrected version of a paper with a versioned DOI."""
    _ensure_approved_or_owner(state, info.sender, original_paper_id)

    original = load(state.data_items, original_paper_id, "data item")
    original_doi = load(state.paper_dois, original_paper_id, "paper doi")
    original_versions = load(state.data_versions, original_paper_id, "data versions")
    correction_doi = f"{original_doi}-v{len(original_versions) + 1}"

    token_id = _mint(
        state, env, info.sender, new_ipfs_hash, original.metadata_uri, correction_doi
    )
    return (
        Response()
        .add_attribute("method", "submit_correction")
        .add_attribute("token_id", token_id)
        .add_attribute("original_paper_id", original_paper_id)
        .add_attribute("correction_id", token_id)
        .add_attribute("correction_doi", correction_doi)
        .add_attribute("correction_type", "paper_correction")
    )


def set_base_citation_fee(
    state: ContractState, env: Env, info: MessageInfo, fee: int
) -> Response:
    """Let the contract owner change the minimum citation fee."""
    if info.sender != _require(state.contract_owner, "contract owner"):
        raise NotAuthorized()
    state.base_citation_fee = fee
    return (
        Response()
        .add_attribute("method", "set_base_citation_fee")
        .add_attribute("new_fee", fee)
    )


def request_access(
    state: ContractState, env: Env, info: MessageInfo, token_id: str
) -> Response:
    """Request access to a token's data, paying the owner for private items."""
    owner = _token_owner(state, token_id)
    data_item = load(state.data_items, token_id, "data item")

    response = (
        Response()
        .add_attribute("method", "request_access")
        .add_attribute("token_id", token_id)
        .add_attribute("requester", info.sender)
    )

    if data_item.is_public:
        return response

    level = state.access_controls.get((token_id, info.sender), AccessLevel.NONE)
    allowed = (
        owner == info.sender
        or state.token_approvals.get(token_id) == info.sender
        or state.operator_approvals.get((owner, info.sender), False)
        or level is not AccessLevel.NONE
    )
    if not allowed:
        raise NotAuthorized()

    if info.funds:
        payment = _payment(info)
        if payment < data_item.price:
            raise InsufficientPayment()
        if payment > 0:
            response.add_message(BankSend(to_address=owner, amount=[Coin(DENOM, payment)]))
            data_item.total_earned += payment

    return response


def update_data_item(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    token_id: str,
    new_ipfs_hash: str,
    new_metadata_uri: str,
) -> Response:
    """Point a token at new content and record the new version."""
    data_item = _data_item(state, token_id)
    _ensure_approved_or_owner(state, info.sender, token_id)
    if data_item.is_frozen:
        raise DataFrozen()

    versions = load(state.data_versions, token_id, "data versions")
    data_item.ipfs_hash = new_ipfs_hash
    data_item.metadata_uri = new_metadata_uri
    data_item.last_updated = env.time
    versions.append(DataVersion(ipfs_hash=new_ipfs_hash, timestamp=env.time))

    return (
        Response()
        .add_attribute("method", "update_data_item")
        .add_attribute("token_id", token_id)
        .add_attribute("new_ipfs_hash", new_ipfs_hash)
    )


def freeze_data(
    state: ContractState, env: Env, info: MessageInfo, token_id: str, freeze: bool
) -> Response:
    """Freeze or unfreeze a token's data against updates."""
    data_item = _data_item(state, token_id)
    _ensure_approved_or_owner(state, info.sender, token_id)
    data_item.is_frozen = freeze
    return (
        Response()
        .add_attribute("method", "freeze_data")
        .add_attribute("token_id", token_id)
        .add_attribute("frozen", freeze)
    )


def grant_access(
    state: ContractState,
    env: Env,
    info: MessageInfo,
    token_id: str,
    grantee: str,
    level: AccessLevel,
) -> Response:
    """Set a user's access level on a token and keep the authorised list in step."""
    _ensure_approved_or_owner(state, info.sender, token_id)
    grantee_addr = validate_address(grantee)

    state.access_controls[(token_id, grantee)] = level
    authorized = state.authorized_users.setdefault(token_id, [])
    if level is not AccessLevel.NONE:
        if grantee_addr not in authorized:
            authorized.append(grantee_addr)
    else:
        authorized[:] = [addr for addr in authorized if addr != grantee_addr]

    return (
        Response()
        .add_attribute("method", "grant_access")
        .add_attribute("token_id", token_id)
        .add_attribute("grantee", grantee)
        .add_attribute("level", level.value)
    )


def transfer_nft(
    state: ContractState, env: Env, info: MessageInfo, recipient: str, token_id: str
) -> Response:
    """Move a token to a new owner and clear its single-token approval."""
    owner = _token_owner(state, token_id)
    _ensure_approved_or_owner(state, info.sender, token_id)
    recipient_addr = validate_address(recipient)
    data_item = load(state.data_items, token_id, "data item")

    state.token_owners[token_id] = recipient_addr
    data_item.owner = recipient_addr
    state.token_approvals.pop(token_id, None)

    return (
        Response()
        .add_attribute("method", "transfer_nft")
        .add_attribute("token_id", token_id)
        .add_attribute("from", owner)
        .add_attribute("to", recipient_addr)
    )


def approve(
    state: ContractState, env: Env, info: MessageInfo, spender: str, token_id: str
) -> Response:
    """Let the owner approve one spender for a token."""
    owner = _token_owner(state, token_id)
    if owner != info.sender:
        raise NotAuthorized()
    spender_addr = validate_address(spender)
    state.token_approvals[token_id] = spender_addr
    return (
        Response()
        .add_attribute("method", "approve")
        .add_attribute("token_id", token_id)
        .add_attribute("spender", spender_addr)
    )


def approve_all(state: ContractState, env: Env, info: MessageInfo, operator: str) -> Response:
    """Make ``operator`` an operator over all of the sender's tokens."""
    operator_addr = validate_address(operator)
    state.operator_approvals[(info.sender, operator)] = True
    return (
        Response()
        .add_attribute("method", "approve_all")
        .add_attribute("owner", info.sender)
        .add_attribute("operator", operator_addr)
    )


def revoke_all(state: ContractState, env: Env, info: MessageInfo, operator: str) -> Response:
    """Withdraw ``operator``'s rights over the sender's tokens."""
    operator_addr = validate_address(operator)
    state.operator_approvals.pop((info.sender, operator), None)
    return (
        Response()
        .add_attribute("method", "revoke_all")
        .add_attribute("owner", info.sender)
        .add_attribute("operator", operator_addr)
    )