# paperdao

`paperdao` keeps a registry of research papers as tokens and uses a small
DAO to decide what gets published. It is a plain Python library. All state
lives in memory in a `ContractState`. Every state-changing operation returns
a `Response` that carries string attributes and any `BankSend` messages.

## What it does

- **Papers as tokens.** Papers can be created, transferred and approved for
  a single spender or for an operator over all of an owner's tokens. The
  content hash and metadata URI of a paper can be updated unless the paper
  is frozen, and each update adds a `DataVersion` to its history.
  `submit_correction` mints a new token whose DOI is the original DOI with
  a `-vN` suffix.
- **Citations.** Citing a paper requires a payment in `inj` of at least the
  base citation fee. The payment is split into two `BankSend` messages:
  95% to the paper's owner and 5% (rounded down) to the contract owner.
  Only the contract owner can change the fee.
- **Access control.** A token's owner, approved spender or operator can set
  another address's `AccessLevel` (`None`, `Read`, `Write`). Requesting
  access to a public item always succeeds. Requesting access to a private
  item needs ownership, an approval or an access level other than `None`.
  If funds are attached, they must cover the item's price, and they are
  forwarded to the owner.
- **DAO governance.**
  - Anyone may submit an article proposal. The IPFS hash must start with
    `Qm` or `bafy`, and the DOI must contain `/`.
  - Only members may submit member proposals (add or remove) or
    configuration proposals.
  - Members vote `Yes`, `No` or `Abstain`. A later vote from the same
    member replaces the earlier one.
  - A proposal passes once its Yes votes reach the approval threshold
    (rounded up). It is rejected once passing has become impossible. It
    expires when its voting period is over.
  - An article proposal that passes is published straight away as a paper
    owned by its proposer. If that step fails, the proposal stays `Passed`
    and a member can carry it out with `execute_proposal`.
  - The last member cannot be removed.

Defaults set by `instantiate`:

| Setting            | Value                   |
|--------------------|-------------------------|
| voting period      | 604800 seconds (7 days) |
| approval threshold | 51%                     |
| minimum members    | 1                       |
| base citation fee  | 100000                  |

The owner named in the `InstantiateMsg` becomes the first DAO member.
The `base_citation_fee` attribute on the instantiate response reads
`"1000000"`. The fee actually stored is 100000.

A configuration change must keep the voting period between 3600 seconds
(one hour) and 2592000 seconds (30 days). The threshold must be from 1 to
100, and the minimum member count must be at least 1 and no more than the
current number of members.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from paperdao.contract import Contract
from paperdao.context import Coin, Env, MessageInfo
from paperdao.msg import InstantiateMsg

contract = Contract()
env = Env(time=1_700_000_000)

contract.instantiate(
    env,
    MessageInfo(sender="creator"),
    InstantiateMsg(name="Research Data NFT", symbol="RDN", owner="creator"),
)

contract.execute(env, MessageInfo(sender="author"), {
    "submit_article_proposal": {
        "ipfs_hash": "QmExampleArticle",
        "doi": "10.1000/example.article",
        "metadata_uri": "https://example.com/article.json",
        "title": "An article",
        "description": "Submitted for DAO approval",
    }
})

response = contract.execute(env, MessageInfo(sender="creator"), {
    "vote_on_proposal": {"proposal_id": 0, "choice": "Yes"}
})
print(response.attribute("proposal_status"))  # Executed

print(contract.query(env, {"get_paper_doi": {"paper_id": "0"}}))
# "10.1000/example.article"

response = contract.execute(
    env,
    MessageInfo(sender="citer", funds=[Coin(denom="inj", amount=100_000)]),
    {"cite_paper": {"paper_id": "0"}},
)
print(len(response.messages))  # 2
```

Messages passed to `Contract.execute` and `Contract.query` (or to the
module-level `execute` and `query` functions) have a single snake_case key
that names the operation, such as `vote_on_proposal` or `get_proposals`.
They may be given as a mapping or as JSON text or bytes. Queries return
compact JSON text. Each handler can also be called directly with a
`ContractState`, for example
`paperdao.voting.vote_on_proposal(state, env, info, 0, VoteChoice.YES)`.

## Modules

- `paperdao.contract`: `Contract` and the `execute` / `query` dispatchers.
- `paperdao.instantiate`: `instantiate`, which sets up a fresh `ContractState`.
- `paperdao.tokens`: papers, corrections, citations, approvals, transfers
  and access control.
- `paperdao.proposals`: submitting and executing DAO proposals, and
  `count_dao_members`.
- `paperdao.voting`: `vote_on_proposal`, status updates, tallies and
  threshold checks.
- `paperdao.query`: read-only `query_*` functions. `query_all_tokens` and
  `query_proposals` page their results, 30 items by default and 100 at most.
- `paperdao.helpers`: checks on membership, proposal timing, status
  transitions and configuration.
- `paperdao.msg`: enums, records and response dataclasses, and `to_json`.
- `paperdao.context`: `Env`, `MessageInfo`, `Coin`, `BankSend`, `Response`
  and `validate_address`.
- `paperdao.state`: `ContractState` and the `load` helper.
- `paperdao.errors`: the `ContractError` hierarchy.

A failed operation raises a subclass of `ContractError`, for example
`NotDaoMember`, `ProposalNotFound`, `TokenNotFound` or
`InsufficientPayment`. Other failures raise `StdError`, and its subclass
`NotFoundError` is raised when a stored record that is asked for is missing.

## What it does not do

- State is held only in memory. Nothing is written to disk, and there is
  no database behind `ContractState`.
- `BankSend` messages are only returned in the `Response`. No funds are
  moved and no balances are kept.
- There is no command-line program, no server, and no JSON Schema export
  of the message types.