"""Execution context: block environment, caller info, coins and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import StdError

_MIN_ADDRESS_LENGTH = 3
_MAX_ADDRESS_LENGTH = 90


@dataclass
class Coin:
    denom: str
    amount: int


@dataclass
class BankSend:
    """A bank transfer to be carried out after the call succeeds."""

    to_address: str
    amount: list[Coin]


@dataclass
class Env:
    """Block environment; ``time`` is in seconds."""

    time: int = 1_571_797_419
    height: int = 12_345
    chain_id: str = "cosmos-testnet-14002"


@dataclass
class MessageInfo:
    sender: str
    funds: list[Coin] = field(default_factory=list)


@dataclass
class Response:
    attributes: list[tuple[str, str]] = field(default_factory=list)
    messages: list[Any] = field(default_factory=list)

    def add_attribute(self, key: str, value: Any) -> "Response":
        """Append an attribute and return the response for chaining."""
        if isinstance(value, bool):
            text = "true" if value else "false"
        else:
            text = str(value)
        self.attributes.append((key, text))
        return self

    def add_message(self, message: Any) -> "Response":
        """Append a message and return the response for chaining."""
        self.messages.append(message)
        return self

    def attribute(self, key: str) -> str:
        """Return the value of the first attribute named ``key``."""
        for name, value in self.attributes:
            if name == key:
                return value
        raise KeyError(key)


def validate_address(address: str) -> str:
    """Check that an address is well formed and normalised; return it."""
    if len(address) < _MIN_ADDRESS_LENGTH:
        raise StdError(
            f"Invalid input: human address too short (must be >= {_MIN_ADDRESS_LENGTH})"
        )
    if len(address) > _MAX_ADDRESS_LENGTH:
        raise StdError(
            f"Invalid input: human address too long (must be <= {_MAX_ADDRESS_LENGTH})"
        )
    if address != address.strip().lower():
        raise StdError("Invalid input: address not normalized")
    return address