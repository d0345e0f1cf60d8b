"""State containers for the simulated ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Account:
    """A plain account. Balances are in wei."""

    address: str
    balance: int = 0
    nonce: int = 0


@dataclass
class Contract:
    """A deployed contract. Its balance lives on the account at the same address."""

    address: str
    bytecode: str
    code_hash: str
    storage: dict[str, str] = field(default_factory=dict)


@dataclass
class Transaction:
    """A synthetic transaction submitted to the ledger."""

    from_address: str
    to_address: str
    value: int = 0
    data: str = "0x"
    gas_limit: int = 100_000
    gas_price: int = 1

    @property
    def selector(self) -> str:
        """The 4-byte function selector carried in ``data`` (``0x`` + 8 hex)."""
        return self.data[:10].lower()


@dataclass
class Block:
    """The single synthetic block the ledger keeps."""

    number: int
    hash: str
    timestamp: int  # milliseconds since epoch
    gas_limit: int


@dataclass
class ExecutionResult:
    """Outcome of :meth:`LedgerSimulator.execute_transaction`."""

    success: bool
    gas_used: int
    logs: list[str] = field(default_factory=list)


@dataclass
class SimulationResult:
    """Outcome of a scripted exploit narrative."""

    success: bool
    logs: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "logs": list(self.logs), **self.metadata}
