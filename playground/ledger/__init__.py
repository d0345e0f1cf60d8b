"""Simulated ledger: accounts, contracts, a synthetic block and scripted exploits."""

from playground.ledger.models import (
    Account,
    Block,
    Contract,
    ExecutionResult,
    SimulationResult,
    Transaction,
)
from playground.ledger.simulator import SEED_ACCOUNTS, LedgerSimulator

__all__ = [
    "Account",
    "Block",
    "Contract",
    "ExecutionResult",
    "LedgerSimulator",
    "SEED_ACCOUNTS",
    "SimulationResult",
    "Transaction",
]
