"""Ledger simulator - a miniature account/contract state machine.

Stands in for a blockchain during lessons. Nothing here executes real
bytecode: contract calls are dispatched on a fixed selector table and the
exploit narratives are scripted. Hashes and addresses come from a 32-bit
rolling hash and carry no cryptographic meaning.

Known simplifications:
  - A known sender's nonce increments on every transaction attempt, even
    when the transaction then fails. This includes rejection for
    insufficient balance, where a stricter ledger would leave the nonce
    unchanged.
  - Deploying does not increment the deployer nonce, so repeated deploys
    from the same deployer land on the same address (the later one wins).
"""

from __future__ import annotations

import logging
import random
import time
from decimal import Decimal

from playground.core.config import ETHER, Settings, get_settings
from playground.core.errors import RuntimeSimulationFailure
from playground.ledger.models import (
    Account,
    Block,
    Contract,
    ExecutionResult,
    SimulationResult,
    Transaction,
)

logger = logging.getLogger(__name__)


SEED_ACCOUNTS: tuple[str, ...] = (
    "0x1234567890123456789012345678901234567890",
    "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd",
    "0x1111111111111111111111111111111111111111",
    "0x2222222222222222222222222222222222222222",
)

# selector → (function name, canned log lines)
SELECTOR_TABLE: dict[str, tuple[str, tuple[str, ...]]] = {
    "0x8da5cb5b": ("owner", ("Getting owner address",)),
    "0x27dce7ec": ("withdraw", ("Withdrawing funds...",)),
    "0xa9059cbb": ("transfer", ("Transferring tokens...",)),
    "0x40c10f19": ("mint", ("Minting tokens...",)),
}

MINTED_TOKENS = 1000


def rolling_hash(data: str) -> str:
    """Non-cryptographic 32-bit rolling hash, hex-padded to 64 chars."""
    h = 0
    for ch in data:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return format(abs(h), "064x")


def format_ether(wei: int) -> str:
    return f"{Decimal(wei) / Decimal(ETHER):.6f}"


def _now_ms() -> int:
    return int(time.time() * 1000)


class LedgerSimulator:
    """Session-owned ledger holding accounts, contracts and one block.

    Args:
        settings: Gas and balance constants (defaults to ``get_settings()``)
        rng: Randomness source for block hashes; pass a seeded
            ``random.Random`` for reproducible runs
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._rng = rng or random.Random(self._settings.random_seed)
        self._accounts: dict[str, Account] = {}
        self._contracts: dict[str, Contract] = {}
        self._total_gas_used = 0
        self._block = Block(
            number=1,
            hash=self._random_hash(),
            timestamp=_now_ms(),
            gas_limit=self._settings.block_gas_limit,
        )
        for address in SEED_ACCOUNTS:
            self.create_account(address, self._settings.seed_account_balance)

    # ── Accounts ─────────────────────────────────────────────────────────

    def create_account(self, address: str, balance: int | None = None) -> Account:
        """Create an account, replacing any existing one at ``address``."""
        if balance is None:
            balance = self._settings.default_account_balance
        if balance < 0:
            raise ValueError("Account balance cannot be negative")
        account = Account(address=address, balance=balance, nonce=0)
        self._accounts[address] = account
        return account

    def get_account(self, address: str) -> Account | None:
        return self._accounts.get(address)

    def get_balance(self, address: str) -> int:
        account = self._accounts.get(address)
        return account.balance if account else 0

    @property
    def accounts(self) -> dict[str, Account]:
        return dict(self._accounts)

    # ── Contracts ────────────────────────────────────────────────────────

    @staticmethod
    def contract_address_for(deployer_address: str, nonce: int) -> str:
        return "0x" + rolling_hash(deployer_address + str(nonce))[26:]

    def deploy_contract(self, bytecode: str, deployer_address: str, value: int = 0) -> str:
        """Register a contract and return its address.

        The address depends only on the deployer address and its current
        nonce. ``value`` is moved from the deployer into the contract's
        account as an initial endowment.
        """
        deployer = self._accounts.get(deployer_address)
        nonce = deployer.nonce if deployer else 0
        address = self.contract_address_for(deployer_address, nonce)

        if value:
            if deployer is None or deployer.balance < value:
                raise RuntimeSimulationFailure(
                    f"Deployer {deployer_address} cannot fund endowment of {format_ether(value)} ETH"
                )
            deployer.balance -= value

        if address in self._contracts:
            logger.warning(
                "Contract address collision at %s; replacing existing contract",
                address,
                extra={"contract_address": address},
            )

        self._contracts[address] = Contract(
            address=address,
            bytecode=bytecode,
            code_hash=rolling_hash(bytecode),
        )
        holder = self._accounts.get(address)
        if holder is None:
            holder = self.create_account(address, 0)
        holder.balance += value
        logger.debug("Deployed contract at %s from %s (nonce %d)", address, deployer_address, nonce)
        return address

    def get_contract(self, address: str) -> Contract | None:
        return self._contracts.get(address)

    # ── Transactions ─────────────────────────────────────────────────────

    def execute_transaction(self, tx: Transaction) -> ExecutionResult:
        """Apply a transaction. Failures are reported, never raised."""
        logs: list[str] = []
        gas_used = self._settings.base_transaction_gas

        try:
            sender = self._accounts.get(tx.from_address)
            if sender is None:
                raise RuntimeSimulationFailure("Sender account not found")

            sender.nonce += 1

            if tx.value < 0:
                raise RuntimeSimulationFailure("Negative transfer value")
            if tx.gas_price < 0:
                raise RuntimeSimulationFailure("Negative gas price")

            fee = gas_used * tx.gas_price
            if sender.balance < tx.value + fee:
                raise RuntimeSimulationFailure("Insufficient balance")
            sender.balance -= fee

            contract = self._contracts.get(tx.to_address)
            recipient = self._accounts.get(tx.to_address)

            if contract is not None:
                gas_used += self._settings.contract_call_gas
                known, lines = self._dispatch(contract, tx)
                logs.extend(lines)
                if not known:
                    raise RuntimeSimulationFailure(f"Unrecognized function selector {tx.selector}")
                if recipient is None:
                    recipient = self.create_account(contract.address, 0)
                self._move(sender, recipient, tx.value)
            elif recipient is not None:
                self._move(sender, recipient, tx.value)
                logs.append(
                    f"Transferred {format_ether(tx.value)} ETH from {tx.from_address} to {tx.to_address}"
                )
            else:
                recipient = self.create_account(tx.to_address, 0)
                self._move(sender, recipient, tx.value)
                logs.append(
                    f"Created account {tx.to_address} and transferred {format_ether(tx.value)} ETH"
                )

            self._total_gas_used += gas_used
            return ExecutionResult(success=True, gas_used=gas_used, logs=logs)

        except RuntimeSimulationFailure as exc:
            logger.debug("Transaction from %s failed: %s", tx.from_address, exc)
            logs.append(f"Transaction failed: {exc}")
            return ExecutionResult(success=False, gas_used=gas_used, logs=logs)

    @staticmethod
    def _dispatch(contract: Contract, tx: Transaction) -> tuple[bool, list[str]]:
        selector = tx.selector
        lines = [
            f"Executing contract at {contract.address}",
            f"Function selector: {selector}",
        ]
        entry = SELECTOR_TABLE.get(selector)
        if entry is None:
            lines.append("Unknown function call")
            return False, lines
        lines.extend(entry[1])
        return True, lines

    @staticmethod
    def _move(source: Account, target: Account, amount: int) -> None:
        if amount < 0:
            raise RuntimeSimulationFailure("Negative transfer value")
        source.balance -= amount
        target.balance += amount

    # ── Blocks ───────────────────────────────────────────────────────────

    def _random_hash(self) -> str:
        return "0x" + "".join(self._rng.choice("0123456789abcdef") for _ in range(64))

    @property
    def current_block(self) -> Block:
        return self._block

    def mine_block(self) -> Block:
        self._block = Block(
            number=self._block.number + 1,
            hash=self._random_hash(),
            timestamp=_now_ms(),
            gas_limit=self._settings.block_gas_limit,
        )
        return self._block

    # ── Scripted exploit narratives ──────────────────────────────────────

    def simulate_reentrancy(self, victim_address: str, attacker_address: str) -> SimulationResult:
        """Drain the victim through a scripted recursive-withdraw story.

        The outcome depends only on the victim's balance, never on the
        deployed bytecode.
        """
        victim = self._contracts.get(victim_address)
        attacker = self._accounts.get(attacker_address)
        if victim is None or attacker is None:
            return SimulationResult(success=False, logs=["Contract or account not found"])

        victim_balance = self.get_balance(victim_address)
        logs = [
            "Starting reentrancy attack...",
            f"Initial victim balance: {format_ether(victim_balance)} ETH",
            f"Initial attacker balance: {format_ether(attacker.balance)} ETH",
        ]
        if victim_balance == 0:
            logs.append("No funds to drain")
            return SimulationResult(success=False, logs=logs)

        logs.extend([
            "Attacker calls withdraw()...",
            "Victim contract sends ETH to attacker...",
            "Attacker's fallback function triggers reentrancy...",
            "Recursive call to withdraw()...",
            "Second withdrawal successful!",
        ])
        self._accounts[victim_address].balance = 0
        attacker.balance += victim_balance

        logs.extend([
            f"Final victim balance: {format_ether(0)} ETH",
            f"Final attacker balance: {format_ether(attacker.balance)} ETH",
            "REENTRANCY ATTACK SUCCESSFUL!",
        ])
        return SimulationResult(success=True, logs=logs, metadata={"drained": victim_balance})

    def simulate_access_control(self, contract_address: str, attacker_address: str) -> SimulationResult:
        """Scripted unguarded-mint story: the attacker mints and sweeps funds."""
        contract = self._contracts.get(contract_address)
        attacker = self._accounts.get(attacker_address)
        if contract is None or attacker is None:
            return SimulationResult(success=False, logs=["Contract or account not found"])

        logs = [
            "Starting access control attack...",
            f"Attacker address: {attacker_address}",
            "Attacker calls mint() function...",
            "No access control check detected!",
            "Unauthorized minting successful!",
            f"Attacker receives {MINTED_TOKENS} tokens",
        ]
        slot = f"balanceOf[{attacker_address}]"
        contract.storage[slot] = str(int(contract.storage.get(slot, "0")) + MINTED_TOKENS)

        drained = self.get_balance(contract_address)
        if drained:
            self._accounts[contract_address].balance = 0
            attacker.balance += drained
            logs.append(f"Attacker sweeps {format_ether(drained)} ETH from the contract")

        return SimulationResult(
            success=True,
            logs=logs,
            metadata={"minted": MINTED_TOKENS, "drained": drained},
        )

    # ── Stats ────────────────────────────────────────────────────────────

    def stats(self) -> dict[str, int]:
        return {
            "total_accounts": len(self._accounts),
            "total_contracts": len(self._contracts),
            "current_block": self._block.number,
            "total_gas_used": self._total_gas_used,
        }
