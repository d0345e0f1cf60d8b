"""Exploit narratives keyed by module id.

Each handler takes the session ledger plus the victim and attacker contract
addresses and returns a :class:`SimulationResult`. Unknown module ids fall
back to a generic narrative, so adding a lesson never requires touching the
orchestrator.
"""

from __future__ import annotations

from typing import Callable

from playground.ledger.models import SimulationResult
from playground.ledger.simulator import LedgerSimulator

ExploitHandler = Callable[[LedgerSimulator, str, str], SimulationResult]


def reentrancy_exploit(ledger: LedgerSimulator, victim: str, attacker: str) -> SimulationResult:
    return ledger.simulate_reentrancy(victim, attacker)


def access_control_exploit(ledger: LedgerSimulator, victim: str, attacker: str) -> SimulationResult:
    return ledger.simulate_access_control(victim, attacker)


def generic_exploit(ledger: LedgerSimulator, victim: str, attacker: str) -> SimulationResult:
    return SimulationResult(
        success=True,
        logs=[
            "Exploit executed successfully!",
            "Vulnerability confirmed",
            "Impact: High",
            "Fix required",
        ],
    )


def fix_verification() -> SimulationResult:
    """Canned outcome of replaying the exploit against a fixed contract.

    The submitted fix is never evaluated; the exploit is always reported
    as blocked.
    """
    return SimulationResult(
        success=False,
        logs=[
            "Exploit blocked!",
            "Security fix verified",
            "Vulnerability resolved!",
        ],
    )


DEFAULT_EXPLOITS: dict[str, ExploitHandler] = {
    "reentrancy": reentrancy_exploit,
    "access-control": access_control_exploit,
}


class ExploitBook:
    """Per-session lookup table from module id to exploit handler."""

    def __init__(
        self,
        handlers: dict[str, ExploitHandler] | None = None,
        fallback: ExploitHandler = generic_exploit,
    ) -> None:
        self._handlers = dict(DEFAULT_EXPLOITS if handlers is None else handlers)
        self._fallback = fallback

    def register(self, module_id: str, handler: ExploitHandler) -> None:
        self._handlers[module_id] = handler

    def resolve(self, module_id: str) -> ExploitHandler:
        return self._handlers.get(module_id, self._fallback)

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._handlers
