"""Reentrancy heuristic: SWC-107.

Flags functions that send ETH with ``.call{value: ...}`` before any
balance/state write in the same function, the classic shape that lets a
malicious fallback re-enter and withdraw again.
"""

from __future__ import annotations

import re

from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext, HeuristicFinding
from playground.core.types import Severity

_VALUE_CALL = re.compile(r'\.call\s*\{\s*value\s*:')
# mapping write: balances[msg.sender] = 0 / -= x / += x (not ==)
_STATE_WRITE = re.compile(r'\w+\s*\[[^\]]*\]\s*(?:-=|\+=|=(?!=))')


class ReentrancyHeuristic(BaseHeuristic):
    """External value call before state update."""

    HEURISTIC_ID = "SWC-107"
    NAME = "Reentrancy"
    DESCRIPTION = (
        "An external ETH transfer happens before the function updates its "
        "balance bookkeeping, so a re-entering caller sees stale state."
    )
    SEVERITY = Severity.CRITICAL
    CATEGORY = "reentrancy"

    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        if context.has_reentrancy_guard:
            return []

        for name, body in context.function_bodies:
            call = _VALUE_CALL.search(body)
            if call is None:
                continue
            write = _STATE_WRITE.search(body, 0, call.start())
            if write is None:
                return [self._make_finding(
                    "Potential reentrancy vulnerability: External call before state update",
                    function_name=name,
                )]
        return []
