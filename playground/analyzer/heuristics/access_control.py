"""Access control heuristics: SWC-115 (tx.origin) and SWC-105 (unguarded mint)."""

from __future__ import annotations

from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext, HeuristicFinding
from playground.core.types import Severity


class TxOriginHeuristic(BaseHeuristic):
    """Authorization through tx.origin, which a phishing contract can spoof."""

    HEURISTIC_ID = "SWC-115"
    NAME = "Authorization through tx.origin"
    DESCRIPTION = (
        "tx.origin is the externally owned account that started the call "
        "chain, so any contract that account calls can act on its behalf."
    )
    SEVERITY = Severity.HIGH
    CATEGORY = "access-control"

    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        if "tx.origin" in context.source_code:
            return [self._make_finding("tx.origin usage detected: Use msg.sender instead")]
        return []


class UnguardedMintHeuristic(BaseHeuristic):
    """A mint function in a source that never mentions an owner guard."""

    HEURISTIC_ID = "SWC-105"
    NAME = "Unprotected mint"
    DESCRIPTION = "Anyone can call mint() because no onlyOwner guard appears in the source."
    SEVERITY = Severity.CRITICAL
    CATEGORY = "access-control"

    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        source = context.source_code
        if "function mint(" in source and "onlyOwner" not in source:
            return [self._make_finding(
                "Mint function without access control detected",
                function_name="mint",
            )]
        return []
