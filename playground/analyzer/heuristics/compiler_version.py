"""Outdated compiler heuristic: SWC-102."""

from __future__ import annotations

from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext, HeuristicFinding
from playground.core.types import Severity


class OutdatedCompilerHeuristic(BaseHeuristic):
    """Pragma below 0.8.0, where arithmetic wraps silently."""

    HEURISTIC_ID = "SWC-102"
    NAME = "Outdated compiler version"
    DESCRIPTION = "Solidity before 0.8.0 has no built-in overflow checks."
    SEVERITY = Severity.MEDIUM
    CATEGORY = "arithmetic"

    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        major, minor, patch = context.solidity_version
        if (major, minor) < (0, 8):
            return [self._make_finding(
                f"Using Solidity < 0.8.0 ({major}.{minor}.{patch}): "
                "Consider using SafeMath or upgrading"
            )]
        return []
