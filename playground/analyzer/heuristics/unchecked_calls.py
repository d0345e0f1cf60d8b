"""Unchecked low-level call heuristic: SWC-104."""

from __future__ import annotations

from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext, HeuristicFinding
from playground.core.types import Severity


class UncheckedCallHeuristic(BaseHeuristic):
    """``.call(`` used in a source that never checks anything with require()."""

    HEURISTIC_ID = "SWC-104"
    NAME = "Unchecked call return value"
    DESCRIPTION = "A low-level call can fail silently when its return value is ignored."
    SEVERITY = Severity.MEDIUM
    CATEGORY = "unchecked-calls"

    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        source = context.source_code
        if ".call(" in source and "require(" not in source:
            return [self._make_finding("Unchecked external call detected")]
        return []
