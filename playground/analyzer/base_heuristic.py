"""Base heuristic class - every vulnerability heuristic inherits from this.

Heuristics are shallow substring/regex checks over raw source text. They are
advisory: a match becomes a compiler warning and never blocks compilation.
"""

from __future__ import annotations

import abc
import re
from dataclasses import dataclass, field
from typing import Any

from playground.core.errors import ErrorCode
from playground.core.types import Severity


@dataclass
class HeuristicContext:
    """Source text plus the few derived views heuristics share."""

    source_code: str = ""
    contract_name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    # ── Helper accessors ─────────────────────────────────────────────────

    @property
    def lines(self) -> list[str]:
        return self.source_code.split("\n")

    @property
    def has_reentrancy_guard(self) -> bool:
        return "nonReentrant" in self.source_code or "ReentrancyGuard" in self.source_code

    @property
    def solidity_version(self) -> tuple[int, int, int]:
        """Parse the pragma solidity version from source."""
        match = re.search(
            r'pragma\s+solidity\s+[^;]*?(\d+)\.(\d+)\.(\d+)', self.source_code
        )
        if match:
            return int(match.group(1)), int(match.group(2)), int(match.group(3))
        return (0, 8, 0)  # default to 0.8.0

    @property
    def function_bodies(self) -> list[tuple[str, str]]:
        """Return (function_name, text) slices, each running to the next declaration."""
        matches = list(re.finditer(r'function\s+(\w+)', self.source_code))
        bodies: list[tuple[str, str]] = []
        for i, m in enumerate(matches):
            end = matches[i + 1].start() if i + 1 < len(matches) else len(self.source_code)
            bodies.append((m.group(1), self.source_code[m.start():end]))
        return bodies


@dataclass
class HeuristicFinding:
    """One heuristic match, rendered as a single compiler warning."""

    heuristic_id: str
    name: str
    message: str
    severity: Severity
    category: str = ""
    function_name: str = ""

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": ErrorCode.VULNERABILITY_WARNING.value,
            "id": self.heuristic_id,
            "name": self.name,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category,
            "function": self.function_name,
        }


class BaseHeuristic(abc.ABC):
    """Abstract base class for all vulnerability heuristics.

    Heuristic metadata:
        - HEURISTIC_ID: Unique identifier (the SWC registry id it mirrors)
        - NAME: Human-readable heuristic name
        - DESCRIPTION: What this heuristic looks for
        - SEVERITY: Default severity level
        - CATEGORY: High-level category for grouping
    """

    HEURISTIC_ID: str = ""
    NAME: str = ""
    DESCRIPTION: str = ""
    SEVERITY: Severity = Severity.MEDIUM
    CATEGORY: str = ""

    @abc.abstractmethod
    def check(self, context: HeuristicContext) -> list[HeuristicFinding]:
        """Run the heuristic against the given context.

        Returns:
            At most one finding per heuristic. Empty if nothing matched.
        """
        ...

    def _make_finding(self, message: str, function_name: str = "") -> HeuristicFinding:
        return HeuristicFinding(
            heuristic_id=self.HEURISTIC_ID,
            name=self.NAME,
            message=message,
            severity=self.SEVERITY,
            category=self.CATEGORY,
            function_name=function_name,
        )
