"""Heuristic stand-in for the Solidity compiler.

``SourceAnalyzer.compile`` runs independent, additive stages:

  1. Balance scan          → errors
  2. Line heuristics       → errors
  3. Vulnerability checks  → warnings (never block)
  4. Synthetic bytecode
  5. Synthetic ABI
  6. Synthetic gas estimates

Compilation succeeds unless stage 1 or 2 reports an error. Artifacts from
stages 4-6 are only attached to successful results.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Any

from playground.analyzer import artifacts, validation
from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext, HeuristicFinding
from playground.analyzer.registry import registry
from playground.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """Result of compiling source code."""

    success: bool
    bytecode: str | None = None
    abi: list[dict[str, Any]] | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    gas_estimates: dict[str, int] | None = None
    findings: list[HeuristicFinding] = field(default_factory=list)
    contract_name: str = ""
    compiler_version: str = ""

    @property
    def bytecode_size(self) -> int:
        """Size of the bytecode in bytes (two hex digits per byte)."""
        if not self.bytecode:
            return 0
        digits = self.bytecode[2:] if self.bytecode.startswith("0x") else self.bytecode
        return len(digits) // 2


@dataclass(frozen=True)
class CompilerVersion:
    """A compiler build the analyzer claims to emulate."""

    version: str
    path: str
    type: str = "soljson"


AVAILABLE_VERSIONS: tuple[CompilerVersion, ...] = (
    CompilerVersion("0.8.19", "soljson-v0.8.19+commit.7dd6d404.js"),
    CompilerVersion("0.8.18", "soljson-v0.8.18+commit.87f61d96.js"),
    CompilerVersion("0.8.17", "soljson-v0.8.17+commit.8df45f5f.js"),
    CompilerVersion("0.8.16", "soljson-v0.8.16+commit.07a7930e.js"),
    CompilerVersion("0.8.15", "soljson-v0.8.15+commit.e14f2714.js"),
)


class SourceAnalyzer:
    """Validate source text heuristically and synthesize a compilation artifact.

    Args:
        version: Compiler version to report (defaults to settings)
        settings: Application settings
        rng: Randomness for bytecode; seed it for reproducible output
        heuristics: Override the registry-discovered vulnerability heuristics
    """

    def __init__(
        self,
        version: str | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        heuristics: list[BaseHeuristic] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.version = version or settings.compiler_version
        self._rng = rng or random.Random(settings.random_seed)
        self._heuristics = heuristics if heuristics is not None else registry.instantiate_all()

    def compile(self, source_code: str, contract_name: str | None = None) -> CompilationResult:
        """Run all stages over ``source_code``.

        Args:
            source_code: Solidity-like source text
            contract_name: Name to report; detected from the first
                ``contract X`` declaration when omitted

        Returns:
            CompilationResult; never raises
        """
        result = CompilationResult(
            success=False,
            contract_name=contract_name or self._detect_contract_name(source_code),
            compiler_version=self.version,
        )

        try:
            result.errors = validation.validate(source_code)

            context = HeuristicContext(source_code=source_code, contract_name=result.contract_name)
            for heuristic in self._heuristics:
                result.findings.extend(heuristic.check(context))
            result.warnings = [f.message for f in result.findings]

            if result.errors:
                return result

            result.bytecode = artifacts.synthesize_bytecode(source_code, self._rng)
            result.abi = artifacts.synthesize_abi(source_code)
            result.gas_estimates = artifacts.estimate_gas(source_code)
            result.success = True

        except Exception as e:
            logger.exception("Unexpected failure compiling %s", result.contract_name or "source")
            result.success = False
            result.bytecode = result.abi = result.gas_estimates = None
            result.errors = [f"Compilation failed: {e}"]

        return result

    def get_version(self) -> str:
        return self.version

    @staticmethod
    def available_versions() -> list[CompilerVersion]:
        return list(AVAILABLE_VERSIONS)

    @staticmethod
    def _detect_contract_name(source_code: str) -> str:
        match = re.search(r'\bcontract\s+(\w+)', source_code)
        return match.group(1) if match else ""
