"""Per-session state: busy phase, bounded log, deployed contracts, results."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from playground.analyzer.compiler import CompilationResult
from playground.core.types import CodeVariant, Phase, SecurityModule
from playground.ledger.models import SimulationResult

DEFAULT_LOG_RETENTION = 100


class LogBuffer:
    """Append-only ring buffer of log lines.

    Once full, each append drops the oldest line; relative order of the
    survivors is preserved. Lines carry no timestamp, the viewer adds one
    when rendering.
    """

    def __init__(self, maxlen: int = DEFAULT_LOG_RETENTION) -> None:
        if maxlen < 1:
            raise ValueError("Log retention must be at least 1")
        self._entries: deque[str] = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._entries.maxlen or 0

    def append(self, message: str) -> None:
        self._entries.append(message)

    def extend(self, messages: Iterable[str]) -> None:
        self._entries.extend(messages)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))


@dataclass
class SessionState:
    """Mutable state owned by one orchestrator."""

    logs: LogBuffer = field(default_factory=LogBuffer)
    selected_module: SecurityModule | None = None
    vulnerable_code: str = ""
    attack_code: str = ""
    fixed_code: str = ""
    phase: Phase | None = None
    compilation_result: CompilationResult | None = None
    deployed_contracts: dict[str, str] = field(default_factory=dict)
    exploit_result: SimulationResult | None = None
    active_target: CodeVariant = CodeVariant.VULNERABLE
    last_error: Exception | None = None

    @property
    def is_compiling(self) -> bool:
        return self.phase is Phase.COMPILING

    @property
    def is_deploying(self) -> bool:
        return self.phase is Phase.DEPLOYING

    @property
    def is_executing(self) -> bool:
        return self.phase is Phase.EXECUTING

    def set_source(self, variant: CodeVariant, code: str) -> None:
        setattr(self, f"{variant.value}_code", code)

    def clear_run_state(self) -> None:
        """Drop everything produced by earlier actions; keeps the module."""
        self.logs.clear()
        self.deployed_contracts.clear()
        self.compilation_result = None
        self.exploit_result = None
        self.last_error = None
        self.active_target = CodeVariant.VULNERABLE

    def snapshot(self) -> "SessionSnapshot":
        return SessionSnapshot(
            module_id=self.selected_module.id if self.selected_module else None,
            vulnerable_code=self.vulnerable_code,
            attack_code=self.attack_code,
            fixed_code=self.fixed_code,
            is_compiling=self.is_compiling,
            is_deploying=self.is_deploying,
            is_executing=self.is_executing,
            logs=tuple(self.logs.snapshot()),
            deployed_contracts=dict(self.deployed_contracts),
            compilation_result=self.compilation_result,
            exploit_result=self.exploit_result,
            active_target=self.active_target,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of session state handed to listeners and callers."""

    module_id: str | None
    vulnerable_code: str
    attack_code: str
    fixed_code: str
    is_compiling: bool
    is_deploying: bool
    is_executing: bool
    logs: tuple[str, ...]
    deployed_contracts: dict[str, str]
    compilation_result: CompilationResult | None
    exploit_result: SimulationResult | None
    active_target: CodeVariant
