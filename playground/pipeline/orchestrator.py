"""Session orchestrator - sequences compile → deploy → exploit → verify.

One orchestrator owns one session: its ledger, its log and its busy phase.
Nothing is shared between orchestrators except the durable progress store
they may be handed.

Every public method narrates its outcome in the session log and returns a
falsy value on failure instead of raising. The busy phase is always cleared
on the way out.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from playground.analyzer.compiler import CompilationResult, SourceAnalyzer
from playground.core.config import Settings, get_settings
from playground.core.errors import (
    OperationPreconditionError,
    PlaygroundError,
    SourceValidationError,
)
from playground.core.logging import SessionLoggerAdapter
from playground.core.storage import KeyValueStore, build_store
from playground.core.types import CodeVariant, Phase, ProgressRecord, SecurityModule
from playground.ledger.models import SimulationResult
from playground.ledger.simulator import LedgerSimulator
from playground.pipeline.exploits import ExploitBook, fix_verification
from playground.pipeline.progress import ProgressTracker
from playground.pipeline.session import LogBuffer, SessionSnapshot, SessionState

logger = logging.getLogger(__name__)

ATTACK_CONTRACT = CodeVariant.ATTACK.value

StateListener = Callable[[SessionSnapshot], Any]


class PlaygroundOrchestrator:
    """Coordinates one playground session.

    Flow for a lesson:
    1. LOAD: select a module, seed the log
    2. COMPILING: run the heuristic compiler over a source variant
    3. DEPLOYING: compile again, then place the artifact on the ledger
    4. EXECUTING: replay the module's exploit narrative
    5. VERIFY: redeploy the fix and report the (canned) verdict

    Args:
        store: Durable key-value capability for progress records
        settings: Application settings
        ledger: Session ledger; a fresh one is built when omitted
        analyzer: Source analyzer; built from settings when omitted
        rng: Shared randomness for addresses, hashes and bytecode
        exploits: Module id → exploit handler table
        on_state_change: Called with a snapshot after every operation
        session_id: Correlation id for log records
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        settings: Settings | None = None,
        ledger: LedgerSimulator | None = None,
        analyzer: SourceAnalyzer | None = None,
        rng: random.Random | None = None,
        exploits: ExploitBook | None = None,
        on_state_change: StateListener | None = None,
        session_id: str | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._rng = rng or random.Random(self._settings.random_seed)
        self.session_id = session_id or uuid.uuid4().hex
        self._ledger = ledger or self._new_ledger()
        self._analyzer = analyzer or SourceAnalyzer(settings=self._settings, rng=self._rng)
        self._progress = ProgressTracker(store or build_store(self._settings), self._settings)
        self._exploits = exploits or ExploitBook()
        self._state = SessionState(logs=LogBuffer(self._settings.log_retention))
        self._listener = on_state_change
        self._lock = asyncio.Lock()
        self._log = SessionLoggerAdapter(logger, {"session_id": self.session_id})

    # ── Accessors ────────────────────────────────────────────────────────

    @property
    def ledger(self) -> LedgerSimulator:
        return self._ledger

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def logs(self) -> list[str]:
        return self._state.logs.snapshot()

    def get_state(self) -> SessionSnapshot:
        return self._state.snapshot()

    # ── Lesson flow ──────────────────────────────────────────────────────

    async def load_module(self, module: SecurityModule) -> None:
        """Select ``module`` and reinitialize every piece of session state."""
        async with self._lock:
            try:
                state = self._state
                state.clear_run_state()
                state.selected_module = module
                for variant in CodeVariant:
                    state.set_source(variant, module.source_for(variant))
                self._ledger = self._new_ledger()

                self._append(f"Loaded module: {module.title}")
                self._append(f"Difficulty: {module.difficulty.value}")
                self._append(f"Category: {module.category}")
                self._append("Ready to start exploring the vulnerability!")
                self._log.info("Loaded module %s", module.id, extra={"module_id": module.id})
            except Exception as e:
                self._fail("Module load failed", e)
            finally:
                self._notify()

    async def compile_code(
        self, code: str, variant: CodeVariant | str
    ) -> CompilationResult | None:
        """Compile one source variant and narrate the result.

        The reported bytecode length counts bytes (two hex digits each, the
        ``0x`` prefix excluded), not characters of the hex string.
        """
        async with self._lock:
            try:
                with self._phase(Phase.COMPILING):
                    variant = CodeVariant(variant)
                    self._append(f"Compiling {variant.value} code...")
                    self._state.set_source(variant, code)

                    result = self._analyzer.compile(code)
                    self._state.compilation_result = result

                    if result.success:
                        self._append("Compilation successful!")
                        self._append(f"Bytecode length: {result.bytecode_size} bytes")
                        self._append(f"Functions found: {len(result.abi or [])}")
                        if result.warnings:
                            self._append("")
                            self._append("Warnings:")
                            self._state.logs.extend(f"   {w}" for w in result.warnings)
                    else:
                        self._append("Compilation failed!")
                        self._state.logs.extend(f"   {e}" for e in result.errors)
                    return result
            except Exception as e:
                self._fail("Compilation error", e, Phase.COMPILING)
                return None
            finally:
                self._notify()

    async def deploy_contract(self, code: str, name: str) -> str | None:
        """Compile ``code`` and deploy it under ``name``. Returns the address."""
        async with self._lock:
            try:
                return self._deploy(code, name)
            finally:
                self._notify()

    async def run_exploit(self, module: SecurityModule) -> SimulationResult | None:
        """Replay the module's exploit against the active target contract."""
        async with self._lock:
            try:
                with self._phase(Phase.EXECUTING):
                    self._append(f"Running exploit for {module.title}...")
                    target = self._state.active_target.value
                    victim = self._state.deployed_contracts.get(target)
                    attacker = self._state.deployed_contracts.get(ATTACK_CONTRACT)
                    if not victim or not attacker:
                        raise OperationPreconditionError(
                            f"Contracts not deployed. Please deploy both {target} "
                            "and attack contracts first."
                        )

                    handler = self._exploits.resolve(module.id)
                    result = handler(self._ledger, victim, attacker)
                    self._state.exploit_result = result
                    self._state.logs.extend(result.logs)

                    self._append("")
                    if result.success:
                        self._append("EXPLOIT SUCCESSFUL!")
                        self._append("The vulnerability has been demonstrated.")
                        self._append("Try to fix the code and test again!")
                    else:
                        self._append("Exploit failed")
                        self._append("The vulnerability may have been fixed!")
                    self._log.info(
                        "Exploit for %s finished: success=%s",
                        module.id,
                        result.success,
                        extra={"module_id": module.id, "phase": Phase.EXECUTING.value},
                    )
                    return result
            except Exception as e:
                self._fail("Exploit execution failed", e, Phase.EXECUTING)
                return None
            finally:
                self._notify()

    async def test_fix(self, module: SecurityModule, fixed_code: str) -> bool:
        """Redeploy ``fixed_code`` as "fixed" and report the verdict.

        The verdict is canned: once the fixed contract deploys and an attack
        contract exists, the exploit is always reported as blocked.
        """
        async with self._lock:
            try:
                self._append(f"Testing fix for {module.title}...")
                self._state.fixed_code = fixed_code
                fixed_address = self._deploy(fixed_code, CodeVariant.FIXED.value)

                with self._phase(Phase.EXECUTING):
                    attacker = self._state.deployed_contracts.get(ATTACK_CONTRACT)
                    if not fixed_address or not attacker:
                        raise OperationPreconditionError("Contracts not deployed properly")

                    self._append("")
                    self._append("Testing exploit against fixed contract...")
                    verdict = fix_verification()
                    self._state.exploit_result = verdict
                    self._state.logs.extend(verdict.logs)

                    self._append("")
                    self._append("FIX VERIFIED!")
                    self._append("The contract is now secure against this vulnerability.")
                    return True
            except Exception as e:
                self._fail("Fix verification failed", e, Phase.EXECUTING)
                return False
            finally:
                self._notify()

    async def reset(self) -> None:
        """Clear results and rebuild the ledger from its seed accounts."""
        async with self._lock:
            try:
                self._state.clear_run_state()
                self._ledger = self._new_ledger()
                self._append("Environment reset")
                self._append("Ready to start fresh!")
            except Exception as e:
                self._fail("Reset failed", e)
            finally:
                self._notify()

    # ── Progress ─────────────────────────────────────────────────────────

    def save_progress(self) -> ProgressRecord | None:
        module = self._state.selected_module
        try:
            record = self._progress.save(module.id if module else None)
            self._append("Progress saved")
            return record
        except Exception as e:
            self._fail("Failed to save progress", e)
            return None
        finally:
            self._notify()

    def load_progress(self) -> ProgressRecord | None:
        try:
            record = self._progress.load()
            if record is not None:
                self._append(f"Progress loaded from {record.saved_at:%Y-%m-%d %H:%M:%S}")
            return record
        except Exception as e:
            self._fail("Failed to load progress", e)
            return None
        finally:
            self._notify()

    def mark_module_completed(self, module_id: str) -> bool:
        """Record ``module_id`` as completed. Idempotent."""
        try:
            added = self._progress.mark_completed(module_id)
            if added:
                self._append(f"Module {module_id} marked as completed!")
            return added
        except Exception as e:
            self._fail("Failed to record completion", e)
            return False
        finally:
            self._notify()

    def completed_modules(self) -> list[str]:
        try:
            return self._progress.completed_modules()
        except PlaygroundError as e:
            self._log.warning("Completed-module list unreadable: %s", e)
            return []

    def stats(self) -> dict[str, Any]:
        module = self._state.selected_module
        return {
            **self._ledger.stats(),
            "completed_modules": len(self.completed_modules()),
            "total_modules": self._settings.total_modules,
            "current_module": module.title if module else "None",
        }

    # ── Internals ────────────────────────────────────────────────────────

    def _deploy(self, code: str, name: str) -> str | None:
        try:
            with self._phase(Phase.DEPLOYING):
                self._append(f"Deploying {name}...")
                compiled = self._analyzer.compile(code)
                if not compiled.success or not compiled.bytecode:
                    raise SourceValidationError("Compilation failed", details=compiled.errors)

                deployer = self._ledger.create_account(
                    self._random_hex("0xdeployer", 32), self._settings.deployer_balance
                )
                address = self._ledger.deploy_contract(
                    compiled.bytecode, deployer.address, value=self._settings.contract_endowment
                )
                self._state.deployed_contracts[name] = address
                if name in (CodeVariant.VULNERABLE.value, CodeVariant.FIXED.value):
                    self._state.active_target = CodeVariant(name)

                self._append("Contract deployed successfully!")
                self._append(f"Address: {address}")
                self._append(f"Gas used: ~{self._settings.nominal_deploy_gas}")
                self._append(f"Transaction hash: {self._random_hex('0x', 64)}")
                self._log.info(
                    "Deployed %s at %s", name, address, extra={"contract_address": address}
                )
                return address
        except Exception as e:
            self._fail("Deployment failed", e, Phase.DEPLOYING)
            return None

    @contextmanager
    def _phase(self, phase: Phase) -> Iterator[None]:
        if self._state.phase is not None:
            raise RuntimeError(
                f"Cannot start {phase.value} while {self._state.phase.value} is in progress"
            )
        self._state.phase = phase
        try:
            yield
        finally:
            self._state.phase = None

    def _new_ledger(self) -> LedgerSimulator:
        return LedgerSimulator(self._settings, rng=self._rng)

    def _random_hex(self, prefix: str, digits: int) -> str:
        return prefix + "".join(self._rng.choice("0123456789abcdef") for _ in range(digits))

    def _append(self, message: str) -> None:
        self._state.logs.append(message)

    def _fail(self, action: str, exc: Exception, phase: Phase | None = None) -> None:
        self._state.last_error = exc
        self._append(f"{action}: {exc}")

        module = self._state.selected_module
        extra: dict[str, Any] = {
            "module_id": module.id if module else None,
            "phase": phase.value if phase else None,
        }
        if isinstance(exc, PlaygroundError):
            self._state.logs.extend(f"   {d}" for d in exc.details)
            extra["error_code"] = exc.code.value
            self._log.warning("%s: [%s] %s", action, exc.code.value, exc, extra=extra)
        else:
            self._log.exception("%s", action, extra=extra)

    def _notify(self) -> None:
        if self._listener is None:
            return
        try:
            self._listener(self.get_state())
        except Exception:
            self._log.exception("State listener raised")
