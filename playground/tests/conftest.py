"""Shared fixtures for the security playground test suite."""

from __future__ import annotations

import random

import pytest

from playground.analyzer.compiler import SourceAnalyzer
from playground.catalog import get_module
from playground.core.config import Settings
from playground.core.storage import InMemoryKeyValueStore
from playground.core.types import Difficulty, SecurityModule
from playground.ledger.simulator import LedgerSimulator
from playground.pipeline.orchestrator import PlaygroundOrchestrator


# ── Core Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Settings pinned to in-memory storage and a fixed seed."""
    return Settings(storage_backend="memory", random_seed=1234)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


# ── Engine Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def ledger(settings, rng) -> LedgerSimulator:
    return LedgerSimulator(settings, rng=rng)


@pytest.fixture
def analyzer(settings, rng) -> SourceAnalyzer:
    return SourceAnalyzer(settings=settings, rng=rng)


@pytest.fixture
def orchestrator(settings, store) -> PlaygroundOrchestrator:
    return PlaygroundOrchestrator(
        store=store,
        settings=settings,
        rng=random.Random(7),
        session_id="test-session",
    )


# ── Module Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def reentrancy_module() -> SecurityModule:
    module = get_module("reentrancy")
    assert module is not None
    return module


@pytest.fixture
def access_control_module() -> SecurityModule:
    module = get_module("access-control")
    assert module is not None
    return module


@pytest.fixture
def custom_module() -> SecurityModule:
    """A module with no dedicated exploit handler."""
    return SecurityModule(
        id="integer-overflow",
        title="Integer Overflow",
        difficulty=Difficulty.INTERMEDIATE,
        category="arithmetic",
        vulnerable_code="pragma solidity ^0.7.6;\ncontract Counter {\n    uint8 public count;\n    function increment() public {\n        count += 1;\n    }\n}\n",
        attack_code="pragma solidity ^0.8.19;\ncontract Overflower {\n    function run() public {\n    }\n}\n",
        fixed_code="pragma solidity ^0.8.19;\ncontract Counter {\n    uint8 public count;\n    function increment() public {\n        count += 1;\n    }\n}\n",
    )


@pytest.fixture
def simple_source() -> str:
    return (
        "pragma solidity ^0.8.19;\n"
        "contract Simple {\n"
        "    uint256 public value;\n"
        "    function set(uint256 v) public {\n"
        "        value = v;\n"
        "    }\n"
        "    function get() public returns (uint256) {\n"
        "        return value;\n"
        "    }\n"
        "}\n"
    )
