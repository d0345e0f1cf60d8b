"""Tests for the vulnerability heuristics and their registry."""

from __future__ import annotations

import pytest

from playground.analyzer.base_heuristic import BaseHeuristic, HeuristicContext
from playground.analyzer.heuristics.access_control import TxOriginHeuristic, UnguardedMintHeuristic
from playground.analyzer.heuristics.compiler_version import OutdatedCompilerHeuristic
from playground.analyzer.heuristics.reentrancy import ReentrancyHeuristic
from playground.analyzer.heuristics.unchecked_calls import UncheckedCallHeuristic
from playground.analyzer.registry import HeuristicRegistry, registry
from playground.core.types import Severity


def _ctx(source: str) -> HeuristicContext:
    return HeuristicContext(source_code=source)


class TestContext:

    def test_solidity_version(self):
        assert _ctx("pragma solidity ^0.6.12;").solidity_version == (0, 6, 12)
        assert _ctx("pragma solidity >=0.7.0 <0.9.0;").solidity_version == (0, 7, 0)

    def test_default_version(self):
        assert _ctx("").solidity_version == (0, 8, 0)

    def test_function_bodies(self):
        bodies = _ctx("function a() {}\nfunction b() {}").function_bodies
        assert [name for name, _ in bodies] == ["a", "b"]
        assert bodies[0][1].startswith("function a")
        assert "function b" not in bodies[0][1]


class TestReentrancy:

    VULNERABLE = """
    function withdraw() public {
        uint256 amount = balances[msg.sender];
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok);
        balances[msg.sender] = 0;
    }
    """

    SAFE = """
    function withdraw() public {
        uint256 amount = balances[msg.sender];
        balances[msg.sender] = 0;
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok);
    }
    """

    def test_call_before_write(self):
        findings = ReentrancyHeuristic().check(_ctx(self.VULNERABLE))
        assert len(findings) == 1
        assert findings[0].function_name == "withdraw"
        assert findings[0].heuristic_id == "SWC-107"

    def test_write_before_call(self):
        assert ReentrancyHeuristic().check(_ctx(self.SAFE)) == []

    def test_guard_suppresses(self):
        source = self.VULNERABLE.replace("public {", "public nonReentrant {")
        assert ReentrancyHeuristic().check(_ctx(source)) == []

    def test_comparison_is_not_a_write(self):
        source = self.VULNERABLE.replace(
            "uint256 amount = balances[msg.sender];",
            "require(balances[msg.sender] == 1);",
        )
        assert len(ReentrancyHeuristic().check(_ctx(source))) == 1


class TestAccessControl:

    def test_tx_origin(self):
        findings = TxOriginHeuristic().check(_ctx("require(tx.origin == owner);"))
        assert [f.message for f in findings] == ["tx.origin usage detected: Use msg.sender instead"]
        assert findings[0].severity is Severity.HIGH

    def test_no_tx_origin(self):
        assert TxOriginHeuristic().check(_ctx("require(msg.sender == owner);")) == []

    def test_unguarded_mint(self):
        findings = UnguardedMintHeuristic().check(_ctx("function mint(address to) public {}"))
        assert len(findings) == 1
        assert findings[0].function_name == "mint"

    def test_guarded_mint(self):
        source = "function mint(address to) public onlyOwner {}"
        assert UnguardedMintHeuristic().check(_ctx(source)) == []


class TestUncheckedCall:

    def test_unchecked(self):
        findings = UncheckedCallHeuristic().check(_ctx("target.call(data);"))
        assert [str(f) for f in findings] == ["Unchecked external call detected"]

    def test_checked_anywhere(self):
        assert UncheckedCallHeuristic().check(_ctx("target.call(data); require(ok);")) == []


class TestOutdatedCompiler:

    def test_old_pragma(self):
        findings = OutdatedCompilerHeuristic().check(_ctx("pragma solidity ^0.7.6;"))
        assert findings[0].message == (
            "Using Solidity < 0.8.0 (0.7.6): Consider using SafeMath or upgrading"
        )

    def test_current_pragma(self):
        assert OutdatedCompilerHeuristic().check(_ctx("pragma solidity ^0.8.19;")) == []


class TestFinding:

    def test_to_dict(self):
        finding = TxOriginHeuristic().check(_ctx("tx.origin"))[0]
        data = finding.to_dict()
        assert data["code"] == "VULNERABILITY_WARNING"
        assert data["id"] == "SWC-115"
        assert data["severity"] == "high"
        assert data["category"] == "access-control"


class TestRegistry:

    def test_discovers_all(self):
        ids = [h.HEURISTIC_ID for h in registry.get_all()]
        assert ids == ["SWC-102", "SWC-104", "SWC-105", "SWC-107", "SWC-115"]

    def test_instantiate_all(self):
        instances = registry.instantiate_all()
        assert [type(h) for h in instances] == registry.get_all()
        assert all(isinstance(h, BaseHeuristic) for h in instances)

    def test_discover_is_idempotent(self):
        fresh = HeuristicRegistry()
        fresh.discover()
        fresh.discover()
        assert len(fresh.get_all()) == 5

    @pytest.mark.parametrize("cls", registry.get_all())
    def test_metadata_present(self, cls):
        assert cls.NAME
        assert cls.DESCRIPTION
        assert cls.CATEGORY
        assert isinstance(cls.SEVERITY, Severity)
