"""Synthetic compilation artifacts: bytecode, ABI and gas estimates.

Everything is derived from shallow pattern matches on the source text; the
bytecode content is random and only its length tracks the source.
"""

from __future__ import annotations

import random
import re
from typing import Any

_FUNCTION_DECL = re.compile(r'function\s+(\w+)\s*\(([^)]*)\)')
_FUNCTION_NAME = re.compile(r'function\s+(\w+)')

# Checked in order; first substring hit wins.
_PARAM_TYPES: tuple[tuple[str, str], ...] = (
    ("uint", "uint256"),
    ("address", "address"),
    ("bool", "bool"),
    ("string", "string"),
)
_DEFAULT_PARAM_TYPE = "uint256"

BASE_GAS = 21_000
_GAS_INCREMENTS: tuple[tuple[str, int], ...] = (
    ("storage", 20_000),
    ("call(", 50_000),
    ("require(", 3_000),
    ("keccak256(", 3_000),
    ("ecrecover(", 3_000),
)

BYTECODE_BASE_LENGTH = 100
BYTECODE_LENGTH_PER_POINT = 50


def complexity_score(source_code: str) -> int:
    """functions + 2×if + 3×(for + while) + 2×low-level calls."""
    score = len(re.findall(r'function\s+\w+', source_code))
    score += 2 * len(re.findall(r'if\s*\(', source_code))
    score += 3 * len(re.findall(r'for\s*\(', source_code))
    score += 3 * len(re.findall(r'while\s*\(', source_code))
    score += 2 * len(re.findall(r'\.call\s*\(', source_code))
    return score


def synthesize_bytecode(source_code: str, rng: random.Random) -> str:
    length = BYTECODE_BASE_LENGTH + complexity_score(source_code) * BYTECODE_LENGTH_PER_POINT
    return "0x" + "".join(rng.choice("0123456789abcdef") for _ in range(length))


def _param_type(param: str) -> str:
    for needle, abi_type in _PARAM_TYPES:
        if needle in param:
            return abi_type
    return _DEFAULT_PARAM_TYPE


def _state_mutability(function_name: str) -> str:
    # Looks at the name token only, so `function viewBalance()` reads as view
    # and `function get() view` does not.
    for keyword in ("view", "pure", "payable"):
        if keyword in function_name:
            return keyword
    return "nonpayable"


def synthesize_abi(source_code: str) -> list[dict[str, Any]]:
    """One function descriptor per line that starts with ``function ``."""
    abi: list[dict[str, Any]] = []
    for line in source_code.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith("function "):
            continue
        match = _FUNCTION_DECL.search(trimmed)
        if not match:
            continue
        name, params = match.group(1), match.group(2)
        types = [_param_type(p.strip()) for p in params.split(",") if p.strip()]
        abi.append({
            "type": "function",
            "name": name,
            "inputs": [
                {"name": f"param{i}", "type": t, "internalType": t}
                for i, t in enumerate(types)
            ],
            "outputs": [],
            "stateMutability": _state_mutability(name),
        })
    return abi


def estimate_gas(source_code: str) -> dict[str, int]:
    """Per-function estimate from the declaration line alone."""
    estimates: dict[str, int] = {}
    for line in source_code.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith("function "):
            continue
        match = _FUNCTION_NAME.search(trimmed)
        if not match:
            continue
        gas = BASE_GAS
        for needle, cost in _GAS_INCREMENTS:
            if needle in trimmed:
                gas += cost
        estimates[match.group(1)] = gas
    return estimates
