"""Syntax heuristics that gate compilation.

This is not a parser. Both stages are character/substring scans:

  1. Balance scan: whole-source totals of ``{``/``}`` and ``(``/``)``.
  2. Line scan: per physical line, a declaration keyword with no matching
     closer after it on the same line.

Any message returned here fails the compilation.
"""

from __future__ import annotations

# (token, closer that must follow it on the same line, message)
_LINE_RULES: tuple[tuple[str, str, str], ...] = (
    ("function", ")", "Function declaration missing closing parenthesis"),
    ("contract", "{", "Contract declaration missing opening brace"),
    ("require(", ")", "Require statement missing closing parenthesis"),
)


def scan_balance(source_code: str) -> list[str]:
    """Return one error per unbalanced bracket family."""
    braces = 0
    parens = 0
    for char in source_code:
        if char == "{":
            braces += 1
        elif char == "}":
            braces -= 1
        elif char == "(":
            parens += 1
        elif char == ")":
            parens -= 1

    errors: list[str] = []
    if braces != 0:
        errors.append(
            "Unmatched braces: "
            + ("missing closing brace" if braces > 0 else "extra closing brace")
        )
    if parens != 0:
        errors.append(
            "Unmatched parentheses: "
            + ("missing closing parenthesis" if parens > 0 else "extra closing parenthesis")
        )
    return errors


def scan_lines(source_code: str) -> list[str]:
    """Flag declarations whose closer is missing after the keyword."""
    errors: list[str] = []
    for number, line in enumerate(source_code.split("\n"), start=1):
        for token, closer, message in _LINE_RULES:
            idx = line.find(token)
            if idx != -1 and closer not in line[idx + len(token):]:
                errors.append(f"Line {number}: {message}")
    return errors


def validate(source_code: str) -> list[str]:
    return scan_balance(source_code) + scan_lines(source_code)
