"""Heuristic source analyzer standing in for a real Solidity compiler."""

from playground.analyzer.compiler import CompilationResult, SourceAnalyzer

__all__ = ["CompilationResult", "SourceAnalyzer"]
