"""Vulnerability heuristics, discovered by :mod:`playground.analyzer.registry`."""
