"""Security playground engine: simulated ledger, heuristic compiler and session orchestrator."""

__version__ = "0.1.0"
