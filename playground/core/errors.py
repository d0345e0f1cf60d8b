"""Error taxonomy for the playground engine.

Every failure carries an error code so it can be rendered consistently:

    {
        "error": {
            "code": "OPERATION_PRECONDITION",
            "message": "Human-readable description",
            "details": [...optional...]
        }
    }

The orchestrator never lets these escape to the caller; they are converted
into session log lines at the point the failing action was attempted.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# ── Error Codes ──────────────────────────────────────────────────────────────


class ErrorCode(str, Enum):
    """Standard error codes carried by playground exceptions."""

    SOURCE_VALIDATION = "SOURCE_VALIDATION"
    VULNERABILITY_WARNING = "VULNERABILITY_WARNING"
    OPERATION_PRECONDITION = "OPERATION_PRECONDITION"
    RUNTIME_SIMULATION = "RUNTIME_SIMULATION"
    STORAGE_ERROR = "STORAGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# ── Exceptions ───────────────────────────────────────────────────────────────


class PlaygroundError(Exception):
    """Base class for all playground failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: list[Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            envelope["details"] = self.details
        return {"error": envelope}


class SourceValidationError(PlaygroundError):
    """Balance or line heuristics rejected the source. Blocks compilation."""

    code = ErrorCode.SOURCE_VALIDATION


class OperationPreconditionError(PlaygroundError):
    """A required contract has not been deployed yet."""

    code = ErrorCode.OPERATION_PRECONDITION


class RuntimeSimulationFailure(PlaygroundError):
    """The ledger refused or could not complete a transaction."""

    code = ErrorCode.RUNTIME_SIMULATION


class StorageError(PlaygroundError):
    """The durable key-value store could not be read or written."""

    code = ErrorCode.STORAGE_ERROR
