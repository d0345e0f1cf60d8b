"""Shared enums and schemas used across the playground."""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


# ── Enums ────────────────────────────────────────────────────────────────────


class Difficulty(str, enum.Enum):
    """How hard a lesson module is."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CodeVariant(str, enum.Enum):
    """Which of a module's three sources is being worked on."""

    VULNERABLE = "vulnerable"
    ATTACK = "attack"
    FIXED = "fixed"


class Phase(str, enum.Enum):
    """Busy phase of a playground session. At most one is active."""

    COMPILING = "compiling"
    DEPLOYING = "deploying"
    EXECUTING = "executing"


class Severity(str, enum.Enum):
    """Severity attached to a vulnerability heuristic."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFORMATIONAL = "informational"


# ── Shared Schemas ───────────────────────────────────────────────────────────


class SecurityModule(BaseModel):
    """A vulnerability lesson: three source variants plus explanatory text."""

    id: str
    title: str
    description: str = ""
    difficulty: Difficulty = Difficulty.BEGINNER
    category: str = ""
    vulnerable_code: str = ""
    attack_code: str = ""
    fixed_code: str = ""
    explanation: str = ""
    vulnerability: str = ""
    impact: str = ""
    prevention: str = ""
    references: list[str] = Field(default_factory=list)

    def source_for(self, variant: CodeVariant) -> str:
        """Return the source text of the given variant."""
        return {
            CodeVariant.VULNERABLE: self.vulnerable_code,
            CodeVariant.ATTACK: self.attack_code,
            CodeVariant.FIXED: self.fixed_code,
        }[variant]


class ProgressRecord(BaseModel):
    """Durable progress record persisted between sessions."""

    module_id: str | None = Field(default=None, alias="moduleId")
    completed_modules: list[str] = Field(default_factory=list, alias="completedModules")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True)

    @property
    def saved_at(self) -> datetime:
        return self.timestamp
