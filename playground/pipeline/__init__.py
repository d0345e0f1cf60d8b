"""Session orchestration: compile → deploy → exploit → verify."""

from playground.pipeline.exploits import ExploitBook
from playground.pipeline.orchestrator import PlaygroundOrchestrator
from playground.pipeline.progress import ProgressTracker
from playground.pipeline.session import LogBuffer, SessionSnapshot, SessionState

__all__ = [
    "ExploitBook",
    "LogBuffer",
    "PlaygroundOrchestrator",
    "ProgressTracker",
    "SessionSnapshot",
    "SessionState",
]
