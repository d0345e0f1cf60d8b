"""Completion records that outlive a playground session."""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from playground.core.config import Settings, get_settings
from playground.core.errors import StorageError
from playground.core.storage import KeyValueStore
from playground.core.types import ProgressRecord

logger = logging.getLogger(__name__)

_MODULE_LIST = TypeAdapter(list[str])


class ProgressTracker:
    """Read and write progress through an injected key-value store.

    Two independent keys are used: the progress record
    ``{moduleId, completedModules, timestamp}`` and the ordered list of
    completed module ids.
    """

    def __init__(self, store: KeyValueStore, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._store = store
        self._progress_key = settings.progress_key
        self._completed_key = settings.completed_modules_key

    def completed_modules(self) -> list[str]:
        raw = self._store.get(self._completed_key)
        if raw is None:
            return []
        try:
            return _MODULE_LIST.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Corrupt completed-module list: {exc}") from exc

    def mark_completed(self, module_id: str) -> bool:
        """Append ``module_id`` unless already present. Returns True if added."""
        completed = self.completed_modules()
        if module_id in completed:
            return False
        completed.append(module_id)
        self._store.set(self._completed_key, _MODULE_LIST.dump_json(completed).decode())
        logger.info("Module %s marked completed", module_id)
        return True

    def save(self, module_id: str | None) -> ProgressRecord:
        record = ProgressRecord(module_id=module_id, completed_modules=self.completed_modules())
        self._store.set(self._progress_key, record.model_dump_json(by_alias=True))
        return record

    def load(self) -> ProgressRecord | None:
        raw = self._store.get(self._progress_key)
        if raw is None:
            return None
        try:
            return ProgressRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Corrupt progress record: {exc}") from exc
