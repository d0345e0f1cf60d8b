"""Tests for shared enums, schemas and the error taxonomy."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from playground.core.errors import (
    ErrorCode,
    OperationPreconditionError,
    PlaygroundError,
    RuntimeSimulationFailure,
    SourceValidationError,
    StorageError,
)
from playground.core.types import CodeVariant, Difficulty, Phase, ProgressRecord, SecurityModule


class TestEnums:

    def test_code_variants(self):
        assert [v.value for v in CodeVariant] == ["vulnerable", "attack", "fixed"]

    def test_phase_values(self):
        assert {p.value for p in Phase} == {"compiling", "deploying", "executing"}

    def test_str_enum(self):
        assert Difficulty("beginner") is Difficulty.BEGINNER
        assert CodeVariant.ATTACK == "attack"


class TestSecurityModule:

    def test_source_for(self):
        module = SecurityModule(
            id="m", title="M", vulnerable_code="v", attack_code="a", fixed_code="f"
        )
        assert module.source_for(CodeVariant.VULNERABLE) == "v"
        assert module.source_for(CodeVariant.ATTACK) == "a"
        assert module.source_for(CodeVariant.FIXED) == "f"

    def test_defaults(self):
        module = SecurityModule(id="m", title="M")
        assert module.difficulty is Difficulty.BEGINNER
        assert module.references == []


class TestProgressRecord:

    def test_serializes_with_camel_case_keys(self):
        record = ProgressRecord(module_id="reentrancy", completed_modules=["a"])
        data = json.loads(record.model_dump_json(by_alias=True))
        assert set(data) == {"moduleId", "completedModules", "timestamp"}
        assert data["moduleId"] == "reentrancy"

    def test_parses_camel_case_document(self):
        raw = '{"moduleId": null, "completedModules": ["x"], "timestamp": "2024-05-01T10:00:00+00:00"}'
        record = ProgressRecord.model_validate_json(raw)
        assert record.module_id is None
        assert record.completed_modules == ["x"]
        assert record.saved_at == datetime.fromisoformat("2024-05-01T10:00:00+00:00")

    def test_parses_zulu_timestamp(self):
        raw = '{"moduleId": "m", "completedModules": [], "timestamp": "2024-05-01T10:00:00.000Z"}'
        record = ProgressRecord.model_validate_json(raw)
        assert record.saved_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_timestamp_defaults_to_now(self):
        record = ProgressRecord()
        assert record.saved_at.tzinfo is not None


class TestErrors:

    def test_codes(self):
        assert SourceValidationError("x").code is ErrorCode.SOURCE_VALIDATION
        assert OperationPreconditionError("x").code is ErrorCode.OPERATION_PRECONDITION
        assert RuntimeSimulationFailure("x").code is ErrorCode.RUNTIME_SIMULATION
        assert StorageError("x").code is ErrorCode.STORAGE_ERROR
        assert PlaygroundError("x").code is ErrorCode.INTERNAL_ERROR

    def test_hierarchy(self):
        assert issubclass(StorageError, PlaygroundError)
        assert issubclass(PlaygroundError, Exception)

    def test_envelope(self):
        err = SourceValidationError("Compilation failed", details=["Line 1: bad"])
        assert err.to_dict() == {
            "error": {
                "code": "SOURCE_VALIDATION",
                "message": "Compilation failed",
                "details": ["Line 1: bad"],
            }
        }

    def test_envelope_omits_empty_details(self):
        assert "details" not in OperationPreconditionError("x").to_dict()["error"]

    def test_str(self):
        assert str(RuntimeSimulationFailure("Insufficient balance")) == "Insufficient balance"


class TestCatalog:

    def test_ids_are_unique(self):
        from playground.catalog import list_modules

        ids = [m.id for m in list_modules()]
        assert len(ids) == len(set(ids))
        assert {"reentrancy", "access-control"} <= set(ids)

    def test_get_module(self):
        from playground.catalog import get_module

        assert get_module("reentrancy").title == "Reentrancy Attack"
        assert get_module("missing") is None
