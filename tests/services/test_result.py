"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from pantryform.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="generate", data={"row": 2})
        assert result.ok is True
        assert result.op == "generate"
        assert result.data == {"row": 2}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure(
            "generate", "ROW_OUT_OF_RANGE", "Row 1 is not a response row", row=1
        )
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "ROW_OUT_OF_RANGE"
        assert result.error.detail == {"row": 1}
        assert result.warnings == []

    def test_failure_keeps_warnings(self) -> None:
        result = ServiceResult.failure("generate", "X", "bad", warnings=["w1"])
        assert result.warnings == ["w1"]

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="sweep", data={"count": 3}, meta={"rows": [2, 3]})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["count"] == 3
        assert parsed["meta"]["rows"] == [2, 3]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        error = ServiceError(code="E001", message="bad")
        assert error.detail == {}
