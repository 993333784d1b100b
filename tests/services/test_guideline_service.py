"""Tests for GuidelineService."""

from pathlib import Path

from pantryform.infrastructure.workspace import Workspace
from pantryform.services.guidelines import GuidelineService
from tests.conftest import GUIDELINE_HEADERS, write_workbook


class TestListRules:
    def test_lists_in_sheet_order(self, workspace: Workspace) -> None:
        result = GuidelineService(workspace).list_rules()
        assert result.ok
        assert result.op == "guidelines"
        assert result.data["count"] == 8
        first = result.data["items"][0]
        assert first["item_key"] == "dog food"
        assert first["display_name"] == "Dog Food"
        assert first["per_pet"] == 10
        assert first["amount_placeholder"] == "{{dryDogFoodAmt}}"
        assert result.data["items"][-1]["item_key"] == "toys"

    def test_parse_warnings_reported(self, workspace: Workspace, workspace_root: Path) -> None:
        write_workbook(
            workspace_root / "guidelines.xlsx",
            GUIDELINE_HEADERS,
            [["Toys", "{{toys}}", "some", 2, "toys", "", ""]],
        )
        result = GuidelineService(workspace).list_rules()
        assert result.ok
        assert result.data["items"][0]["per_pet"] is None
        assert len(result.warnings) == 1

    def test_missing_columns(self, workspace: Workspace, workspace_root: Path) -> None:
        write_workbook(workspace_root / "guidelines.xlsx", ["Item", "Notes"], [])
        result = GuidelineService(workspace).list_rules()
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "GUIDELINE_COLUMNS_MISSING"
        assert "household max" in result.error.detail["missing"]

    def test_missing_workbook(self, workspace: Workspace, workspace_root: Path) -> None:
        (workspace_root / "guidelines.xlsx").unlink()
        result = GuidelineService(workspace).list_rules()
        assert result.error is not None
        assert result.error.code == "GUIDELINES_UNAVAILABLE"
