"""Tests for SankeyService — build, layout and export operations."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from sankeyctl.config.models import DatasetConfig, SankeyConfig
from sankeyctl.domain.types import JoinStrategy
from sankeyctl.services.sankey import SankeyService


class TestBuild:
    def test_end_to_end(
        self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]
    ) -> None:
        path = write_dataset(minimal_document)
        result = SankeyService().build(path)
        assert result.ok
        assert result.op == "build_graph"
        assert result.data["node_count"] == 5
        assert result.data["link_count"] == 4
        assert result.data["nodes"][1] == {
            "name": "incomeCategory0",
            "value": 0,
            "title": "Operating revenues",
            "category": "incomeCategory",
        }
        assert result.data["links"] == [
            {"source": "incomeItem0", "target": "incomeCategory0", "value": 100},
            {"source": "incomeCategory0", "target": "JMU", "value": 0},
            {"source": "JMU", "target": "expenseCategory0", "value": 80},
            {"source": "expenseCategory0", "target": "expenseItem0", "value": 0},
        ]
        assert result.meta == {"source": str(path)}

    def test_result_is_json_serialisable(
        self, write_dataset: Callable[..., Path], university_document: dict[str, Any]
    ) -> None:
        result = SankeyService().build(write_dataset(university_document))
        parsed = json.loads(result.model_dump_json())
        assert parsed["data"]["nodes"][0]["category"] == "incomeItem"

    def test_missing_root_key(self, write_dataset: Callable[..., Path]) -> None:
        result = SankeyService().build(write_dataset({"other": []}))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INPUT_SCHEMA"
        assert result.data == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        result = SankeyService().build(tmp_path / "absent.json")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INPUT_SCHEMA"

    def test_empty_category_bucket(self, write_dataset: Callable[..., Path]) -> None:
        doc = {
            "jmu-revenues": [
                {"type": "Nonoperating revenues (expenses)", "category": "S", "name": "State", "value": 5}
            ]
        }
        result = SankeyService().build(write_dataset(doc))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "LINK_TARGET_UNDEFINED"
        assert result.error.detail["item"] == "incomeItem0"

    def test_negative_income_item(
        self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]
    ) -> None:
        rows = minimal_document["jmu-revenues"]
        doc = {"jmu-revenues": [{**rows[0], "value": -100}, rows[1]]}
        result = SankeyService().build(write_dataset(doc))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NEGATIVE_FLOW"
        assert result.data == {}

    def test_infinite_value_in_file(
        self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]
    ) -> None:
        rows = minimal_document["jmu-revenues"]
        # json.dumps writes the non-standard token Infinity, which json.loads accepts.
        doc = {"jmu-revenues": [{**rows[0], "value": float("inf")}, rows[1]]}
        result = SankeyService().layout(write_dataset(doc))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INPUT_SCHEMA"
        assert result.error.detail["fields"] == ["value"]

    def test_dataset_config_applied(self, write_dataset: Callable[..., Path]) -> None:
        doc = {
            "records": [
                {"type": "Operating revenues", "category": "Fees", "name": "Tuition", "value": 5},
            ]
        }
        config = SankeyConfig(dataset=DatasetConfig(root_key="records", join=JoinStrategy.EXACT_KEY))
        result = SankeyService(config).build(write_dataset(doc))
        assert result.ok
        assert result.data["links"][0]["target"] == "incomeCategory0"


class TestLayout:
    def test_render_boundary(
        self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]
    ) -> None:
        result = SankeyService().layout(write_dataset(minimal_document))
        assert result.ok
        assert result.op == "layout_graph"
        node = result.data["nodes"][0]
        assert {"x0", "x1", "y0", "y1", "category", "color", "title"} <= set(node)
        link = result.data["links"][0]
        assert link["path"].startswith("M")
        assert link["stroke_width"] >= 1
        assert result.meta is not None
        assert result.meta["align"] == "justify"

    def test_error_codes_pass_through(self, write_dataset: Callable[..., Path]) -> None:
        result = SankeyService().layout(write_dataset({"jmu-revenues": [{"type": "x"}]}))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INPUT_SCHEMA"

    def test_solver_failure(
        self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]
    ) -> None:
        from sankeyctl.infrastructure.layout import SolverError

        def broken(graph: dict[str, Any]) -> dict[str, Any]:
            raise SolverError("circular link")

        result = SankeyService(solver=broken).layout(write_dataset(minimal_document))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "LAYOUT_PRECONDITION"
        assert result.error.message == "circular link"


class TestExport:
    def test_json(self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]) -> None:
        result = SankeyService().export(write_dataset(minimal_document), fmt="json")
        assert result.ok
        doc = json.loads(result.data["content"])
        assert doc["width"] == 928
        assert doc["height"] == 600
        assert len(doc["nodes"]) == 5
        assert len(doc["links"]) == 4

    def test_dot(self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]) -> None:
        result = SankeyService().export(write_dataset(minimal_document), fmt="dot")
        assert result.ok
        content = result.data["content"]
        assert content.startswith("digraph sankey {")
        assert "rankdir=LR;" in content
        assert '"incomeItem0" -> "incomeCategory0" [label="100"' in content
        assert 'label="James Madison University"' in content

    def test_dot_escapes_quotes(self, write_dataset: Callable[..., Path]) -> None:
        doc = {
            "jmu-revenues": [
                {"type": "Operating revenues", "category": "C", "name": 'The "Big" Fund', "value": 1},
            ]
        }
        result = SankeyService().export(write_dataset(doc), fmt="dot")
        assert 'label="The \\"Big\\" Fund"' in result.data["content"]

    def test_unknown_format(self, write_dataset: Callable[..., Path], minimal_document: dict[str, Any]) -> None:
        result = SankeyService().export(write_dataset(minimal_document), fmt="svg")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_FORMAT"
        assert result.error.detail["valid"] == ["json", "dot"]
