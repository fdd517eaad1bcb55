"""Tests for JSON document loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sankeyctl.domain.errors import InputSchemaError
from sankeyctl.infrastructure.loader import load_document


class TestLoadDocument:
    def test_reads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text('{"jmu-revenues": []}', encoding="utf-8")
        assert load_document(path) == {"jmu-revenues": []}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputSchemaError, match="Cannot read") as exc_info:
            load_document(tmp_path / "nope.json")
        assert exc_info.value.detail["path"].endswith("nope.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InputSchemaError, match="Invalid JSON"):
            load_document(path)

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(InputSchemaError):
            load_document(tmp_path)
