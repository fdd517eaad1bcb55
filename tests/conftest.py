"""Shared pytest fixtures for sankeyctl tests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from sankeyctl.domain.records import Record


def _record(type_: str, category: str, name: str, value: float) -> dict[str, Any]:
    return {"type": type_, "category": category, "name": name, "value": value}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """One revenue line and one expense line."""
    return {
        "jmu-revenues": [
            _record("Operating revenues", "Operating revenues", "Tuition", 100),
            _record("Operating expense", "Instruction", "Instruction", 80),
        ]
    }


@pytest.fixture
def university_document() -> dict[str, Any]:
    """A fuller dataset covering every bucket plus an unrecognised type."""
    return {
        "jmu-revenues": [
            _record("Operating revenues", "Student fees", "Tuition and fees", 420),
            _record("Operating revenues", "Grants", "Federal grants", 35),
            _record("Nonoperating revenues (expenses)", "State support", "State appropriations", 110),
            _record("Other revenues", "Capital", "Capital gifts", 12),
            _record("Operating expense", "Academic", "Instruction", 260),
            _record("Operating expense", "Academic", "Research", 18),
            _record("Operating expense", "Support", "Student services", 45),
            _record("Balance sheet", "Assets", "Cash", 999),
        ]
    }


@pytest.fixture
def write_dataset(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a document to ``<tmp>/data.json`` and return its path."""

    def _write(document: Any, name: str = "data.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def minimal_records(minimal_document: dict[str, Any]) -> list[Record]:
    return [Record.model_validate(r) for r in minimal_document["jmu-revenues"]]


@pytest.fixture
def university_records(university_document: dict[str, Any]) -> list[Record]:
    return [Record.model_validate(r) for r in university_document["jmu-revenues"]]


@pytest.fixture
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory with no config env vars set."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("SANKEYCTL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None]:
    """Drop handlers a CLI invocation attached to its captured stderr."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    root.handlers = handlers
    structlog.reset_defaults()
