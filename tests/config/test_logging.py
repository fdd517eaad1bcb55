"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from sankeyctl.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("sankeyctl")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sankeyctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self) -> None:
        configure_logging()
        assert logging.getLogger("sankeyctl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("sankeyctl.services.layout").debug("layout.solved", nodes=5)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "layout.solved"
        assert parsed["nodes"] == 5
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "sankeyctl.services.layout"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sankeyctl.infrastructure.loader").debug("loader.read: data.json")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "loader.read: data.json"
        assert parsed["logger"] == "sankeyctl.infrastructure.loader"

    def test_debug_hidden_when_not_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("sankeyctl.infrastructure.loader").debug("noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_library_loggers_stay_quiet_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        assert logging.getLogger("networkx").level == logging.WARNING
        logging.getLogger("networkx").info("noise")
        assert capfd.readouterr().err == ""

    def test_json_exception_is_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            structlog.get_logger("sankeyctl.services.sankey").exception("export_graph.failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "export_graph.failed"
        assert parsed["exception"][0]["exc_type"] == "RuntimeError"
