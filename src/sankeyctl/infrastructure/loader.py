"""Input document loading.

Reads the dataset file once, synchronously. Any failure to produce a
JSON value is reported as an InputSchemaError so the caller sees a
single error type for "the input is unusable".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sankeyctl.domain.errors import InputSchemaError

logger = logging.getLogger(__name__)


def load_document(path: Path) -> Any:
    """Parse the JSON document at *path*.

    Raises:
        InputSchemaError: the file is missing, unreadable, or not JSON.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputSchemaError(f"Cannot read {path}: {exc.strerror or exc}", path=str(path)) from exc

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputSchemaError(
            f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            path=str(path),
        ) from exc

    logger.debug("Loaded %s (%d bytes)", path, len(raw))
    return document
