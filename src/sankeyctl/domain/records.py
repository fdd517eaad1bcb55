"""Financial line-item records and input document validation.

A document is a JSON object whose ``jmu-revenues`` key holds a list of
records. No other top-level key is consulted.

INVARIANT: validation finishes before any node is built. A single bad
record fails the whole document.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from sankeyctl.domain.errors import InputSchemaError

ROOT_KEY = "jmu-revenues"


class Record(BaseModel):
    """One financial line item."""

    model_config = {"frozen": True, "extra": "ignore"}

    type: str
    category: str
    name: str
    value: float = Field(strict=True, allow_inf_nan=False)


def parse_records(document: Any, *, root_key: str = ROOT_KEY) -> list[Record]:
    """Validate *document* and return its records in input order.

    Raises:
        InputSchemaError: *document* is not an object, lacks *root_key*,
            *root_key* is not a list, or a record fails validation.
    """
    if not isinstance(document, dict):
        raise InputSchemaError(
            "Input document must be a JSON object",
            found=type(document).__name__,
        )
    if root_key not in document:
        raise InputSchemaError(
            f"Input document lacks '{root_key}'",
            root_key=root_key,
            keys=sorted(str(k) for k in document),
        )

    raw = document[root_key]
    if not isinstance(raw, list):
        raise InputSchemaError(
            f"'{root_key}' must be a list of records",
            root_key=root_key,
            found=type(raw).__name__,
        )

    records: list[Record] = []
    for index, item in enumerate(raw):
        try:
            records.append(Record.model_validate(item))
        except ValidationError as exc:
            fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
            raise InputSchemaError(
                f"Record {index} is invalid: {', '.join(fields) or 'not an object'}",
                index=index,
                fields=fields,
            ) from exc
    return records
