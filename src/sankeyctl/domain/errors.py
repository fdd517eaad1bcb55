"""Domain exceptions.

Every exception carries a stable ``code`` that the service layer copies
into ``ServiceError.code``. All of them abort the current render attempt;
nothing here is retried.
"""

from __future__ import annotations

from typing import Any


class SankeyError(Exception):
    """Base class for all sankeyctl domain errors."""

    code: str = "SANKEY_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class InputSchemaError(SankeyError):
    """The input document or one of its records is malformed."""

    code = "INPUT_SCHEMA"


class LinkTargetUndefined(SankeyError):
    """A generated link would reference a node that does not exist."""

    code = "LINK_TARGET_UNDEFINED"


class LayoutPreconditionError(SankeyError):
    """The layout solver rejected the graph topology."""

    code = "LAYOUT_PRECONDITION"


class NegativeFlowError(SankeyError):
    """A record that feeds a link value carries a negative amount."""

    code = "NEGATIVE_FLOW"
