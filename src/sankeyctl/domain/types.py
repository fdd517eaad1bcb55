"""Classification enums for the flow diagram.

Five node tiers, the item-to-category join strategies, and the
horizontal alignment policies understood by the layout solver.
"""

from __future__ import annotations

from enum import StrEnum


class NodeCategory(StrEnum):
    """Tier of a node, in left-to-right flow order."""

    INCOME_ITEM = "incomeItem"
    INCOME_CATEGORY = "incomeCategory"
    CENTER = "center"
    EXPENSE_CATEGORY = "expenseCategory"
    EXPENSE_ITEM = "expenseItem"


class JoinStrategy(StrEnum):
    """How an item node is paired with a category node."""

    POSITIONAL = "positional"
    EXACT_KEY = "exact-key"


class NodeAlign(StrEnum):
    """Horizontal placement policy for nodes."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"
