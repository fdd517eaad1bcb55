"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sankeyctl.toml only contains
overrides. A dataset shaped like the university revenue file needs no
config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from sankeyctl.domain.types import JoinStrategy, NodeAlign

# d3 schemeCategory10
CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


class DatasetConfig(BaseModel):
    """[dataset] section — where records live and how they are bucketed."""

    model_config = {"frozen": True}

    root_key: str = "jmu-revenues"
    income_item_types: tuple[str, ...] = (
        "Nonoperating revenues (expenses)",
        "Operating revenues",
        "Other revenues",
    )
    income_category_types: tuple[str, ...] = (
        "Operating revenues",
        "Nonoperating revenues",
        "Other revenues",
    )
    expense_category_types: tuple[str, ...] = ("Operating expense",)
    expense_item_types: tuple[str, ...] = ("Operating expense",)
    join: JoinStrategy = JoinStrategy.POSITIONAL


class LayoutConfig(BaseModel):
    """[layout] section — geometry handed to the layout solver."""

    model_config = {"frozen": True}

    node_id: str = "name"
    align: NodeAlign = NodeAlign.JUSTIFY
    node_width: float = Field(default=15, gt=0)
    node_padding: float = Field(default=10, ge=0)
    width: float = Field(default=928, gt=0)
    height: float = Field(default=600, gt=0)
    margin_x: float = Field(default=1, ge=0)
    margin_y: float = Field(default=5, ge=0)
    palette: tuple[str, ...] = Field(default=CATEGORY10, min_length=1)

    @property
    def extent(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Bounding rectangle ``((x0, y0), (x1, y1))`` inside the canvas."""
        return (
            (self.margin_x, self.margin_y),
            (self.width - self.margin_x, self.height - self.margin_y),
        )


class SankeyConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
