"""LayoutAdapter — binds a built Graph to a geometry solver.

The adapter owns no module-level state: solver settings and the colour
scale come from an immutable LayoutConfig, so independent adapters can
lay out graphs side by side.

The solver annotates its input in place. The adapter always hands it
fresh dict copies (``Graph.to_dict()``), so the caller's Graph stays
untouched and can be laid out again.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any, Protocol

import structlog

from sankeyctl.config.models import LayoutConfig
from sankeyctl.domain.errors import LayoutPreconditionError
from sankeyctl.domain.graph import Graph
from sankeyctl.infrastructure.layout import SankeySolver, SolverError

log = structlog.get_logger(__name__)


class LayoutSolver(Protocol):
    """Anything that lays out ``{"nodes": [...], "links": [...]}`` in place."""

    def __call__(self, graph: dict[str, Any]) -> dict[str, Any]: ...


@dataclass(frozen=True)
class SolvedNode:
    """A node with its bounding box in pixel space."""

    name: str
    title: str
    category: str
    value: float
    depth: int
    height: int
    layer: int
    x0: float
    x1: float
    y0: float
    y1: float
    color: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SolvedLink:
    """A link with its computed band width and path."""

    index: int
    source: str
    target: str
    value: float
    width: float
    y0: float
    y1: float
    points: tuple[tuple[float, float], ...]
    path: str

    @property
    def stroke_width(self) -> float:
        """Rendered width, floored at 1 so zero-value links stay visible."""
        return max(1.0, self.width)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["points"] = [list(p) for p in self.points]
        data["stroke_width"] = self.stroke_width
        return data


@dataclass(frozen=True)
class SolvedLayout:
    """Everything a presentation layer needs to draw the diagram."""

    nodes: tuple[SolvedNode, ...]
    links: tuple[SolvedLink, ...]
    extent: tuple[tuple[float, float], tuple[float, float]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "extent": [list(corner) for corner in self.extent],
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [lk.to_dict() for lk in self.links],
        }


def ordinal_colors(keys: Iterable[str], palette: tuple[str, ...]) -> dict[str, str]:
    """Map each distinct key to a palette colour in first-seen order, cycling."""
    colors: dict[str, str] = {}
    for key in keys:
        if key not in colors:
            colors[key] = palette[len(colors) % len(palette)]
    return colors


class LayoutAdapter:
    """Lay out graphs with one fixed configuration."""

    def __init__(self, config: LayoutConfig | None = None, solver: LayoutSolver | None = None) -> None:
        self.config = config or LayoutConfig()
        self._solver: LayoutSolver = solver or SankeySolver(
            extent=self.config.extent,
            node_width=self.config.node_width,
            node_padding=self.config.node_padding,
            align=self.config.align,
            node_id=self.config.node_id,
        )

    def layout(self, graph: Graph) -> SolvedLayout:
        """Run the solver once on a copy of *graph*.

        Raises:
            LayoutPreconditionError: the solver rejected the topology.
                The message is the solver's own.
        """
        try:
            solved = self._solver(graph.to_dict())
        except SolverError as exc:
            log.warning("layout.failed", reason=str(exc), nodes=len(graph.nodes), links=len(graph.links))
            raise LayoutPreconditionError(str(exc), solver=type(self._solver).__name__) from exc

        colors = ordinal_colors((n["category"] for n in solved["nodes"]), self.config.palette)
        nodes = tuple(
            SolvedNode(
                name=n["name"],
                title=n["title"],
                category=n["category"],
                value=n["value"],
                depth=n["depth"],
                height=n["height"],
                layer=n["layer"],
                x0=n["x0"],
                x1=n["x1"],
                y0=n["y0"],
                y1=n["y1"],
                color=colors[n["category"]],
            )
            for n in solved["nodes"]
        )
        links = tuple(
            SolvedLink(
                index=lk["index"],
                source=lk["source"],
                target=lk["target"],
                value=lk["value"],
                width=lk["width"],
                y0=lk["y0"],
                y1=lk["y1"],
                points=tuple(tuple(p) for p in lk["points"]),
                path=lk["path"],
            )
            for lk in solved["links"]
        )
        log.debug("layout.solved", nodes=len(nodes), links=len(links), align=str(self.config.align))
        return SolvedLayout(nodes=nodes, links=links, extent=self.config.extent)
