"""SankeyService — load, build, lay out and export flow diagrams.

Each operation is a one-shot pipeline: read the dataset, validate
records, build the graph, and (for layout/export) run the layout
adapter. Any domain error stops the pipeline and becomes a failed
ServiceResult; nothing is retried and no partial graph is returned.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from sankeyctl.config.models import SankeyConfig
from sankeyctl.domain.builder import build_graph
from sankeyctl.domain.errors import SankeyError
from sankeyctl.domain.graph import Graph
from sankeyctl.domain.records import parse_records
from sankeyctl.infrastructure.loader import load_document
from sankeyctl.services.layout import LayoutAdapter, LayoutSolver, SolvedLayout
from sankeyctl.services.result import ServiceError, ServiceResult

log = structlog.get_logger(__name__)

EXPORT_FORMATS = ("json", "dot")


class SankeyService:
    """Runs the record-to-diagram pipeline for one configuration."""

    def __init__(self, config: SankeyConfig | None = None, *, solver: LayoutSolver | None = None) -> None:
        self.config = config or SankeyConfig()
        self._adapter = LayoutAdapter(self.config.layout, solver=solver)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def load_graph(self, path: Path) -> Graph:
        """Read *path* and build its graph.

        Raises:
            InputSchemaError: unreadable file, bad JSON, or bad records.
            LinkTargetUndefined: a join has no category to link to.
        """
        document = load_document(path)
        records = parse_records(document, root_key=self.config.dataset.root_key)
        graph = build_graph(records, self.config.dataset)
        log.debug("graph.built", path=str(path), records=len(records), nodes=len(graph.nodes), links=len(graph.links))
        return graph

    def solve(self, graph: Graph) -> SolvedLayout:
        return self._adapter.layout(graph)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def build(self, path: Path) -> ServiceResult:
        """Build the node and link lists for the dataset at *path*."""
        op = "build_graph"
        try:
            graph = self.load_graph(path)
        except SankeyError as exc:
            return self._fail(op, exc, path)

        payload = graph.to_dict()
        payload["node_count"] = len(graph.nodes)
        payload["link_count"] = len(graph.links)
        return ServiceResult(ok=True, op=op, data=payload, meta={"source": str(path)})

    def layout(self, path: Path) -> ServiceResult:
        """Build and lay out the dataset at *path*.

        ``data`` is the render boundary: solved nodes with bounding boxes
        and colours, solved links with paths and stroke widths.
        """
        op = "layout_graph"
        try:
            solved = self.solve(self.load_graph(path))
        except SankeyError as exc:
            return self._fail(op, exc, path)

        payload = solved.to_dict()
        payload["node_count"] = len(solved.nodes)
        payload["link_count"] = len(solved.links)
        return ServiceResult(
            ok=True,
            op=op,
            data=payload,
            meta={"source": str(path), "align": str(self.config.layout.align)},
        )

    def export(self, path: Path, *, fmt: str = "json") -> ServiceResult:
        """Export the laid-out diagram.

        Formats:
        - ``json`` — the render boundary document
        - ``dot`` — Graphviz DOT, left to right

        Returns the content as a string in ``data["content"]``.
        """
        op = "export_graph"
        if fmt not in EXPORT_FORMATS:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="INVALID_FORMAT",
                    message=f"Unknown export format: {fmt}",
                    detail={"format": fmt, "valid": list(EXPORT_FORMATS)},
                ),
            )

        try:
            solved = self.solve(self.load_graph(path))
        except SankeyError as exc:
            return self._fail(op, exc, path)

        content = self._to_json(solved) if fmt == "json" else self._to_dot(solved)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "format": fmt,
                "content": content,
                "node_count": len(solved.nodes),
                "link_count": len(solved.links),
            },
            meta={"source": str(path)},
        )

    # ── Private helpers ───────────────────────────────────────────────

    @staticmethod
    def _fail(op: str, exc: SankeyError, path: Path) -> ServiceResult:
        log.warning(f"{op}.failed", code=exc.code, reason=exc.message, path=str(path))
        return ServiceResult.failure(op, exc, source=str(path))

    def _to_json(self, solved: SolvedLayout) -> str:
        document: dict[str, Any] = {
            "width": self.config.layout.width,
            "height": self.config.layout.height,
            **solved.to_dict(),
        }
        return json.dumps(document, indent=2) + "\n"

    @staticmethod
    def _to_dot(solved: SolvedLayout) -> str:
        """Generate Graphviz DOT notation, pen width following link width."""
        lines = ["digraph sankey {", "  rankdir=LR;", "  node [shape=box, style=filled];"]

        for node in solved.nodes:
            safe_label = node.title.replace('"', '\\"')
            lines.append(
                f'  "{node.name}" [label="{safe_label}" category="{node.category}" '
                f'fillcolor="{node.color}"];'
            )

        for link in solved.links:
            lines.append(
                f'  "{link.source}" -> "{link.target}" '
                f'[label="{link.value:,.0f}" penwidth="{link.stroke_width:.2f}"];'
            )

        lines.append("}")
        return "\n".join(lines) + "\n"
