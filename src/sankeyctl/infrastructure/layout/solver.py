"""SankeySolver — column layout for an acyclic flow graph.

Works on plain dicts and annotates them in place, the way a d3-sankey
generator does: every node gains ``index, value, depth, height, layer,
x0, x1, y0, y1`` and every link gains ``index, width, y0, y1, points,
path``. Callers that want to keep their own objects intact pass copies.

Topology checks and depth/height ranking run on a NetworkX DiGraph.
Nodes keep their input order within a column; there is no iterative
relaxation pass, so the result depends only on topology, values and
extent.
"""

from __future__ import annotations

import math
from typing import Any, TypeAlias

import networkx as nx

from sankeyctl.domain.types import NodeAlign

Extent: TypeAlias = tuple[tuple[float, float], tuple[float, float]]
_Obj: TypeAlias = dict[str, Any]


class SolverError(Exception):
    """The graph violates a solver precondition (missing node, cycle)."""


def _fmt(v: float) -> str:
    return f"{round(v, 3):g}"


class SankeySolver:
    """Assign horizontal bands and vertical extents to a flow graph."""

    def __init__(
        self,
        *,
        extent: Extent = ((0, 0), (1, 1)),
        node_width: float = 24,
        node_padding: float = 8,
        align: NodeAlign = NodeAlign.JUSTIFY,
        node_id: str = "index",
    ) -> None:
        self.extent = extent
        self.node_width = node_width
        self.node_padding = node_padding
        self.align = NodeAlign(align)
        self.node_id = node_id

    def __call__(self, graph: _Obj) -> _Obj:
        """Lay out ``graph["nodes"]`` and ``graph["links"]`` in place.

        Raises:
            SolverError: a link names an unknown node, or links form a cycle.
        """
        nodes: list[_Obj] = graph["nodes"]
        links: list[_Obj] = graph["links"]

        by_id, outgoing, incoming = self._resolve(nodes, links)
        topology = self._topology(by_id, links)

        for node in nodes:
            key = self._key(node)
            node["value"] = max(
                sum(lk["value"] for lk in outgoing[key]),
                sum(lk["value"] for lk in incoming[key]),
            )

        self._rank(by_id, topology)
        columns = self._assign_layers(nodes, by_id, outgoing, incoming)
        self._assign_breadths(columns, outgoing)
        self._assign_link_breadths(nodes, by_id, outgoing, incoming)
        self._assign_paths(links, by_id)
        return graph

    # ------------------------------------------------------------------
    # Topology
    # ------------------------------------------------------------------

    def _key(self, node: _Obj) -> Any:
        if self.node_id == "index":
            return node["index"]
        return node[self.node_id]

    def _resolve(
        self, nodes: list[_Obj], links: list[_Obj]
    ) -> tuple[dict[Any, _Obj], dict[Any, list[_Obj]], dict[Any, list[_Obj]]]:
        for i, node in enumerate(nodes):
            node["index"] = i
        by_id = {self._key(node): node for node in nodes}
        outgoing: dict[Any, list[_Obj]] = {key: [] for key in by_id}
        incoming: dict[Any, list[_Obj]] = {key: [] for key in by_id}

        for i, link in enumerate(links):
            link["index"] = i
            for end in ("source", "target"):
                if link[end] not in by_id:
                    raise SolverError(f"missing: {link[end]}")
            outgoing[link["source"]].append(link)
            incoming[link["target"]].append(link)
        return by_id, outgoing, incoming

    @staticmethod
    def _topology(by_id: dict[Any, _Obj], links: list[_Obj]) -> nx.DiGraph:
        g = nx.DiGraph()
        g.add_nodes_from(by_id)
        g.add_edges_from((lk["source"], lk["target"]) for lk in links)
        if not nx.is_directed_acyclic_graph(g):
            raise SolverError("circular link")
        return g

    @staticmethod
    def _rank(by_id: dict[Any, _Obj], g: nx.DiGraph) -> None:
        """Depth is the longest path from a source, height the longest path to a sink."""
        order = list(nx.topological_sort(g))
        for key in order:
            by_id[key]["depth"] = max((by_id[p]["depth"] + 1 for p in g.predecessors(key)), default=0)
        for key in reversed(order):
            by_id[key]["height"] = max((by_id[s]["height"] + 1 for s in g.successors(key)), default=0)

    # ------------------------------------------------------------------
    # Horizontal placement
    # ------------------------------------------------------------------

    def _align(
        self,
        node: _Obj,
        n: int,
        by_id: dict[Any, _Obj],
        outgoing: list[_Obj],
        incoming: list[_Obj],
    ) -> float:
        if self.align is NodeAlign.LEFT:
            return node["depth"]
        if self.align is NodeAlign.RIGHT:
            return n - 1 - node["height"]
        if self.align is NodeAlign.CENTER:
            if incoming:
                return node["depth"]
            if outgoing:
                return min(by_id[lk["target"]]["depth"] for lk in outgoing) - 1
            return 0
        return node["depth"] if outgoing else n - 1

    def _assign_layers(
        self,
        nodes: list[_Obj],
        by_id: dict[Any, _Obj],
        outgoing: dict[Any, list[_Obj]],
        incoming: dict[Any, list[_Obj]],
    ) -> list[list[_Obj]]:
        (x0, _), (x1, _) = self.extent
        n = max((node["depth"] for node in nodes), default=-1) + 1
        kx = (x1 - x0 - self.node_width) / (n - 1) if n > 1 else 0.0

        columns: list[list[_Obj]] = [[] for _ in range(n)]
        for node in nodes:
            key = self._key(node)
            raw = self._align(node, n, by_id, outgoing[key], incoming[key])
            layer = max(0, min(n - 1, math.floor(raw)))
            node["layer"] = layer
            node["x0"] = x0 + layer * kx
            node["x1"] = node["x0"] + self.node_width
            columns[layer].append(node)
        return columns

    # ------------------------------------------------------------------
    # Vertical placement
    # ------------------------------------------------------------------

    def _assign_breadths(
        self,
        columns: list[list[_Obj]],
        outgoing: dict[Any, list[_Obj]],
    ) -> None:
        (_, y0), (_, y1) = self.extent
        longest = max((len(c) for c in columns), default=0)
        py = min(self.node_padding, (y1 - y0) / (longest - 1)) if longest > 1 else self.node_padding

        # Zero-total columns place nodes but cannot bound the scale.
        scales = [
            (y1 - y0 - (len(c) - 1) * py) / total
            for c in columns
            if (total := sum(node["value"] for node in c)) > 0
        ]
        ky = min(scales, default=0.0)

        for column in columns:
            y = y0
            for node in column:
                node["y0"] = y
                node["y1"] = y + node["value"] * ky
                y = node["y1"] + py
                for link in outgoing[self._key(node)]:
                    link["width"] = link["value"] * ky
            gap = (y1 - y + py) / (len(column) + 1)
            for i, node in enumerate(column, start=1):
                node["y0"] += gap * i
                node["y1"] += gap * i

    def _assign_link_breadths(
        self,
        nodes: list[_Obj],
        by_id: dict[Any, _Obj],
        outgoing: dict[Any, list[_Obj]],
        incoming: dict[Any, list[_Obj]],
    ) -> None:
        for node in nodes:
            key = self._key(node)
            y = node["y0"]
            for link in sorted(outgoing[key], key=lambda lk: (by_id[lk["target"]]["y0"], lk["index"])):
                link["y0"] = y + link["width"] / 2
                y += link["width"]
            y = node["y0"]
            for link in sorted(incoming[key], key=lambda lk: (by_id[lk["source"]]["y0"], lk["index"])):
                link["y1"] = y + link["width"] / 2
                y += link["width"]

    @staticmethod
    def _assign_paths(links: list[_Obj], by_id: dict[Any, _Obj]) -> None:
        """Horizontal cubic Bézier from the source's right edge to the target's left edge."""
        for link in links:
            sx = by_id[link["source"]]["x1"]
            tx = by_id[link["target"]]["x0"]
            xm = (sx + tx) / 2
            sy, ty = link["y0"], link["y1"]
            link["points"] = [(sx, sy), (tx, ty)]
            link["path"] = (
                f"M{_fmt(sx)},{_fmt(sy)}"
                f"C{_fmt(xm)},{_fmt(sy)},{_fmt(xm)},{_fmt(ty)},{_fmt(tx)},{_fmt(ty)}"
            )
