"""Flow graph value types — Node, Link, Graph.

A Graph is built once per dataset load and never mutated afterwards.
Consumers that need to annotate nodes or links (the layout solver) work
on copies obtained through ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from sankeyctl.domain.types import NodeCategory

CENTER_NAME = "JMU"
CENTER_TITLE = "James Madison University"


@dataclass(frozen=True)
class Node:
    """A vertex in the flow diagram. Identity is ``name``."""

    name: str
    value: float
    title: str
    category: NodeCategory

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["category"] = str(self.category)
        return data


@dataclass(frozen=True)
class Link:
    """A weighted edge between two node names."""

    source: str
    target: str
    value: float

    def __post_init__(self) -> None:
        if self.value < 0:
            msg = f"Link {self.source} -> {self.target} has negative value {self.value}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Graph:
    """Immutable node and link lists."""

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()
    _index: dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {n.name: n for n in self.nodes})

    def node(self, name: str) -> Node | None:
        """Return the node called *name*, or None."""
        return self._index.get(name)

    def node_names(self) -> set[str]:
        return set(self._index)

    def by_category(self, category: NodeCategory) -> list[Node]:
        """Nodes of one tier, in build order."""
        return [n for n in self.nodes if n.category == category]

    def to_dict(self) -> dict[str, Any]:
        """Fresh mutable copies of every node and link."""
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [lk.to_dict() for lk in self.links],
        }
