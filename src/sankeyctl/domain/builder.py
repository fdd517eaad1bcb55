"""Graph Builder — financial records to a five-tier flow graph.

Records are partitioned into four buckets by ``type`` membership, each
bucket becomes one node tier with ids ``<tier><index>``, and a single
center node joins the income side to the expense side::

    incomeItem -> incomeCategory -> JMU -> expenseCategory -> expenseItem

Items are paired with categories by a join strategy. The default,
``positional``, pairs item *i* with category ``i % len(categories)``; it
does not look at any shared key. ``exact-key`` pairs on the record's
``category`` field instead.

INVARIANT: the builder is a pure function of its input. Building twice
from the same records yields equal graphs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from sankeyctl.config.models import DatasetConfig
from sankeyctl.domain.errors import LinkTargetUndefined, NegativeFlowError
from sankeyctl.domain.graph import CENTER_NAME, CENTER_TITLE, Graph, Link, Node
from sankeyctl.domain.records import Record
from sankeyctl.domain.types import JoinStrategy, NodeCategory


@dataclass(frozen=True)
class _Entry:
    """A node together with the record it was built from."""

    record: Record
    node: Node


def _bucket(records: Iterable[Record], types: Iterable[str]) -> list[Record]:
    wanted = set(types)
    return [r for r in records if r.type in wanted]


def _make_tier(
    records: Sequence[Record],
    category: NodeCategory,
    *,
    value: Callable[[Record], float],
    title: Callable[[Record], str],
) -> list[_Entry]:
    return [
        _Entry(
            record=r,
            node=Node(
                name=f"{category}{index}",
                value=value(r),
                title=title(r),
                category=category,
            ),
        )
        for index, r in enumerate(records)
    ]


def _pair(
    items: Sequence[_Entry],
    categories: Sequence[_Entry],
    strategy: JoinStrategy,
) -> list[tuple[_Entry, _Entry]]:
    """Pair every item with one category.

    Raises:
        LinkTargetUndefined: an item has no category to pair with.
    """
    pairs: list[tuple[_Entry, _Entry]] = []
    for index, item in enumerate(items):
        if not categories:
            raise LinkTargetUndefined(
                f"No category node for {item.node.name}: category bucket is empty",
                item=item.node.name,
                strategy=str(strategy),
            )
        if strategy is JoinStrategy.POSITIONAL:
            pairs.append((item, categories[index % len(categories)]))
            continue

        match = next((c for c in categories if c.record.category == item.record.category), None)
        if match is None:
            raise LinkTargetUndefined(
                f"No category node for {item.node.name}: "
                f"no category matches '{item.record.category}'",
                item=item.node.name,
                key=item.record.category,
                strategy=str(strategy),
            )
        pairs.append((item, match))
    return pairs


def _check_flows(entries: Sequence[_Entry]) -> None:
    """Reject entries whose value would become a negative link value."""
    for entry in entries:
        if entry.node.value < 0:
            raise NegativeFlowError(
                f"{entry.node.name} ('{entry.record.name}') has negative value {entry.record.value:g}",
                node=entry.node.name,
                record=entry.record.name,
                type=entry.record.type,
                value=entry.record.value,
            )


def build_graph(records: Sequence[Record], dataset: DatasetConfig | None = None) -> Graph:
    """Build the flow graph for *records*.

    Records whose ``type`` belongs to no bucket are dropped without
    error. Category nodes carry no value of their own on the income
    side, so ``incomeCategory -> JMU`` links are 0 and the center node's
    value is left to the layout solver.

    Raises:
        NegativeFlowError: an income item or expense category record has
            a negative value.
        LinkTargetUndefined: an item bucket is non-empty while its
            category bucket is empty, or an exact-key join finds no match.
    """
    dataset = dataset or DatasetConfig()

    income_items = _make_tier(
        _bucket(records, dataset.income_item_types),
        NodeCategory.INCOME_ITEM,
        value=lambda r: r.value,
        title=lambda r: r.name,
    )
    income_categories = _make_tier(
        _bucket(records, dataset.income_category_types),
        NodeCategory.INCOME_CATEGORY,
        value=lambda r: 0,
        title=lambda r: r.category,
    )
    center = Node(
        name=CENTER_NAME,
        value=0,
        title=CENTER_TITLE,
        category=NodeCategory.CENTER,
    )
    expense_categories = _make_tier(
        _bucket(records, dataset.expense_category_types),
        NodeCategory.EXPENSE_CATEGORY,
        value=lambda r: r.value,
        title=lambda r: r.name,
    )
    expense_items = _make_tier(
        _bucket(records, dataset.expense_item_types),
        NodeCategory.EXPENSE_ITEM,
        value=lambda r: 0,
        title=lambda r: r.name,
    )

    _check_flows(income_items)
    _check_flows(expense_categories)

    links: list[Link] = []
    for item, cat in _pair(income_items, income_categories, dataset.join):
        links.append(Link(source=item.node.name, target=cat.node.name, value=item.node.value))
    for cat in income_categories:
        links.append(Link(source=cat.node.name, target=center.name, value=cat.node.value or 0))
    for cat in expense_categories:
        links.append(Link(source=center.name, target=cat.node.name, value=cat.node.value))
    for item, cat in _pair(expense_items, expense_categories, dataset.join):
        links.append(Link(source=cat.node.name, target=item.node.name, value=item.node.value or 0))

    nodes = [
        *(e.node for e in income_items),
        *(e.node for e in income_categories),
        center,
        *(e.node for e in expense_categories),
        *(e.node for e in expense_items),
    ]
    return Graph(nodes=tuple(nodes), links=tuple(links))
