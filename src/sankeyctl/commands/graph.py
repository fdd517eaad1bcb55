"""Command group: build, lay out and export flow diagrams."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from sankeyctl.commands._base import SankeyGroup
from sankeyctl.domain.types import NodeAlign
from sankeyctl.services.sankey import EXPORT_FORMATS

if TYPE_CHECKING:
    from sankeyctl.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  sankeyctl graph build data/jmu.json
  sankeyctl graph layout data/jmu.json --align left
  sankeyctl graph export data/jmu.json --format dot -o jmu.dot
  sankeyctl --json graph layout data/jmu.json"""

_DATA = click.argument(
    "data_file",
    type=click.Path(dir_okay=False, path_type=Path),
)


def _geometry_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the --align/--width/--height layout overrides."""
    func = click.option(
        "--height",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Canvas height in pixels.",
    )(func)
    func = click.option(
        "--width",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Canvas width in pixels.",
    )(func)
    func = click.option(
        "--align",
        type=click.Choice([a.value for a in NodeAlign]),
        default=None,
        help="Node alignment policy (default: justify).",
    )(func)
    return func


@click.group(cls=SankeyGroup, examples=_GRAPH_EXAMPLES)
def graph() -> None:
    """Turn revenue/expense records into a Sankey flow graph."""


@graph.command(
    examples="""\
  sankeyctl graph build data/jmu.json
  sankeyctl --json graph build data/jmu.json
  sankeyctl -q graph build data/jmu.json"""
)
@_DATA
@click.pass_obj
def build(app: AppContext, data_file: Path) -> None:
    """Build nodes and links from a records file."""
    app.emit(app.service().build(data_file))


@graph.command(
    examples="""\
  sankeyctl graph layout data/jmu.json
  sankeyctl graph layout data/jmu.json --align left --width 1200
  sankeyctl --json graph layout data/jmu.json"""
)
@_DATA
@_geometry_options
@click.pass_obj
def layout(
    app: AppContext,
    data_file: Path,
    align: str | None,
    width: float | None,
    height: float | None,
) -> None:
    """Compute node boxes and link paths."""
    app.emit(app.service(align=align, width=width, height=height).layout(data_file))


@graph.command(
    examples="""\
  sankeyctl graph export data/jmu.json
  sankeyctl graph export data/jmu.json --format dot
  sankeyctl graph export data/jmu.json -o diagram.json"""
)
@_DATA
@_geometry_options
@click.option(
    "--format",
    "fmt",
    type=click.Choice(list(EXPORT_FORMATS)),
    default="json",
    help="Output format.",
)
@click.option(
    "-o",
    "--output",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)
@click.pass_obj
def export(
    app: AppContext,
    data_file: Path,
    align: str | None,
    width: float | None,
    height: float | None,
    fmt: str,
    output: Path | None,
) -> None:
    """Export the laid-out diagram as JSON or DOT."""
    result = app.service(align=align, width=width, height=height).export(data_file, fmt=fmt)
    if result.ok and output is not None:
        output.write_text(result.data["content"], encoding="utf-8")
        data = {k: v for k, v in result.data.items() if k != "content"}
        data["path"] = str(output)
        result = result.model_copy(update={"op": "export_file", "data": data})
    app.emit(result)
