"""sankeyctl — financial records to Sankey flow diagrams."""

__version__ = "0.1.0"
