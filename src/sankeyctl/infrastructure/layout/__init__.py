"""Geometry solver for Sankey layouts."""

from sankeyctl.infrastructure.layout.solver import SankeySolver, SolverError

__all__ = ["SankeySolver", "SolverError"]
