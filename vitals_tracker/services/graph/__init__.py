"""
Graph package for health record visualization.

This package contains:
- GraphService: Public orchestration layer for generating charts
- PlotlyBuilder: Plotly-specific figure construction
- DataPreparationService: Records to chart-ready series

Usage:
    from vitals_tracker.services.graph import GraphService

    html = GraphService().generate_html_graph(records, "Last 7 days")
"""
from vitals_tracker.services.graph.data_preparation_service import DataPreparationService
from vitals_tracker.services.graph.graph_service import GraphService
from vitals_tracker.services.graph.plotly_builder import PlotlyBuilder

__all__ = [
    "DataPreparationService",
    "GraphService",
    "PlotlyBuilder",
]
