"""
Recursive component graph analysis.

- models: request, node, edge and result types
- selector_index: tag name to component lookup
- traversal: RecursiveGraphAnalyzer breadth-first search
"""

from ng_explorer.graph.models import (
    DEFAULT_MAX_NODES,
    AnalysisRoot,
    DirectSummary,
    GraphEdge,
    GraphNode,
    RecursiveAnalysisRequest,
    RecursiveAnalysisResult,
)
from ng_explorer.graph.selector_index import SelectorEntry, SelectorIndex, split_selector
from ng_explorer.graph.traversal import RecursiveGraphAnalyzer, TraversalContext

__all__ = [
    "DEFAULT_MAX_NODES",
    "AnalysisRoot",
    "DirectSummary",
    "GraphEdge",
    "GraphNode",
    "RecursiveAnalysisRequest",
    "RecursiveAnalysisResult",
    "RecursiveGraphAnalyzer",
    "SelectorEntry",
    "SelectorIndex",
    "TraversalContext",
    "split_selector",
]
