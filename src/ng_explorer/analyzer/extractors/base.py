"""
Base extractor interface.

All extractors inherit from BaseExtractor and implement the extract method.
Uses Tree-sitter exclusively for parsing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional, Tuple

from ng_explorer.analyzer.models import ClassDefinition, SourceUnit
from ng_explorer.analyzer.tree_sitter_adapter import (
    TreeSitterNode,
    node_end_line,
    node_line,
    node_text,
    walk_tree,
)

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = ("class_declaration", "abstract_class_declaration")


class BaseExtractor(ABC):
    """Base class for all extractors.

    Extractors analyze Tree-sitter trees and populate SourceUnit results.
    Each extractor is responsible for one aspect of code analysis.
    """

    def walk_tree(self, tree: Any):
        """
        Walk a Tree-sitter tree.

        Args:
            tree: Tree-sitter root node

        Returns:
            Iterator over nodes in pre-order traversal
        """
        return walk_tree(tree)

    @abstractmethod
    def extract(self, tree: TreeSitterNode, result: SourceUnit) -> None:
        """Extract information from Tree-sitter tree and populate result.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit object to populate with extracted information
        """
        pass

    def iter_class_nodes(self, tree: TreeSitterNode) -> Iterator[Tuple[TreeSitterNode, Optional[TreeSitterNode]]]:
        """
        Yield class declaration nodes with their enclosing export statement.

        Named class expressions are included only as the value of
        ``export default``.

        Args:
            tree: Tree-sitter root node

        Returns:
            Iterator of (class node, export statement or None)
        """
        for node in self.walk_tree(tree):
            parent = node.parent
            exported = parent if parent is not None and parent.type == "export_statement" else None
            if node.type in CLASS_NODE_TYPES:
                yield node, exported
            elif node.type == "class" and exported is not None and node.child_by_field_name("name"):
                yield node, exported

    def find_class(self, result: SourceUnit, node: TreeSitterNode) -> Optional[ClassDefinition]:
        """Find the ClassDefinition recorded for a class node."""
        name = node_text(node.child_by_field_name("name"))
        line = node_line(node)
        for cls in result.classes:
            if cls.name == name and cls.start_line == line:
                return cls
        return None

    def get_node_line_range(self, node: Any) -> tuple[int, int]:
        """
        Get the line range of a Tree-sitter node.

        Args:
            node: Node to get range from

        Returns:
            Tuple of (start_line, end_line) using 1-based line numbers
        """
        return (node_line(node), node_end_line(node))
