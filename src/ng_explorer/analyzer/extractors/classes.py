"""
Class declaration extraction from Tree-sitter.
"""

import logging
from typing import Any, List

from ng_explorer.analyzer.extractors.base import BaseExtractor
from ng_explorer.analyzer.models import ClassDefinition, SourceUnit
from ng_explorer.analyzer.tree_sitter_adapter import (
    first_child_of_type,
    has_token,
    node_text,
)

logger = logging.getLogger(__name__)


class ClassExtractor(BaseExtractor):
    """Extracts class declarations from Tree-sitter.

    Runs first; the decorator, member and call extractors attach their
    results to the ClassDefinitions recorded here.
    """

    def extract(self, tree: Any, result: SourceUnit) -> None:
        """Record every named class declaration in the file.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit to populate
        """
        for node, export_node in self.iter_class_nodes(tree):
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue

            start_line, end_line = self.get_node_line_range(node)
            result.classes.append(
                ClassDefinition(
                    name=node_text(name_node),
                    file=result.file_path,
                    start_line=start_line,
                    end_line=end_line,
                    is_exported=export_node is not None,
                    is_default_export=export_node is not None and has_token(export_node, "default"),
                    is_abstract=node.type == "abstract_class_declaration",
                    bases=self._extract_bases(node),
                )
            )

    def _extract_bases(self, node: Any) -> List[str]:
        """Names in the extends clause (implements clauses are ignored)."""
        heritage = first_child_of_type(node, "class_heritage")
        if heritage is None:
            return []
        extends = first_child_of_type(heritage, "extends_clause")
        if extends is None:
            return []
        return [node_text(value) for value in extends.children_by_field_name("value")]
