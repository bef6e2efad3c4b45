"""
Class decorator extraction from Tree-sitter.

Records decorator names, their raw argument text and the string-valued
properties of an object literal argument, which is how component metadata
(selector, template, templateUrl) is declared.
"""

import logging
from typing import Any, Dict, List, Optional

from ng_explorer.analyzer.extractors.base import BaseExtractor
from ng_explorer.analyzer.models import DecoratorInfo, SourceUnit
from ng_explorer.analyzer.tree_sitter_adapter import (
    children_of_type,
    node_line,
    node_text,
    string_literal_value,
)

logger = logging.getLogger(__name__)


class DecoratorExtractor(BaseExtractor):
    """Extracts class decorators from Tree-sitter."""

    def extract(self, tree: Any, result: SourceUnit) -> None:
        """Attach decorators to the classes already recorded in result.

        Decorators of an exported class are children of the export
        statement rather than of the class declaration.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit to populate
        """
        for class_node, export_node in self.iter_class_nodes(tree):
            cls = self.find_class(result, class_node)
            if cls is None:
                continue

            decorator_nodes: List[Any] = []
            if export_node is not None:
                decorator_nodes.extend(children_of_type(export_node, "decorator"))
            decorator_nodes.extend(children_of_type(class_node, "decorator"))

            for decorator_node in decorator_nodes:
                decorator = self._extract_decorator(decorator_node)
                if decorator is not None:
                    cls.decorators.append(decorator)

    def _extract_decorator(self, node: Any) -> Optional[DecoratorInfo]:
        """Build a DecoratorInfo from a decorator node.

        Tree-sitter structure:
        - decorator: '@' (identifier | member_expression | call_expression)
        - call_expression: function arguments

        Args:
            node: decorator node

        Returns:
            DecoratorInfo, or None if the expression has no usable name
        """
        expression = node.named_children[0] if node.named_children else None
        if expression is None:
            return None

        arguments = None
        if expression.type == "call_expression":
            arguments = expression.child_by_field_name("arguments")
            expression = expression.child_by_field_name("function")

        name = self._decorator_name(expression)
        if not name:
            logger.debug(f"Skipping decorator without a name at line {node_line(node)}")
            return None

        arguments_text = node_text(arguments)[1:-1] if arguments is not None else ""
        properties: Dict[str, str] = {}
        if arguments is not None and arguments.named_children:
            first = arguments.named_children[0]
            if first.type == "object":
                properties = self._object_string_properties(first)

        return DecoratorInfo(
            name=name,
            line_number=node_line(node),
            arguments=arguments_text,
            properties=properties,
        )

    def _decorator_name(self, expression: Any) -> Optional[str]:
        if expression is None:
            return None
        if expression.type == "identifier":
            return node_text(expression)
        if expression.type == "member_expression":
            # @core.Component(...) -> Component
            return node_text(expression.child_by_field_name("property"))
        return None

    def _object_string_properties(self, obj: Any) -> Dict[str, str]:
        properties: Dict[str, str] = {}
        for pair in children_of_type(obj, "pair"):
            key_node = pair.child_by_field_name("key")
            if key_node is None:
                continue
            key = string_literal_value(key_node)
            if key is None:
                key = node_text(key_node)
            value = string_literal_value(pair.child_by_field_name("value"))
            if value is not None:
                properties[key] = value
        return properties
