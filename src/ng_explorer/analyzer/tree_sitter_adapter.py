"""
Tree-sitter helpers shared by the TypeScript extractors.

Thin functions over raw tree-sitter nodes: pre-order walking, text and
line access, and literal unquoting.
"""

import logging
from typing import Any, Iterator, List, Optional, Sequence

from ng_explorer.analyzer.parser import get_node_text

logger = logging.getLogger(__name__)

TreeSitterNode = Any  # tree_sitter.Node

STRING_NODE_TYPES = ("string", "template_string")


class TreeSitterWalker:
    """Walker class for traversing Tree-sitter trees in pre-order."""

    def __init__(self, node: TreeSitterNode, skip_types: Sequence[str] = ()):
        """Initialize walker with a root node.

        Args:
            node: Root node to walk
            skip_types: Node types whose children are not visited
        """
        self._stack = [node]
        self._skip_types = tuple(skip_types)

    def __iter__(self):
        return self

    def __next__(self) -> TreeSitterNode:
        if not self._stack:
            raise StopIteration
        node = self._stack.pop()
        if node.type not in self._skip_types:
            # Reverse order keeps siblings in source order
            self._stack.extend(reversed(node.children))
        return node


def walk_tree(tree: TreeSitterNode, skip_types: Sequence[str] = ()) -> Iterator[TreeSitterNode]:
    """
    Walk a Tree-sitter tree.

    Args:
        tree: Tree-sitter root node
        skip_types: Node types that are yielded but not descended into

    Returns:
        Iterator over nodes in pre-order traversal
    """
    return TreeSitterWalker(tree, skip_types)


def node_text(node: Optional[TreeSitterNode]) -> str:
    return get_node_text(node)


def node_line(node: TreeSitterNode) -> int:
    """1-based start line of a node."""
    return node.start_point[0] + 1


def node_end_line(node: TreeSitterNode) -> int:
    return node.end_point[0] + 1


def children_of_type(node: TreeSitterNode, *types: str) -> List[TreeSitterNode]:
    return [child for child in node.children if child.type in types]


def first_child_of_type(node: TreeSitterNode, *types: str) -> Optional[TreeSitterNode]:
    for child in node.children:
        if child.type in types:
            return child
    return None


def has_token(node: TreeSitterNode, token: str) -> bool:
    """Check whether an anonymous keyword token is a direct child of a node."""
    return any(not child.is_named and child.type == token for child in node.children)


def string_literal_value(node: Optional[TreeSitterNode]) -> Optional[str]:
    """
    Return the value of a string or template literal node.

    Plain strings and template literals without substitutions are unquoted.
    Template literals with ``${...}`` substitutions are returned as raw
    source text, backticks included, since their value is not static.

    Args:
        node: A tree-sitter node, possibly None

    Returns:
        The literal value, or None when the node is not a string literal
    """
    if node is None or node.type not in STRING_NODE_TYPES:
        return None
    text = node_text(node)
    if node.type == "template_string" and first_child_of_type(node, "template_substitution"):
        return text
    return text[1:-1]
