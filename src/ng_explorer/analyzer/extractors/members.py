"""
Constructor parameter and field extraction from Tree-sitter.

A constructor parameter carrying an accessibility modifier or ``readonly``
is promoted to a field by TypeScript; the storage modifier is kept so that
callers can tell promoted parameters from constructor-only ones.
"""

import logging
from typing import Any, Optional, Tuple

from ng_explorer.analyzer.extractors.base import BaseExtractor
from ng_explorer.analyzer.models import MemberInfo, SourceUnit
from ng_explorer.analyzer.tree_sitter_adapter import (
    first_child_of_type,
    has_token,
    node_line,
    node_text,
)

logger = logging.getLogger(__name__)

PARAMETER_NODE_TYPES = ("required_parameter", "optional_parameter")
FIELD_NODE_TYPES = ("public_field_definition",)


def type_reference_name(type_node: Any) -> Optional[str]:
    """Name of the class-like type a type node refers to.

    Generic arguments are dropped (``Store<State>`` -> ``Store``) and
    qualified names are kept whole (``Api.Client``). Non-reference types
    such as unions, arrays and primitives have no name.

    Args:
        type_node: The type inside a type_annotation

    Returns:
        The referenced type name or None
    """
    if type_node is None:
        return None
    if type_node.type in ("type_identifier", "nested_type_identifier", "identifier"):
        return node_text(type_node)
    if type_node.type == "generic_type":
        return type_reference_name(type_node.child_by_field_name("name"))
    return None


def annotation_type(node: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return (type text, referenced type name) of a node's type annotation."""
    annotation = node.child_by_field_name("type")
    if annotation is None:
        annotation = first_child_of_type(node, "type_annotation")
    if annotation is None or not annotation.named_children:
        return None, None
    type_node = annotation.named_children[0]
    return node_text(type_node), type_reference_name(type_node)


def storage_modifier(node: Any) -> Optional[str]:
    """Accessibility modifier text, else 'readonly' when present."""
    modifier = first_child_of_type(node, "accessibility_modifier")
    if modifier is not None:
        return node_text(modifier)
    if has_token(node, "readonly"):
        return "readonly"
    return None


class MemberExtractor(BaseExtractor):
    """Extracts constructor parameters and declared fields of classes."""

    def extract(self, tree: Any, result: SourceUnit) -> None:
        """Attach members to the classes already recorded in result.

        Args:
            tree: Tree-sitter root node
            result: SourceUnit to populate
        """
        for class_node, _ in self.iter_class_nodes(tree):
            cls = self.find_class(result, class_node)
            body = class_node.child_by_field_name("body")
            if cls is None or body is None:
                continue

            for child in body.named_children:
                if child.type == "method_definition" and node_text(child.child_by_field_name("name")) == "constructor":
                    parameters = child.child_by_field_name("parameters")
                    if parameters is not None and not cls.constructor_params:
                        cls.constructor_params.extend(self._extract_parameters(parameters))
                elif child.type in FIELD_NODE_TYPES:
                    member = self._extract_field(child)
                    if member is not None:
                        cls.fields.append(member)

    def _extract_parameters(self, parameters: Any) -> list[MemberInfo]:
        members = []
        for param in parameters.named_children:
            if param.type not in PARAMETER_NODE_TYPES:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None or pattern.type != "identifier":
                # Destructured and `this` parameters have no single name
                continue
            type_text, type_name = annotation_type(param)
            members.append(
                MemberInfo(
                    name=node_text(pattern),
                    kind="parameter",
                    line_number=node_line(param),
                    type_text=type_text,
                    type_name=type_name,
                    storage_modifier=storage_modifier(param),
                )
            )
        return members

    def _extract_field(self, node: Any) -> Optional[MemberInfo]:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        type_text, type_name = annotation_type(node)
        return MemberInfo(
            name=node_text(name_node),
            kind="field",
            line_number=node_line(node),
            type_text=type_text,
            type_name=type_name,
            storage_modifier=storage_modifier(node),
        )
