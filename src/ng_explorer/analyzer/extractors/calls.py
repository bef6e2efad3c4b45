"""
Executable member and call-site extraction from Tree-sitter.
"""

import logging
from typing import Any, Optional, Tuple

from ng_explorer.analyzer.extractors.base import BaseExtractor
from ng_explorer.analyzer.models import CallSite, ExecutableMember, SourceUnit
from ng_explorer.analyzer.tree_sitter_adapter import (
    has_token,
    node_line,
    node_text,
    walk_tree,
)

logger = logging.getLogger(__name__)


class CallExtractor(BaseExtractor):
    """Extracts constructors, methods and accessors with their call sites."""

    def extract(self, tree: Any, result: SourceUnit) -> None:
        """Attach executable members to the classes already recorded in result.

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
                if child.type != "method_definition":
                    continue
                member = ExecutableMember(
                    name=node_text(child.child_by_field_name("name")),
                    kind=self._member_kind(child),
                    line_number=node_line(child),
                )
                method_body = child.child_by_field_name("body")
                if method_body is not None:
                    for node in walk_tree(method_body):
                        if node.type == "call_expression":
                            call = self._extract_call(node)
                            if call is not None:
                                member.calls.append(call)
                cls.executables.append(member)

    def _member_kind(self, node: Any) -> str:
        if node_text(node.child_by_field_name("name")) == "constructor":
            return "constructor"
        if has_token(node, "get"):
            return "getter"
        if has_token(node, "set"):
            return "setter"
        return "method"

    def _extract_call(self, node: Any) -> Optional[CallSite]:
        """Describe a call_expression by its callee.

        Tree-sitter structure:
        - call_expression: function arguments
        - member_expression: object ['?.'] property

        Args:
            node: call_expression node

        Returns:
            CallSite or None for calls without a callee
        """
        callee = node.child_by_field_name("function")
        if callee is None:
            return None

        call = CallSite(callee_text=node_text(callee), line_number=node_line(node))
        if callee.type == "member_expression":
            call.method_name = node_text(callee.child_by_field_name("property"))
            call.receiver_kind, call.receiver_name = self._receiver(
                callee.child_by_field_name("object")
            )
        return call

    def _receiver(self, obj: Any) -> Tuple[Optional[str], Optional[str]]:
        if obj is None:
            return None, None
        if obj.type == "identifier":
            return "identifier", node_text(obj)
        if obj.type == "member_expression":
            inner = obj.child_by_field_name("object")
            if inner is not None and inner.type == "this":
                return "this_member", node_text(obj.child_by_field_name("property"))
        return None, None
