"""
Recursive component graph traversal.

Breadth-first search from one or more root components. Two signals lead to
new nodes: custom element tags in a component's template that match an
indexed selector, and constructor/field types that resolve to project
classes. The visited set plus the depth and node ceilings bound the walk on
cyclic graphs.
"""

import logging
import os
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Set, Tuple

from ng_explorer.analyzer.component_analyzer import ComponentAnalyzer
from ng_explorer.analyzer.dependency_extractor import ClassRef, DependencyExtractor
from ng_explorer.analyzer.models import INJECTABLE_DECORATOR, ClassDefinition, SourceUnit
from ng_explorer.analyzer.project import SourceProject, normalize_path
from ng_explorer.analyzer.template import extract_element_selectors
from ng_explorer.graph.models import (
    KIND_COMPONENT,
    KIND_SERVICE,
    REASON_INJECTS,
    REASON_ROOT,
    REASON_TEMPLATE_TAG,
    DirectSummary,
    GraphEdge,
    GraphNode,
    RecursiveAnalysisRequest,
    RecursiveAnalysisResult,
)
from ng_explorer.graph.selector_index import SelectorIndex

logger = logging.getLogger(__name__)

NODE_LIMIT_MESSAGE = "Node limit {max_nodes} reached; traversal truncated."


@dataclass
class QueueItem:
    """A pending node and how it was reached."""

    ref: ClassRef
    depth: int
    reason: str


class TraversalContext:
    """Mutable state of one traversal run."""

    def __init__(self, request: RecursiveAnalysisRequest):
        self.request = request
        self.queue: Deque[QueueItem] = deque()
        self.visited: Set[ClassRef] = set()
        self.node_index: Dict[ClassRef, int] = {}
        self.nodes: List[GraphNode] = []
        self.edges: List[GraphEdge] = []
        self.diagnostics: List[str] = []
        self.truncated = False
        self.root_overrides: Dict[ClassRef, List[str]] = {}

        for root in request.roots:
            ref = ClassRef(normalize_path(root.file), root.class_name)
            if root.target_modules is not None and ref not in self.root_overrides:
                self.root_overrides[ref] = list(root.target_modules)

    def target_modules_for(self, ref: ClassRef) -> List[str]:
        """Root override for this identity, else the request default."""
        if ref in self.root_overrides:
            return self.root_overrides[ref]
        return list(self.request.target_modules)

    def enqueue(self, ref: ClassRef, depth: int, reason: str) -> None:
        if ref not in self.visited:
            self.queue.append(QueueItem(ref=ref, depth=depth, reason=reason))

    def depth_exceeded(self, depth: int) -> bool:
        return self.request.max_depth is not None and depth > self.request.max_depth

    def node_limit_reached(self) -> bool:
        return len(self.nodes) >= self.request.max_nodes

    def add_node(self, node: GraphNode) -> None:
        self.node_index[node.ref] = len(self.nodes)
        self.nodes.append(node)

    def diagnose(self, message: str) -> None:
        logger.warning(message)
        self.diagnostics.append(message)


class EdgeEmitter:
    """Collects the edges of one node, dropping repeated (target, reason) pairs."""

    def __init__(self, context: TraversalContext, item: QueueItem):
        self.context = context
        self.item = item
        self._seen: Set[Tuple[ClassRef, str]] = set()

    def emit(self, target: ClassRef, reason: str) -> None:
        if (target, reason) in self._seen:
            return
        self._seen.add((target, reason))
        self.context.edges.append(GraphEdge(source=self.item.ref, target=target, reason=reason))
        self.context.enqueue(target, self.item.depth + 1, reason)


def service_heuristics(cls: ClassDefinition, file_path: str) -> List[str]:
    """Informational tags explaining why a class is treated as a service."""
    tags = []
    if cls.has_decorator(INJECTABLE_DECORATOR):
        tags.append("decorator")
    if file_path.endswith(".service.ts"):
        tags.append("filename")
    if not tags:
        tags.append("generic")
    return tags


class RecursiveGraphAnalyzer:
    """Discovers the components and services reachable from root components."""

    def __init__(self, project: Optional[SourceProject] = None):
        """Initialize the analyzer.

        Args:
            project: Source cache shared with other analyzers (default: a new one)
        """
        self.project = project if project is not None else SourceProject()
        self.component_analyzer = ComponentAnalyzer(self.project)
        self.dependency_extractor = DependencyExtractor(self.project)
        self.selector_index = SelectorIndex()

    def analyze(self, request: RecursiveAnalysisRequest) -> RecursiveAnalysisResult:
        """
        Run the traversal.

        Args:
            request: Roots, module allow-list and ceilings

        Returns:
            Nodes and edges in discovery order, the aggregate of methods used
            by all components, diagnostics and the applied limits
        """
        context = TraversalContext(request)
        self._prime(request)

        for root in request.roots:
            context.enqueue(ClassRef(normalize_path(root.file), root.class_name), 0, REASON_ROOT)

        while context.queue:
            item = context.queue.popleft()
            if item.ref in context.visited:
                continue
            if context.node_limit_reached():
                context.diagnose(NODE_LIMIT_MESSAGE.format(max_nodes=request.max_nodes))
                context.truncated = True
                break
            if context.depth_exceeded(item.depth):
                continue
            context.visited.add(item.ref)
            self._visit(context, item)

        all_methods = sorted(
            {
                method
                for node in context.nodes
                if node.is_component and node.direct is not None
                for method in node.direct.all_methods_used
            }
        )
        logger.info(
            f"Traversal finished: {len(context.nodes)} nodes, {len(context.edges)} edges, "
            f"{len(context.diagnostics)} diagnostics"
        )
        return RecursiveAnalysisResult(
            nodes=context.nodes,
            edges=context.edges,
            all_methods_used=all_methods,
            diagnostics=context.diagnostics,
            max_depth=request.max_depth,
            max_nodes=request.max_nodes,
            truncated=context.truncated,
        )

    def _visit(self, context: TraversalContext, item: QueueItem) -> None:
        """Process one dequeued, not yet visited item.

        The unit is loaded once, with a hash-checked refresh, and every signal
        of the node is read from it.
        """
        unit = self.project.load(item.ref.file, refresh=True)
        if unit is None:
            context.diagnose(f"File not found: {item.ref.file}")
            return
        self.selector_index.update(unit)

        cls = unit.get_class(item.ref.class_name)
        if cls is None:
            context.diagnose(f"Class {item.ref.class_name} not found in {item.ref.file}")
            return

        edges = EdgeEmitter(context, item)
        if cls.is_component:
            node = self._component_node(context, item, unit, cls, edges)
        else:
            node = GraphNode(
                kind=KIND_SERVICE,
                file=item.ref.file,
                class_name=cls.name,
                depth=item.depth,
                reason=item.reason,
                service_heuristics=service_heuristics(cls, item.ref.file),
            )

        self._emit_injection_edges(context, unit, cls, edges)
        context.add_node(node)

    def _component_node(
        self,
        context: TraversalContext,
        item: QueueItem,
        unit: SourceUnit,
        cls: ClassDefinition,
        edges: EdgeEmitter,
    ) -> GraphNode:
        node = GraphNode(
            kind=KIND_COMPONENT,
            file=item.ref.file,
            class_name=cls.name,
            depth=item.depth,
            reason=item.reason,
            selector=cls.selector,
        )

        analysis = self.component_analyzer.analyze_class(unit, cls, context.target_modules_for(item.ref))
        node.direct = DirectSummary(
            instances=analysis.instances,
            all_methods_used=analysis.all_methods_used,
            template=analysis.template,
        )

        template_text = self._template_text(analysis.template.inline_template, analysis.template.template_file_path)
        if template_text:
            for tag in extract_element_selectors(template_text):
                for entry in self.selector_index.lookup(tag):
                    edges.emit(ClassRef(entry.file, entry.class_name), REASON_TEMPLATE_TAG)
        return node

    def _template_text(self, inline: Optional[str], file_path: Optional[str]) -> Optional[str]:
        """Inline template text, else the content of the external template."""
        if inline:
            return inline
        if file_path:
            return self.project.read_text(file_path)
        return None

    def _emit_injection_edges(
        self,
        context: TraversalContext,
        unit: SourceUnit,
        cls: ClassDefinition,
        edges: EdgeEmitter,
    ) -> None:
        unresolved: Optional[List[str]] = [] if context.request.audit_unresolved else None
        for dependency in self.dependency_extractor.extract(unit, cls, unresolved):
            edges.emit(dependency, REASON_INJECTS)
        for type_name in unresolved or []:
            context.diagnose(f"unresolved-import:{type_name}:{unit.file_path}")

    def _prime(self, request: RecursiveAnalysisRequest) -> None:
        """Preload neighbours of the roots and build the selector index."""
        for root in request.roots:
            unit = self.project.load(root.file, refresh=True)
            if unit is not None:
                self._preload_relative_imports(unit, 0, request.preload_depth)

        directories = []
        for root in request.roots:
            directory = os.path.dirname(normalize_path(root.file))
            if directory not in directories:
                directories.append(directory)
        for directory in directories:
            self.project.add_directory(directory)

        self.selector_index.rebuild(self.project.units())

    def _preload_relative_imports(self, unit: SourceUnit, depth: int, max_depth: int) -> None:
        if depth > max_depth:
            return
        for declaration in unit.imports:
            if not declaration.is_relative:
                continue
            path = self.project.resolve_module(unit.file_path, declaration.module)
            if path is None or path in self.project:
                continue
            loaded = self.project.load(path)
            if loaded is not None:
                self._preload_relative_imports(loaded, depth + 1, max_depth)
