"""
Data models for recursive component graph analysis.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ng_explorer.analyzer.component_analyzer import InstanceSummary
from ng_explorer.analyzer.dependency_extractor import ClassRef
from ng_explorer.analyzer.template import TemplateInfo

DEFAULT_MAX_NODES = 500
DEFAULT_PRELOAD_DEPTH = 2

REASON_ROOT = "root"
REASON_TEMPLATE_TAG = "template-tag"
REASON_INJECTS = "injects"

KIND_COMPONENT = "component"
KIND_SERVICE = "service"


def ref_to_dict(ref: ClassRef) -> Dict[str, str]:
    return {"file": ref.file, "className": ref.class_name}


@dataclass
class AnalysisRoot:
    """A traversal seed. ``target_modules`` overrides the request default."""

    file: str
    class_name: str
    target_modules: Optional[List[str]] = None


@dataclass
class RecursiveAnalysisRequest:
    """Input of a recursive analysis run.

    Attributes:
        roots: Seeds, all at depth 0
        target_modules: Module allow-list for roots without an override
        max_depth: Deepest level processed; None for unbounded
        max_nodes: Ceiling on emitted nodes
        audit_unresolved: Record a diagnostic for each unresolved type reference
        preload_depth: How many levels of relative imports of roots to preload
    """

    roots: List[AnalysisRoot]
    target_modules: List[str] = field(default_factory=list)
    max_depth: Optional[int] = None
    max_nodes: int = DEFAULT_MAX_NODES
    audit_unresolved: bool = False
    preload_depth: int = DEFAULT_PRELOAD_DEPTH


@dataclass
class DirectSummary:
    """Component analysis attached to a component node."""

    instances: List[InstanceSummary] = field(default_factory=list)
    all_methods_used: List[str] = field(default_factory=list)
    template: Optional[TemplateInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "instances": [instance.to_dict() for instance in self.instances],
            "allMethodsUsed": list(self.all_methods_used),
        }
        if self.template is not None and not self.template.is_empty:
            data["template"] = {
                "inline": self.template.inline_template,
                "filePath": self.template.template_file_path,
            }
        return data


@dataclass
class GraphNode:
    """A visited component or service."""

    kind: str
    file: str
    class_name: str
    depth: int = 0
    reason: str = REASON_ROOT
    selector: Optional[str] = None
    direct: Optional[DirectSummary] = None
    service_heuristics: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    @property
    def ref(self) -> ClassRef:
        return ClassRef(self.file, self.class_name)

    @property
    def is_component(self) -> bool:
        return self.kind == KIND_COMPONENT

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind,
            "file": self.file,
            "className": self.class_name,
            "depth": self.depth,
            "reason": self.reason,
        }
        if self.is_component:
            if self.selector is not None:
                data["selector"] = self.selector
            if self.direct is not None:
                data["direct"] = self.direct.to_dict()
        else:
            data["serviceHeuristics"] = list(self.service_heuristics)
        data["diagnostics"] = list(self.diagnostics)
        return data


@dataclass(frozen=True)
class GraphEdge:
    """A discovery relation between two nodes."""

    source: ClassRef
    target: ClassRef
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": ref_to_dict(self.source),
            "to": ref_to_dict(self.target),
            "reason": self.reason,
        }


@dataclass
class RecursiveAnalysisResult:
    """Output of a recursive analysis run."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    all_methods_used: List[str] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    max_depth: Optional[int] = None
    max_nodes: int = DEFAULT_MAX_NODES
    truncated: bool = False

    def get_node(self, file: str, class_name: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.file == file and node.class_name == class_name:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "aggregate": {"allMethodsUsed": list(self.all_methods_used)},
            "diagnostics": list(self.diagnostics),
            "limits": {
                "maxDepth": self.max_depth,
                "maxNodes": self.max_nodes,
                "truncated": self.truncated,
            },
        }
