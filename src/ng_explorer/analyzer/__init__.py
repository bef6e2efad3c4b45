"""
Analyzer module for Angular TypeScript sources.

- models: Data classes for parsed sources
- base_analyzer: SourceAnalyzer running the tree-sitter extractors
- project: SourceProject cache and cross-file resolution
- import_resolver, instance_matcher, method_usage: per-class matching
- component_analyzer: per-component orchestration
- dependency_extractor: injected class resolution
"""

from ng_explorer.analyzer.base_analyzer import SourceAnalyzer
from ng_explorer.analyzer.batch import ComponentAnalysisItem, analyze_components
from ng_explorer.analyzer.component_analyzer import (
    ComponentAnalysis,
    ComponentAnalyzer,
    InstanceSummary,
)
from ng_explorer.analyzer.dependency_extractor import ClassRef, DependencyExtractor
from ng_explorer.analyzer.import_resolver import ImportMatchResult, collect_target_imports
from ng_explorer.analyzer.models import (
    CallSite,
    ClassDefinition,
    DecoratorInfo,
    ExecutableMember,
    ImportBinding,
    ImportDeclaration,
    MemberInfo,
    ReExport,
    SourceUnit,
)
from ng_explorer.analyzer.project import SourceProject

__all__ = [
    "SourceAnalyzer",
    "SourceProject",
    "ComponentAnalyzer",
    "ComponentAnalysis",
    "InstanceSummary",
    "ComponentAnalysisItem",
    "analyze_components",
    "DependencyExtractor",
    "ClassRef",
    "ImportMatchResult",
    "collect_target_imports",
    "SourceUnit",
    "ClassDefinition",
    "MemberInfo",
    "CallSite",
    "ExecutableMember",
    "DecoratorInfo",
    "ImportBinding",
    "ImportDeclaration",
    "ReExport",
]
