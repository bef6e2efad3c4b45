"""
Batch component analysis.

Runs the component analyzer over a list of independent requests, carrying a
caller correlation id through to each result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ng_explorer.analyzer.component_analyzer import ComponentAnalyzer
from ng_explorer.analyzer.project import SourceProject

logger = logging.getLogger(__name__)


@dataclass
class ComponentAnalysisItem:
    """One batch request."""

    source_file_path: str
    component_class_name: str
    item_id: Any = None  # Passthrough, not used by the analysis
    target_modules: Optional[List[str]] = None


@dataclass
class ComponentAnalysisItemResult:
    """A batch request combined with its analysis outputs."""

    item: ComponentAnalysisItem
    found: bool = False
    template_file_path: Optional[str] = None
    inline_template: Optional[str] = None
    imports_from_target_modules: List[str] = field(default_factory=list)
    matched_module_specifiers: List[str] = field(default_factory=list)
    all_methods_used: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceFilePath": self.item.source_file_path,
            "componentClassName": self.item.component_class_name,
            "itemId": self.item.item_id,
            "targetModules": self.item.target_modules,
            "found": self.found,
            "templateFilePath": self.template_file_path,
            "inlineTemplate": self.inline_template,
            "importsFromTargetModules": list(self.imports_from_target_modules),
            "matchedModuleSpecifiers": list(self.matched_module_specifiers),
            "allMethodsUsed": list(self.all_methods_used),
        }


def analyze_components(
    items: Iterable[ComponentAnalysisItem],
    project: Optional[SourceProject] = None,
) -> List[ComponentAnalysisItemResult]:
    """
    Analyze each item independently.

    Items without target modules only report template metadata.

    Args:
        items: Batch requests
        project: Shared source cache (default: a new one)

    Returns:
        One result per item, in input order
    """
    analyzer = ComponentAnalyzer(project if project is not None else SourceProject())
    results = []
    for item in items:
        analysis = analyzer.analyze(
            item.source_file_path,
            item.component_class_name,
            item.target_modules,
        )
        result = ComponentAnalysisItemResult(item=item)
        if analysis is None:
            logger.warning(f"Component {item.component_class_name} not analyzed ({item.source_file_path})")
        else:
            result.found = True
            result.template_file_path = analysis.template.template_file_path
            result.inline_template = analysis.template.inline_template
            result.imports_from_target_modules = analysis.imports_from_target_modules
            result.matched_module_specifiers = analysis.matched_module_specifiers
            result.all_methods_used = analysis.all_methods_used
        results.append(result)
    return results
