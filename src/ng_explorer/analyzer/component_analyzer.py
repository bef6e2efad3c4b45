"""
Per-component analysis.

Combines import resolution, instance matching and method-usage aggregation
for one component class, and reports its template metadata.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ng_explorer.analyzer.import_resolver import collect_target_imports
from ng_explorer.analyzer.instance_matcher import (
    InstanceRecord,
    collect_ctor_only_params,
    collect_target_instances,
)
from ng_explorer.analyzer.method_usage import (
    DEFAULT_MATCHERS,
    CallMatcher,
    collect_instance_method_usages,
)
from ng_explorer.analyzer.models import ClassDefinition, SourceUnit
from ng_explorer.analyzer.project import SourceProject, normalize_path
from ng_explorer.analyzer.template import TemplateInfo, extract_template_info

logger = logging.getLogger(__name__)


@dataclass
class InstanceSummary:
    """Methods invoked on one matched instance."""

    property_name: str
    type_name: str
    methods_used: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "propertyName": self.property_name,
            "typeName": self.type_name,
            "methodsUsed": list(self.methods_used),
        }


@dataclass
class ComponentAnalysis:
    """Result of analyzing one component class."""

    file_path: str
    class_name: str
    target_modules: List[str]
    selector: Optional[str] = None
    template: TemplateInfo = field(default_factory=TemplateInfo)
    instances: List[InstanceSummary] = field(default_factory=list)
    all_methods_used: List[str] = field(default_factory=list)
    matched_module_specifiers: List[str] = field(default_factory=list)
    imports_from_target_modules: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceFilePath": self.file_path,
            "componentClassName": self.class_name,
            "targetModules": list(self.target_modules),
            "selector": self.selector,
            "templateFilePath": self.template.template_file_path,
            "inlineTemplate": self.template.inline_template,
            "importsFromTargetModules": list(self.imports_from_target_modules),
            "matchedModuleSpecifiers": list(self.matched_module_specifiers),
            "serviceInstancesFromTargetModules": [i.to_dict() for i in self.instances],
            "allMethodsUsedOnTargetInstances": list(self.all_methods_used),
        }


def finalize_summaries(
    instances: Dict[str, InstanceRecord],
    ctor_only: Dict[str, InstanceRecord],
) -> List[InstanceSummary]:
    """
    Merge candidate records into sorted summaries.

    Member candidates come first, then constructor-only ones. A
    constructor-only candidate sharing a name with a member candidate is
    folded into it so property names stay unique.

    Args:
        instances: Parameter-property and field candidates
        ctor_only: Constructor-only parameter candidates

    Returns:
        One summary per distinct property name
    """
    merged: Dict[str, InstanceRecord] = {}
    for name, record in list(instances.items()) + list(ctor_only.items()):
        existing = merged.get(name)
        if existing is None:
            merged[name] = InstanceRecord(record.property_name, record.type_name, set(record.methods))
        else:
            existing.methods.update(record.methods)

    return [
        InstanceSummary(
            property_name=record.property_name,
            type_name=record.type_name,
            methods_used=record.sorted_methods(),
        )
        for record in merged.values()
    ]


class ComponentAnalyzer:
    """Analyzes component classes loaded through a SourceProject.

    Every call to analyze() builds a new result; nothing carries over
    between calls.
    """

    def __init__(
        self,
        project: Optional[SourceProject] = None,
        matchers: Sequence[CallMatcher] = DEFAULT_MATCHERS,
    ):
        """Initialize the analyzer.

        Args:
            project: Source cache to load files through (default: a new one)
            matchers: Call matcher strategies for method-usage aggregation
        """
        self.project = project if project is not None else SourceProject()
        self.matchers = matchers

    def analyze(
        self,
        file_path: str | Path,
        class_name: str,
        target_modules: Optional[Iterable[str]] = None,
    ) -> Optional[ComponentAnalysis]:
        """
        Analyze a component class.

        With no target modules only template metadata and selector are
        reported.

        Args:
            file_path: Path of the component file
            class_name: Exact name of the component class
            target_modules: Module specifiers whose imports are tracked

        Returns:
            ComponentAnalysis, or None if the file cannot be read or the class
            is missing or not a component
        """
        path = normalize_path(file_path)

        unit = self.project.load(path, refresh=True)
        if unit is None:
            logger.warning(f"Cannot load {path}")
            return None

        cls = unit.get_class(class_name)
        if cls is None or not cls.is_component:
            logger.debug(f"No component class {class_name} in {path}")
            return None

        return self.analyze_class(unit, cls, target_modules)

    def analyze_class(
        self,
        unit: SourceUnit,
        cls: ClassDefinition,
        target_modules: Optional[Iterable[str]] = None,
    ) -> ComponentAnalysis:
        """
        Analyze a component class from an already loaded unit.

        Args:
            unit: Parsed file holding the class
            cls: Component class of that unit
            target_modules: Module specifiers whose imports are tracked

        Returns:
            ComponentAnalysis built from this unit only
        """
        path = unit.file_path
        class_name = cls.name
        modules = list(target_modules or [])

        analysis = ComponentAnalysis(
            file_path=path,
            class_name=class_name,
            target_modules=modules,
            selector=cls.selector,
            template=extract_template_info(cls, path),
        )
        if not modules:
            return analysis

        imports = collect_target_imports(unit, modules)
        analysis.matched_module_specifiers = list(imports.matched_module_specifiers)
        analysis.imports_from_target_modules = list(imports.imports_from_target_modules)

        instances = collect_target_instances(cls, imports.imported_local_names, imports.namespace_local_names)
        ctor_only = collect_ctor_only_params(cls, imports.imported_local_names, imports.namespace_local_names)
        if not instances and not ctor_only:
            return analysis

        collect_instance_method_usages(cls, instances, ctor_only, self.matchers)

        analysis.instances = finalize_summaries(instances, ctor_only)
        analysis.all_methods_used = sorted(
            {method for summary in analysis.instances for method in summary.methods_used}
        )
        logger.debug(
            f"{class_name}: {len(analysis.instances)} instances, "
            f"{len(analysis.all_methods_used)} methods used"
        )
        return analysis
