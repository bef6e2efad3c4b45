"""
Project-wide class index for completeness audits.

Indexes every class of every ``.ts`` file under a root, recording what it
injects and which methods it calls on catalogued services. Unlike the
recursive traversal, nothing is skipped silently: every type reference that
does not resolve to a project class is reported.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ng_explorer.analyzer.instance_matcher import InstanceRecord
from ng_explorer.analyzer.method_usage import (
    StructuralReceiverMatcher,
    ThisMemberPattern,
    collect_instance_method_usages,
)
from ng_explorer.analyzer.dependency_extractor import ClassRef, DependencyExtractor
from ng_explorer.analyzer.models import COMPONENT_DECORATOR, ClassDefinition, SourceUnit
from ng_explorer.analyzer.project import DEFAULT_EXCLUDE_DIRS, SourceProject, normalize_path

logger = logging.getLogger(__name__)

CLASS_INDEX_SCHEMA = "class-index-1"
SERVICE_CATALOG_SCHEMA = "service-catalog-1"

# Only calls through ``this.<member>`` count for the index
SERVICE_CALL_MATCHERS = (ThisMemberPattern(), StructuralReceiverMatcher())


@dataclass
class ServiceRecord:
    """A catalogued service class."""

    key: str
    file: str
    class_name: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "file": self.file, "className": self.class_name}


@dataclass
class ServiceCatalog:
    """Known service classes, looked up by file and class name."""

    services: List[ServiceRecord] = field(default_factory=list)
    schema_version: Optional[str] = SERVICE_CATALOG_SCHEMA
    diagnostics: List[str] = field(default_factory=list)

    def __post_init__(self):
        self._by_file_and_name: Dict[Tuple[str, str], str] = {}
        self._by_name: Dict[str, Optional[str]] = {}
        for service in self.services:
            self._by_file_and_name[(normalize_path(service.file).lower(), service.class_name)] = service.key
            if service.class_name not in self._by_name:
                self._by_name[service.class_name] = service.key
            elif self._by_name[service.class_name] != service.key:
                # Same class name in two services: ambiguous by name
                self._by_name[service.class_name] = None

    def key_for(self, file: Optional[str], class_name: str) -> Optional[str]:
        """
        Find the service key of a class.

        Args:
            file: Declaring file, if known
            class_name: Class name

        Returns:
            The key matched by file and name, else by a unique class name
        """
        if file is not None:
            key = self._by_file_and_name.get((normalize_path(file).lower(), class_name))
            if key is not None:
                return key
        return self._by_name.get(class_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "services": [service.to_dict() for service in self.services],
            "diagnostics": list(self.diagnostics),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceCatalog":
        services = [
            ServiceRecord(key=s["key"], file=s["file"], class_name=s["className"])
            for s in data.get("services", [])
        ]
        return cls(services=services, schema_version=data.get("schemaVersion"))


def load_service_catalog(path: str | Path) -> ServiceCatalog:
    """Read a service catalog JSON file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If it is not valid catalog JSON
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Service catalog {path} must be a JSON object")
    return ServiceCatalog.from_dict(data)


def build_service_catalog(
    project_root: str | Path,
    include_globs: Iterable[str],
    project: Optional[SourceProject] = None,
) -> ServiceCatalog:
    """
    Catalog the exported classes of files matching include globs.

    Args:
        project_root: Directory the globs are relative to
        include_globs: Patterns such as ``src/api/**/*.service.ts``
        project: Source cache to parse through (default: a new one)

    Returns:
        ServiceCatalog sorted by key, with diagnostics for files without
        exported classes
    """
    root = Path(normalize_path(project_root))
    project = project if project is not None else SourceProject()
    diagnostics: List[str] = []
    globs = list(include_globs)
    if not globs:
        diagnostics.append("No include globs provided")
        return ServiceCatalog(diagnostics=diagnostics)

    files = sorted({path for pattern in globs for path in root.glob(pattern) if path.is_file()})
    services: Dict[str, ServiceRecord] = {}
    for file_path in files:
        if set(file_path.relative_to(root).parts) & set(DEFAULT_EXCLUDE_DIRS):
            continue
        unit = project.load(file_path)
        if unit is None:
            diagnostics.append(f"Failed to read file: {file_path}")
            continue
        exported = [cls for cls in unit.classes if cls.is_exported]
        if not exported:
            diagnostics.append(f"no-exported-classes: {unit.file_path}")
            continue
        for cls in exported:
            key = ClassRef(unit.file_path, cls.name).key
            if key in services:
                diagnostics.append(f"duplicate-key: {key}")
                continue
            services[key] = ServiceRecord(key=key, file=unit.file_path, class_name=cls.name)

    return ServiceCatalog(
        services=[services[key] for key in sorted(services)],
        diagnostics=diagnostics,
    )


@dataclass
class ServiceCall:
    service: str
    method: str

    def to_dict(self) -> Dict[str, str]:
        return {"service": self.service, "method": self.method}


@dataclass
class ClassIndexEntry:
    """One indexed class."""

    key: str
    file: str
    class_name: str
    kind: str  # "component", "abstract" or "class"
    injects: List[str] = field(default_factory=list)
    service_calls: List[ServiceCall] = field(default_factory=list)
    selector: Optional[str] = None
    template: Optional[Dict[str, str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "key": self.key,
            "file": self.file,
            "className": self.class_name,
            "kind": self.kind,
            "injects": list(self.injects),
            "serviceCalls": [call.to_dict() for call in self.service_calls],
        }
        if self.selector:
            data["selector"] = self.selector
        if self.template:
            data["template"] = dict(self.template)
        return data


@dataclass
class ClassIndexResult:
    classes: List[ClassIndexEntry] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    services_catalog_version: Optional[str] = None
    schema_version: str = CLASS_INDEX_SCHEMA

    def get(self, class_name: str) -> Optional[ClassIndexEntry]:
        for entry in self.classes:
            if entry.class_name == class_name:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schemaVersion": self.schema_version,
            "servicesCatalogVersion": self.services_catalog_version,
            "classes": [entry.to_dict() for entry in self.classes],
            "diagnostics": list(self.diagnostics),
        }


def class_kind(cls: ClassDefinition) -> str:
    if cls.is_component:
        return "component"
    if cls.is_abstract:
        return "abstract"
    return "class"


def component_template(cls: ClassDefinition) -> Optional[Dict[str, str]]:
    """Inline template text, else the templateUrl as written."""
    decorator = cls.get_decorator(COMPONENT_DECORATOR)
    if decorator is None:
        return None
    if "template" in decorator.properties:
        return {"inline": decorator.properties["template"]}
    if "templateUrl" in decorator.properties:
        return {"file": decorator.properties["templateUrl"]}
    return None


class ClassIndexBuilder:
    """Builds a ClassIndexResult over one project root."""

    def __init__(
        self,
        service_catalog: Optional[ServiceCatalog] = None,
        capture_templates: bool = True,
        project: Optional[SourceProject] = None,
    ):
        if service_catalog is None:
            service_catalog = ServiceCatalog(schema_version=None)
        self.catalog = service_catalog
        self.capture_templates = capture_templates
        self.project = project if project is not None else SourceProject()
        self.dependency_extractor = DependencyExtractor(self.project)

    def build(self, project_root: str | Path) -> ClassIndexResult:
        """
        Index all classes under a directory.

        ``node_modules``, ``dist``, ``.git`` and ``*.spec.ts`` files are
        skipped.

        Args:
            project_root: Directory to scan recursively

        Returns:
            ClassIndexResult with classes sorted by key
        """
        result = ClassIndexResult(services_catalog_version=self.catalog.schema_version)
        units = self.project.add_directory(project_root, recursive=True, include_specs=False)
        logger.info(f"Indexing {len(units)} files under {project_root}")

        seen_keys = set()
        for unit in units:
            for cls in unit.classes:
                key = ClassRef(unit.file_path, cls.name).key
                if key in seen_keys:
                    result.diagnostics.append(f"duplicate-class-key:{key}")
                    continue
                seen_keys.add(key)
                result.classes.append(self._index_class(unit, cls, key, result.diagnostics))

        result.classes.sort(key=lambda entry: entry.key)
        return result

    def _index_class(
        self,
        unit: SourceUnit,
        cls: ClassDefinition,
        key: str,
        diagnostics: List[str],
    ) -> ClassIndexEntry:
        entry = ClassIndexEntry(key=key, file=unit.file_path, class_name=cls.name, kind=class_kind(cls))
        if cls.is_component:
            entry.selector = cls.selector
            if self.capture_templates:
                entry.template = component_template(cls)

        injects = set()
        service_members: Dict[str, InstanceRecord] = {}
        service_keys: Dict[str, str] = {}
        for member in self.dependency_extractor.candidate_members(cls):
            target = self.project.resolve_class(unit, member.type_name)
            if target is None:
                diagnostics.append(f"unresolved-import:{member.type_name}:{unit.file_path}")
                continue
            injects.add(ClassRef(target.file, target.name).key)
            service_key = self.catalog.key_for(target.file, target.name)
            if service_key is not None and member.name not in service_members:
                service_members[member.name] = InstanceRecord(property_name=member.name, type_name=target.name)
                service_keys[member.name] = service_key

        collect_instance_method_usages(cls, service_members, matchers=SERVICE_CALL_MATCHERS)
        calls = {
            (service_keys[name], method)
            for name, record in service_members.items()
            for method in record.methods
        }
        entry.injects = sorted(injects)
        entry.service_calls = [ServiceCall(service, method) for service, method in sorted(calls)]
        return entry


def build_class_index(
    project_root: str | Path,
    service_catalog: Optional[ServiceCatalog] = None,
    capture_templates: bool = True,
) -> ClassIndexResult:
    """Index the classes under ``project_root``; see ClassIndexBuilder.build."""
    root = os.path.abspath(str(project_root))
    return ClassIndexBuilder(service_catalog, capture_templates).build(root)
