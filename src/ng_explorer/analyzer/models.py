"""
Data models for TypeScript source analysis results.

A SourceUnit is the parsed view of one file: its imports, re-exports and
class declarations. The resolution and traversal layers only query these
class/member-level records and never touch tree-sitter nodes directly.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

COMPONENT_DECORATOR = "Component"
INJECTABLE_DECORATOR = "Injectable"


@dataclass
class ImportBinding:
    """A local identifier bound by an import declaration."""

    local_name: str
    module: str
    kind: str  # "named", "default" or "namespace"
    imported_name: Optional[str] = None  # Exported name for named imports


@dataclass
class ImportDeclaration:
    """Information about an import statement."""

    module: str
    line_number: int
    bindings: List[ImportBinding] = field(default_factory=list)
    is_type_only: bool = False

    @property
    def is_relative(self) -> bool:
        return self.module.startswith(".")


@dataclass
class ReExport:
    """An export that forwards names, from another module or from this file.

    ``module`` is None for local export lists such as ``export { A as B }``.
    """

    module: Optional[str]
    line_number: int
    names: Dict[str, str] = field(default_factory=dict)  # exported -> original
    is_wildcard: bool = False
    namespace: Optional[str] = None  # export * as ns from '...'


@dataclass
class DecoratorInfo:
    """Information about a class decorator."""

    name: str
    line_number: int
    arguments: str  # Raw argument text, without parentheses
    # String-valued properties of an object literal first argument
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass
class MemberInfo:
    """A constructor parameter or a declared field of a class."""

    name: str
    kind: str  # "parameter" or "field"
    line_number: int
    type_text: Optional[str] = None
    type_name: Optional[str] = None  # Referenced type, generics stripped
    storage_modifier: Optional[str] = None  # private/protected/public/readonly

    @property
    def is_parameter_property(self) -> bool:
        """True for constructor parameters promoted to fields."""
        return self.kind == "parameter" and self.storage_modifier is not None


@dataclass
class CallSite:
    """A call expression found in an executable member."""

    callee_text: str
    line_number: int
    method_name: Optional[str] = None  # Property name when callee is a member access
    receiver_kind: Optional[str] = None  # "this_member", "identifier" or None
    receiver_name: Optional[str] = None


@dataclass
class ExecutableMember:
    """A constructor, method or accessor and the calls it makes."""

    name: str
    kind: str  # "constructor", "method", "getter" or "setter"
    line_number: int
    calls: List[CallSite] = field(default_factory=list)

    @property
    def is_constructor(self) -> bool:
        return self.kind == "constructor"


@dataclass
class ClassDefinition:
    """Information about a class declaration."""

    name: str
    file: str
    start_line: int
    end_line: int
    decorators: List[DecoratorInfo] = field(default_factory=list)
    is_exported: bool = False
    is_default_export: bool = False
    is_abstract: bool = False
    bases: List[str] = field(default_factory=list)
    constructor_params: List[MemberInfo] = field(default_factory=list)
    fields: List[MemberInfo] = field(default_factory=list)
    executables: List[ExecutableMember] = field(default_factory=list)

    def get_decorator(self, name: str) -> Optional[DecoratorInfo]:
        for decorator in self.decorators:
            if decorator.name == name:
                return decorator
        return None

    def has_decorator(self, name: str) -> bool:
        return self.get_decorator(name) is not None

    @property
    def is_component(self) -> bool:
        return self.has_decorator(COMPONENT_DECORATOR)

    @property
    def selector(self) -> Optional[str]:
        """Selector string of the component decorator, if a literal one is set."""
        decorator = self.get_decorator(COMPONENT_DECORATOR)
        if decorator is None:
            return None
        return decorator.properties.get("selector")

    @property
    def members(self) -> List[MemberInfo]:
        """Constructor parameters followed by declared fields."""
        return self.constructor_params + self.fields


@dataclass
class SourceUnit:
    """Complete analysis result for a single TypeScript file."""

    file_path: str
    content_hash: str
    imports: List[ImportDeclaration] = field(default_factory=list)
    re_exports: List[ReExport] = field(default_factory=list)
    classes: List[ClassDefinition] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    source: str = field(default="", repr=False)

    def get_class(self, name: str) -> Optional[ClassDefinition]:
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None

    def find_binding(self, local_name: str) -> Optional[ImportBinding]:
        """Find the import binding that introduces a local name."""
        for declaration in self.imports:
            for binding in declaration.bindings:
                if binding.local_name == local_name:
                    return binding
        return None

    def default_export_class(self) -> Optional[ClassDefinition]:
        for cls in self.classes:
            if cls.is_default_export:
                return cls
        for re_export in self.re_exports:
            if re_export.module is None and "default" in re_export.names:
                return self.get_class(re_export.names["default"])
        return None
