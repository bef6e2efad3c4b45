"""
Instance matching for injected class members.

Finds the members of a class whose declared type is bound to an import from
an allow-listed module. Matching compares type text only; no type checking
is involved, so aliases and re-exported types are not recognised.

Candidates come from two independent passes:
- constructor parameter properties (parameters with a storage modifier)
  followed by declared fields with a type annotation
- constructor parameters without a storage modifier, which are only
  visible inside the constructor body
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ng_explorer.analyzer.models import ClassDefinition


@dataclass
class InstanceRecord:
    """A matched member and the methods invoked on it."""

    property_name: str
    type_name: str
    methods: Set[str] = field(default_factory=set)

    def sorted_methods(self) -> List[str]:
        return sorted(self.methods)


def match_type(
    type_text: Optional[str],
    imported_local_names: Set[str],
    namespace_local_names: Set[str],
) -> Optional[str]:
    """
    Match declared type text against imported names.

    Args:
        type_text: Type annotation text, e.g. ``UserService`` or ``Api.Client``
        imported_local_names: Local names of named/default imports
        namespace_local_names: Local names of namespace imports

    Returns:
        The matched type name (right-hand side for namespace-qualified
        types), or None

    Examples:
        >>> match_type("Api.Client", set(), {"Api"})
        'Client'
    """
    if not type_text:
        return None
    if type_text in imported_local_names:
        return type_text
    parts = type_text.split(".")
    if len(parts) == 2 and parts[0] in namespace_local_names:
        return parts[1]
    return None


def collect_target_instances(
    cls: ClassDefinition,
    imported_local_names: Set[str],
    namespace_local_names: Set[str],
) -> Dict[str, InstanceRecord]:
    """
    Collect parameter properties and typed fields of allow-listed types.

    The first member with a given name wins.

    Args:
        cls: Class to scan
        imported_local_names: Local names of named/default imports
        namespace_local_names: Local names of namespace imports

    Returns:
        Mapping of member name to InstanceRecord, in declaration order
    """
    instances: Dict[str, InstanceRecord] = {}
    members = [p for p in cls.constructor_params if p.is_parameter_property] + cls.fields
    for member in members:
        type_name = match_type(member.type_text, imported_local_names, namespace_local_names)
        if type_name is None or member.name in instances:
            continue
        instances[member.name] = InstanceRecord(property_name=member.name, type_name=type_name)
    return instances


def collect_ctor_only_params(
    cls: ClassDefinition,
    imported_local_names: Set[str],
    namespace_local_names: Set[str],
) -> Dict[str, InstanceRecord]:
    """Collect constructor parameters without a storage modifier of allow-listed types."""
    params: Dict[str, InstanceRecord] = {}
    for param in cls.constructor_params:
        if param.is_parameter_property:
            continue
        type_name = match_type(param.type_text, imported_local_names, namespace_local_names)
        if type_name is None or param.name in params:
            continue
        params[param.name] = InstanceRecord(property_name=param.name, type_name=type_name)
    return params
