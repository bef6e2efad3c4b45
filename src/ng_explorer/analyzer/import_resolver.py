"""
Import resolution against a module allow-list.

Given a SourceUnit and the modules the caller cares about, finds which local
identifiers in the file are bound to those modules.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from ng_explorer.analyzer.models import SourceUnit

logger = logging.getLogger(__name__)


@dataclass
class ImportMatchResult:
    """Local names bound to allow-listed modules in one file."""

    imported_local_names: Set[str] = field(default_factory=set)  # named and default
    namespace_local_names: Set[str] = field(default_factory=set)
    matched_module_specifiers: List[str] = field(default_factory=list)
    imports_from_target_modules: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.imported_local_names and not self.namespace_local_names


def collect_target_imports(unit: SourceUnit, target_modules: Iterable[str]) -> ImportMatchResult:
    """
    Collect the local names a file imports from target modules.

    Named imports contribute their alias when one is given. Module
    specifiers are compared verbatim.

    Args:
        unit: Parsed source file
        target_modules: Allow-listed module specifiers

    Returns:
        ImportMatchResult; empty when nothing matches
    """
    targets = set(target_modules)
    result = ImportMatchResult()
    if not targets:
        return result

    for declaration in unit.imports:
        if declaration.module not in targets:
            continue

        if declaration.module not in result.matched_module_specifiers:
            result.matched_module_specifiers.append(declaration.module)

        for binding in declaration.bindings:
            if binding.kind == "namespace":
                result.namespace_local_names.add(binding.local_name)
            else:
                result.imported_local_names.add(binding.local_name)
            result.imports_from_target_modules.append(binding.local_name)

    logger.debug(
        f"{unit.file_path}: {len(result.imported_local_names)} names and "
        f"{len(result.namespace_local_names)} namespaces from target modules"
    )
    return result
