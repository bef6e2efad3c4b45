"""
Injected dependency extraction.

Resolves the declared types of a class's constructor parameters and fields
to class declarations anywhere in the project. Unlike instance matching,
no module allow-list applies: any resolvable in-project class counts.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ng_explorer.analyzer.models import ClassDefinition, MemberInfo, SourceUnit
from ng_explorer.analyzer.project import SourceProject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassRef:
    """Identity of a class: its file and name."""

    file: str
    class_name: str

    @property
    def key(self) -> str:
        return f"{self.file}#{self.class_name}"


class DependencyExtractor:
    """Finds the in-project classes a class depends on through injection."""

    def __init__(self, project: SourceProject):
        """Initialize the extractor.

        Args:
            project: Source cache used for type resolution
        """
        self.project = project

    def candidate_members(self, cls: ClassDefinition) -> List[MemberInfo]:
        """Constructor parameters and fields that reference a named type."""
        return [member for member in cls.members if member.type_name]

    def extract(
        self,
        unit: SourceUnit,
        cls: ClassDefinition,
        unresolved: Optional[List[str]] = None,
    ) -> List[ClassRef]:
        """
        Resolve the injected dependencies of a class.

        Args:
            unit: Unit declaring the class
            cls: Class to inspect
            unresolved: When given, receives the type names that did not
                resolve to an in-project class

        Returns:
            Distinct ClassRefs in member order
        """
        refs: List[ClassRef] = []
        for member in self.candidate_members(cls):
            target = self.project.resolve_class(unit, member.type_name)
            if target is None:
                logger.debug(f"{cls.name}.{member.name}: type {member.type_name} not resolved")
                if unresolved is not None and member.type_name not in unresolved:
                    unresolved.append(member.type_name)
                continue
            ref = ClassRef(file=target.file, class_name=target.name)
            if ref not in refs:
                refs.append(ref)
        return refs
