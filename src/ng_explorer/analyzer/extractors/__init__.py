"""Tree-sitter extractors populating SourceUnit results."""

from ng_explorer.analyzer.extractors.calls import CallExtractor
from ng_explorer.analyzer.extractors.classes import ClassExtractor
from ng_explorer.analyzer.extractors.decorators import DecoratorExtractor
from ng_explorer.analyzer.extractors.imports import ImportExtractor
from ng_explorer.analyzer.extractors.members import MemberExtractor

__all__ = [
    "CallExtractor",
    "ClassExtractor",
    "DecoratorExtractor",
    "ImportExtractor",
    "MemberExtractor",
]
